from __future__ import annotations

from pathlib import Path
from typing import Union

import numpy as np

from .errors import ImageLoadError

PathLike = Union[str, Path]


def read_image(path: PathLike) -> np.ndarray:
    """
    Load an image from disk as an OpenCV BGR uint8 array.
    """

    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for read_image(). Install with `pip install opencv-python`.") from e

    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None or img.size == 0:
        raise ImageLoadError(f"Failed to load image: {path}")
    return img
