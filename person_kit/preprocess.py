from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .errors import InvalidImageError


@dataclass(frozen=True)
class PreprocessResult:
    blob: np.ndarray
    orig_size: Tuple[int, int]


def _validate_image(image: np.ndarray) -> None:
    if image is None or not hasattr(image, "shape"):
        raise InvalidImageError("image must be a NumPy array (BGR).")
    if image.ndim != 3 or image.shape[2] != 3:
        raise InvalidImageError(f"Expected image shape (H, W, 3), got {image.shape}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidImageError(f"Image has zero width or height: shape={image.shape}")
    if image.dtype != np.uint8:
        raise InvalidImageError(f"Expected 8-bit samples (uint8), got dtype={image.dtype}")


def stretch_resize(image: np.ndarray, size: int) -> np.ndarray:
    """
    Resize to exactly `size x size`, ignoring aspect ratio.

    The exported detector was fed stretched frames, so decoded boxes are mapped back
    with independent x/y scales. Letterboxing here would shift every box.
    """
    try:
        import cv2  # type: ignore
    except Exception as e:  # pragma: no cover
        raise ImportError("OpenCV is required for stretch_resize(). Install with `pip install opencv-python`.") from e

    h, w = image.shape[:2]
    if (w, h) == (size, size):
        return image
    return cv2.resize(image, (size, size), interpolation=cv2.INTER_LINEAR)


def to_blob(image: np.ndarray, swap_rb: bool = True) -> np.ndarray:
    """
    HWC uint8 -> contiguous (1, 3, H, W) float32 in [0, 1], channel-planar.
    """
    if swap_rb:
        image = image[:, :, ::-1]
    blob = image.astype(np.float32) / 255.0
    blob = np.transpose(blob, (2, 0, 1))[None, ...]
    return np.ascontiguousarray(blob)


def preprocess_image(image_bgr: np.ndarray, input_resolution: int, swap_rb: bool = True) -> PreprocessResult:
    _validate_image(image_bgr)
    orig_h, orig_w = image_bgr.shape[:2]
    resized = stretch_resize(image_bgr, input_resolution)
    return PreprocessResult(blob=to_blob(resized, swap_rb=swap_rb), orig_size=(orig_w, orig_h))
