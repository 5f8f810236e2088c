from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import numpy as np

from .config import PipelineConfig
from .io import read_image
from .postprocess import PersonPostprocessor
from .preprocess import PreprocessResult, preprocess_image
from .tensor import strip_batch
from .types import BoundingBox, Detection


PathLike = Union[str, Path]

logger = logging.getLogger(__name__)


def find_project_root(
    start: Optional[PathLike] = None,
    markers: Sequence[str] = ("pyproject.toml", ".git"),
) -> Path:
    """
    Best-effort project root discovery.

    Useful when models live in `<root>/models` and scripts are started from a subdirectory.
    """

    p = Path(start) if start is not None else Path.cwd()
    p = p.resolve()

    if p.is_file():
        p = p.parent

    for parent in (p, *p.parents):
        for m in markers:
            if (parent / m).exists():
                return parent
    return p


def resolve_path(path: PathLike, root: Optional[PathLike] = "auto") -> Path:
    """
    Resolve `path` to an absolute Path.

    - Absolute paths are returned as-is.
    - Relative paths are resolved against `root` if provided, the project root otherwise.
    """

    p = Path(path)
    if p.is_absolute():
        return p

    if root == "auto" or root is None:
        base = find_project_root()
    else:
        base = Path(root).resolve()

    return (base / p).resolve()


class DetectionPipeline:
    """
    Person detection: stretch resize -> inference -> decode -> NMS.

    Expects BGR images (OpenCV-style) as `np.ndarray` and returns detections in original
    image pixels.

    Thread safety: every stage except inference is a pure function that allocates its own
    buffers, so one pipeline may serve several threads. The inference callable is shared.
    Pass `infer_lock` when the runtime behind it does not allow concurrent calls; every
    inference then runs under that lock.
    """

    def __init__(
        self,
        infer_fn: Callable[[np.ndarray], np.ndarray],
        *,
        config: PipelineConfig = PipelineConfig(),
        backend: Optional[object] = None,
        backend_name: Optional[str] = None,
        infer_lock: Optional[threading.Lock] = None,
    ):
        self._infer_fn = infer_fn
        self._infer_lock = infer_lock
        self.config = config
        self.backend = backend
        self.backend_name = backend_name
        self.post = PersonPostprocessor(config)

    def preprocess(self, image_bgr: np.ndarray) -> PreprocessResult:
        return preprocess_image(image_bgr, self.config.input_resolution, swap_rb=self.config.swap_rb)

    def infer(self, blob: np.ndarray) -> np.ndarray:
        if self._infer_lock is None:
            return self._infer_fn(blob)
        with self._infer_lock:
            return self._infer_fn(blob)

    def detect(self, image_bgr: np.ndarray) -> List[Detection]:
        prep = self.preprocess(image_bgr)
        preds = strip_batch(self.infer(prep.blob))
        detections = self.post.process(preds, orig_size=prep.orig_size)
        logger.debug("detected %d person(s) in %dx%d image", len(detections), *prep.orig_size)
        return detections

    __call__ = detect

    def detect_largest(self, image_bgr: np.ndarray) -> BoundingBox:
        """
        Box of the largest person, or the whole image when nobody is found.
        """

        detections = self.detect(image_bgr)
        if not detections:
            h, w = image_bgr.shape[:2]
            return BoundingBox(0, 0, int(w), int(h))
        # max() keeps the first of equal areas.
        return max(detections, key=lambda d: d.bbox.area).bbox

    def detect_file(self, image_path: PathLike) -> List[Detection]:
        return self.detect(read_image(image_path))

    def detect_largest_file(self, image_path: PathLike) -> BoundingBox:
        return self.detect_largest(read_image(image_path))

    def close(self) -> None:
        close = getattr(self.backend, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "DetectionPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def load_pipeline(
    model_path: PathLike,
    *,
    backend: Optional[str] = None,
    root: Optional[PathLike] = "auto",
    config: PipelineConfig = PipelineConfig(),
    onnx_providers: Optional[Sequence[str]] = None,
    onnx_input_name: Optional[str] = None,
    onnx_output_name: Optional[str] = None,
    torch_device: str = "cpu",
    torch_half: bool = False,
    torch_output_index: int = 0,
) -> DetectionPipeline:
    """
    Create a detection pipeline for a model on disk.

        with load_pipeline("models/yolov8n.onnx") as pipe:
            people = pipe.detect_file("photo.jpg")

    Args:
        model_path: path to the exported model; relative paths resolve against project root by default
        backend: "onnxruntime" or "torchscript"; None infers it from the extension
        root: base directory for resolving relative model paths ("auto" uses best-effort project root)
    """

    resolved = resolve_path(model_path, root=root)
    chosen = backend
    if chosen is None:
        suffix = resolved.suffix.lower()
        if suffix == ".onnx":
            chosen = "onnxruntime"
        elif suffix in {".torchscript", ".ts", ".pt"}:
            chosen = "torchscript"
        else:
            raise ValueError(
                f"Could not infer backend from extension '{suffix}'. Pass backend=... explicitly."
            )

    chosen = chosen.lower()
    if chosen == "onnxruntime":
        from .backends.onnxruntime_backend import OnnxRuntimeBackend, OnnxRuntimeBackendConfig

        ort_backend = OnnxRuntimeBackend(
            resolved,
            OnnxRuntimeBackendConfig(
                providers=onnx_providers,
                input_name=onnx_input_name,
                output_name=onnx_output_name,
            ),
        )
        return DetectionPipeline(ort_backend.infer, config=config, backend=ort_backend, backend_name="onnxruntime")

    if chosen == "torchscript":
        from .backends.torchscript_backend import TorchScriptBackend, TorchScriptBackendConfig

        ts_backend = TorchScriptBackend(
            resolved,
            TorchScriptBackendConfig(device=torch_device, half=torch_half, output_index=torch_output_index),
        )
        return DetectionPipeline(
            ts_backend.infer,
            config=config,
            backend=ts_backend,
            backend_name="torchscript",
            infer_lock=threading.Lock(),
        )

    raise ValueError(f"Unsupported backend: {backend!r}")
