"""
Person detection on top of YOLOv8-style detector exports.

Framework-agnostic core: preprocessing, decoding and NMS work on NumPy arrays, so any
runtime that returns the raw (1, 4 + C, N) output can be plugged in. OpenCV is used for
resizing and image loading; inference runtimes live in `person_kit.backends`.
"""

from .config import PipelineConfig
from .errors import ImageLoadError, InvalidImageError, MalformedTensorError, PersonKitError
from .evaluation import (
    BenchmarkMetrics,
    GroundTruthImage,
    format_latency,
    load_ground_truth,
    match_detections,
    performance_grade,
)
from .io import read_image
from .nms import box_iou, nms_indices, suppress
from .postprocess import PersonPostprocessor
from .preprocess import PreprocessResult, preprocess_image, stretch_resize, to_blob
from .runtime import DetectionPipeline, find_project_root, load_pipeline, resolve_path
from .tensor import RawOutputTensor, strip_batch
from .types import BoundingBox, Detection

__all__ = [
    "BoundingBox",
    "Detection",
    "PipelineConfig",
    "PersonKitError",
    "ImageLoadError",
    "InvalidImageError",
    "MalformedTensorError",
    "PreprocessResult",
    "preprocess_image",
    "stretch_resize",
    "to_blob",
    "RawOutputTensor",
    "strip_batch",
    "PersonPostprocessor",
    "box_iou",
    "nms_indices",
    "suppress",
    "DetectionPipeline",
    "load_pipeline",
    "find_project_root",
    "resolve_path",
    "read_image",
    "BenchmarkMetrics",
    "GroundTruthImage",
    "format_latency",
    "load_ground_truth",
    "match_detections",
    "performance_grade",
]
