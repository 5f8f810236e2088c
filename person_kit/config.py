from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PipelineConfig:
    """
    Settings shared by preprocessing, decoding and NMS.

    - input_resolution: square side the model was exported with (640 for YOLOv8n)
    - confidence_threshold: minimum class score kept by the decoder
    - iou_threshold: overlap above which the lower-scored box is suppressed
    - target_class_index: score row to keep (0 is "person" in COCO)
    - num_classes: expected number of score rows; None accepts any count covering the target
    - swap_rb: convert BGR input to the RGB order the network was trained on
    """

    input_resolution: int = 640
    confidence_threshold: float = 0.25
    iou_threshold: float = 0.45
    target_class_index: int = 0
    num_classes: Optional[int] = None
    swap_rb: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.input_resolution, bool) or not isinstance(self.input_resolution, int):
            raise ValueError("input_resolution must be an integer")
        if self.input_resolution < 1:
            raise ValueError("input_resolution must be >= 1")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be in [0, 1]")
        if not 0.0 <= self.iou_threshold <= 1.0:
            raise ValueError("iou_threshold must be in [0, 1]")
        if self.target_class_index < 0:
            raise ValueError("target_class_index must be >= 0")
        if self.num_classes is not None:
            if self.num_classes < 1:
                raise ValueError("num_classes must be >= 1")
            if self.target_class_index >= self.num_classes:
                raise ValueError(
                    f"target_class_index {self.target_class_index} out of range for num_classes={self.num_classes}"
                )

    @property
    def input_shape(self) -> tuple:
        """NCHW shape the inference backend receives."""
        return (1, 3, self.input_resolution, self.input_resolution)
