import logging
from typing import List, Tuple, Union

import numpy as np

from .config import PipelineConfig
from .errors import MalformedTensorError
from .nms import suppress
from .tensor import RawOutputTensor
from .types import BoundingBox, Detection

logger = logging.getLogger(__name__)


class PersonPostprocessor:
    """
    Turns a single-image YOLOv8-style output into person detections.

    Supported layout (per image, batch axis already removed):
    - (4 + C, N): rows cx, cy, w, h in model input pixels, then one score row per class,
      e.g. 84 x 8400 for the COCO-trained yolov8n export.

    Boxes are mapped back to the original image with independent x/y scales because the
    preprocessor stretches frames to the square input instead of letterboxing them.
    """

    def __init__(self, cfg: PipelineConfig):
        self.cfg = cfg

    def process(self, preds: Union[np.ndarray, RawOutputTensor], orig_size: Tuple[int, int]) -> List[Detection]:
        """
        Decode, filter and de-duplicate.

        Args:
            preds: model output for a single image, shape (4 + C, N)
            orig_size: (width, height) of the image before resizing
        """

        candidates = self.decode(preds, orig_size)
        kept = suppress(candidates, self.cfg.iou_threshold)
        logger.debug("nms kept %d of %d candidates", len(kept), len(candidates))
        return kept

    def decode(self, preds: Union[np.ndarray, RawOutputTensor], orig_size: Tuple[int, int]) -> List[Detection]:
        """
        Candidates of the target class at or above the confidence threshold, in original
        image pixels. Order follows the candidate columns.
        """

        tensor = self._as_tensor(preds)
        target = self.cfg.target_class_index
        if target >= tensor.num_classes:
            raise MalformedTensorError(
                f"target_class_index {target} has no score row: tensor has {tensor.num_classes} classes "
                f"(shape {tensor.shape})"
            )
        if tensor.num_candidates == 0:
            return []

        class_ids, scores = self._best_class(tensor)
        keep = (class_ids == target) & (scores >= self.cfg.confidence_threshold)
        if not np.any(keep):
            return []

        idx = np.flatnonzero(keep)
        boxes_xyxy = self._scale_boxes(tensor, idx, orig_size)
        boxes_xywh, valid = self._clamp_boxes(boxes_xyxy, orig_size)

        return [
            Detection(
                bbox=BoundingBox(x=int(x), y=int(y), width=int(w), height=int(h)),
                confidence=float(score),
                class_id=target,
            )
            for (x, y, w, h), score in zip(boxes_xywh[valid], scores[idx][valid])
        ]

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #
    def _as_tensor(self, preds: Union[np.ndarray, RawOutputTensor]) -> RawOutputTensor:
        if isinstance(preds, RawOutputTensor):
            if self.cfg.num_classes is not None and preds.num_classes != self.cfg.num_classes:
                raise MalformedTensorError(
                    f"Expected {4 + self.cfg.num_classes} rows (4 + {self.cfg.num_classes} classes), "
                    f"got shape {preds.shape}"
                )
            return preds
        return RawOutputTensor.from_array(preds, num_classes=self.cfg.num_classes)

    @staticmethod
    def _best_class(tensor: RawOutputTensor) -> Tuple[np.ndarray, np.ndarray]:
        """
        Per candidate: index and value of the highest class score.

        argmax returns the first maximum, so ties go to the lowest class index. A column whose
        best score is not positive gets class -1 and never matches a target.
        """

        class_scores = tensor.class_scores()
        class_ids = np.argmax(class_scores, axis=0)
        scores = class_scores[class_ids, np.arange(tensor.num_candidates)].astype(np.float64)
        class_ids = np.where(scores > 0, class_ids, -1)
        return class_ids, scores

    def _scale_boxes(self, tensor: RawOutputTensor, idx: np.ndarray, orig_size: Tuple[int, int]) -> np.ndarray:
        """
        cxcywh in input space -> integer xyxy in original image space, not yet clamped.
        """

        orig_w, orig_h = orig_size
        size = float(self.cfg.input_resolution)
        x_scale = orig_w / size
        y_scale = orig_h / size

        cx = tensor.row(0)[idx].astype(np.float64)
        cy = tensor.row(1)[idx].astype(np.float64)
        w = tensor.row(2)[idx].astype(np.float64)
        h = tensor.row(3)[idx].astype(np.float64)

        x1 = np.trunc((cx - w / 2) * x_scale)
        y1 = np.trunc((cy - h / 2) * y_scale)
        x2 = np.trunc((cx + w / 2) * x_scale)
        y2 = np.trunc((cy + h / 2) * y_scale)

        return np.stack([x1, y1, x2, y2], axis=1).astype(np.int64)

    @staticmethod
    def _clamp_boxes(boxes: np.ndarray, orig_size: Tuple[int, int]) -> Tuple[np.ndarray, np.ndarray]:
        """
        xyxy -> xywh with the top-left corner moved to >= 0 and the size capped at the image size.

        Width and height come from the unclamped corners, so a box hanging off the left edge
        keeps its full width. Returns the boxes and a mask of the ones worth keeping: positive
        size and at least partly inside the image.
        """

        orig_w, orig_h = orig_size
        x1, y1, x2, y2 = boxes.T
        widths = np.minimum(x2 - x1, orig_w)
        heights = np.minimum(y2 - y1, orig_h)
        valid = (widths > 0) & (heights > 0)
        valid &= (x2 > 0) & (y2 > 0) & (x1 < orig_w) & (y1 < orig_h)

        xywh = np.stack([np.maximum(x1, 0), np.maximum(y1, 0), widths, heights], axis=1)
        return xywh, valid
