from typing import List, Sequence

import numpy as np

from .types import BoundingBox, Detection


def box_iou(a: BoundingBox, b: BoundingBox) -> float:
    return a.iou(b)


def nms_indices(boxes_xywh: np.ndarray, scores: np.ndarray, iou_threshold: float) -> np.ndarray:
    """
    Greedy NumPy NMS. Expects boxes shape (N, 4) as x, y, w, h and scores shape (N,).
    Returns indices of boxes to keep, highest score first. Equal scores keep input order.
    """

    if boxes_xywh.size == 0:
        return np.empty((0,), dtype=np.int64)

    boxes = np.asarray(boxes_xywh, dtype=np.float64)
    x1 = boxes[:, 0]
    y1 = boxes[:, 1]
    x2 = x1 + boxes[:, 2]
    y2 = y1 + boxes[:, 3]
    areas = boxes[:, 2] * boxes[:, 3]

    order = np.argsort(-np.asarray(scores, dtype=np.float64), kind="stable")
    keep = []

    while order.size > 0:
        i = order[0]
        keep.append(i)
        rest = order[1:]

        xx1 = np.maximum(x1[i], x1[rest])
        yy1 = np.maximum(y1[i], y1[rest])
        xx2 = np.minimum(x2[i], x2[rest])
        yy2 = np.minimum(y2[i], y2[rest])

        w = xx2 - xx1
        h = yy2 - yy1
        overlap = (w > 0) & (h > 0)
        inter = np.where(overlap, w * h, 0.0)
        union = areas[i] + areas[rest] - inter
        iou = np.divide(inter, union, out=np.zeros_like(inter), where=union > 0)

        order = rest[iou <= iou_threshold]

    return np.array(keep, dtype=np.int64)


def suppress(detections: Sequence[Detection], iou_threshold: float) -> List[Detection]:
    """
    Drop detections that overlap a higher-confidence detection by more than `iou_threshold`.

    Result is ordered by descending confidence. Degenerate boxes are expected to have
    been removed by the decoder already.
    """

    if not detections:
        return []

    boxes = np.array([d.bbox.as_xywh() for d in detections], dtype=np.float64)
    scores = np.array([d.confidence for d in detections], dtype=np.float64)
    keep = nms_indices(boxes, scores, iou_threshold)
    return [detections[int(i)] for i in keep]
