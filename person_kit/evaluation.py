"""
Accuracy benchmark for person detection against hand-labelled ground truth.

Ground truth file format:

    {"annotations": [
        {"filename": "group.jpg",
         "persons": [{"bbox": {"x": 10, "y": 20, "width": 50, "height": 120}}]}
    ]}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence, Set, Tuple

import numpy as np

from .nms import box_iou
from .types import BoundingBox, Detection

DEFAULT_MATCH_IOU = 0.5


@dataclass(frozen=True)
class GroundTruthImage:
    filename: str
    persons: Tuple[BoundingBox, ...] = ()


@dataclass(frozen=True)
class MatchResult:
    true_positives: int
    false_positives: int
    false_negatives: int
    matched_ious: Tuple[float, ...] = ()


@dataclass
class BenchmarkMetrics:
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    matched_ious: List[float] = field(default_factory=list)

    def add(self, result: MatchResult) -> None:
        self.true_positives += result.true_positives
        self.false_positives += result.false_positives
        self.false_negatives += result.false_negatives
        self.matched_ious.extend(result.matched_ious)

    @property
    def precision(self) -> float:
        total = self.true_positives + self.false_positives
        return 0.0 if total == 0 else self.true_positives / total

    @property
    def recall(self) -> float:
        total = self.true_positives + self.false_negatives
        return 0.0 if total == 0 else self.true_positives / total

    @property
    def f1_score(self) -> float:
        p, r = self.precision, self.recall
        return 0.0 if p + r == 0 else 2 * p * r / (p + r)

    @property
    def average_iou(self) -> float:
        return 0.0 if not self.matched_ious else sum(self.matched_ious) / len(self.matched_ious)


def match_detections(
    detections: Sequence[Detection],
    truths: Sequence[BoundingBox],
    iou_threshold: float = DEFAULT_MATCH_IOU,
) -> MatchResult:
    """
    Greedy one-to-one matching in detection order.

    Each detection takes the still-unmatched truth box it overlaps most. It counts as a
    true positive when that overlap reaches `iou_threshold`, otherwise as a false positive.
    Truth boxes left over are false negatives.
    """

    matched: Set[int] = set()
    ious: List[float] = []
    tp = fp = 0

    for det in detections:
        best_iou = 0.0
        best_idx = -1
        for j, truth in enumerate(truths):
            if j in matched:
                continue
            iou = box_iou(det.bbox, truth)
            if iou > best_iou:
                best_iou = iou
                best_idx = j

        if best_idx >= 0 and best_iou >= iou_threshold:
            tp += 1
            ious.append(best_iou)
            matched.add(best_idx)
        else:
            fp += 1

    return MatchResult(
        true_positives=tp,
        false_positives=fp,
        false_negatives=len(truths) - len(matched),
        matched_ious=tuple(ious),
    )


def performance_grade(f1_score: float) -> str:
    if f1_score >= 0.8:
        return "A (Excellent - Production Ready)"
    if f1_score >= 0.6:
        return "B (Good - Usable)"
    if f1_score >= 0.4:
        return "C (Fair - Needs Improvement)"
    if f1_score >= 0.2:
        return "D (Poor)"
    return "F (Failed - Not Usable)"


def format_latency(label: str, values_s: Sequence[float]) -> str:
    """
    One-line latency report from per-image timings in seconds.
    """

    if not values_s:
        raise ValueError("No timings provided.")
    ms = np.asarray(values_s, dtype=np.float64) * 1000.0
    p50, p95 = np.percentile(ms, [50, 95])
    return f"{label}: n={ms.size} mean={ms.mean():.3f}ms p50={p50:.3f}ms p95={p95:.3f}ms max={ms.max():.3f}ms"


def _require_int(payload: Dict[str, Any], key: str) -> int:
    if key not in payload:
        raise ValueError(f"Missing required key: {key}")
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return int(value)


def _parse_bbox(payload: Any) -> BoundingBox:
    if not isinstance(payload, dict):
        raise ValueError("bbox must be a JSON object")
    bbox = BoundingBox(
        x=_require_int(payload, "x"),
        y=_require_int(payload, "y"),
        width=_require_int(payload, "width"),
        height=_require_int(payload, "height"),
    )
    if bbox.width < 0 or bbox.height < 0:
        raise ValueError(f"bbox width/height must be >= 0, got {bbox.as_xywh()}")
    return bbox


def load_ground_truth(path: Path) -> List[GroundTruthImage]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ground truth not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid ground truth JSON: {path}") from exc
    if not isinstance(payload, dict) or not isinstance(payload.get("annotations"), list):
        raise ValueError("Ground truth must be a JSON object with an 'annotations' list")

    images: List[GroundTruthImage] = []
    for entry in payload["annotations"]:
        if not isinstance(entry, dict):
            raise ValueError("Each annotation must be a JSON object")
        filename = entry.get("filename")
        if not isinstance(filename, str) or not filename:
            raise ValueError("annotation filename must be a non-empty string")
        persons = entry.get("persons", [])
        if not isinstance(persons, list):
            raise ValueError(f"persons must be a list ({filename})")
        boxes = []
        for person in persons:
            if not isinstance(person, dict) or "bbox" not in person:
                raise ValueError(f"Missing required key: bbox ({filename})")
            boxes.append(_parse_bbox(person["bbox"]))
        images.append(GroundTruthImage(filename=filename, persons=tuple(boxes)))
    return images
