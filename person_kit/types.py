from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned box in original image pixels: top-left corner plus size.
    """

    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def as_xywh(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.width, self.height

    def as_xyxy(self) -> Tuple[int, int, int, int]:
        return self.x, self.y, self.x2, self.y2

    def iou(self, other: "BoundingBox") -> float:
        """
        Intersection over union; 0.0 when the boxes do not overlap.
        """

        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x2, other.x2)
        y2 = min(self.y2, other.y2)
        if x2 <= x1 or y2 <= y1:
            return 0.0

        inter = float((x2 - x1) * (y2 - y1))
        union = float(self.area + other.area) - inter
        if union <= 0.0:
            return 0.0
        return inter / union

    def __str__(self) -> str:
        return f"({self.x},{self.y},{self.width},{self.height})"


@dataclass(frozen=True)
class Detection:
    """
    One person found in an image. Built by the decoder, never mutated afterwards.
    """

    bbox: BoundingBox
    confidence: float
    class_id: int = 0

    def __str__(self) -> str:
        return f"Person[bbox={self.bbox}, conf={self.confidence:.2f}]"
