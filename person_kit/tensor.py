from __future__ import annotations

from typing import Optional

import numpy as np

from .errors import MalformedTensorError

BOX_ROWS = 4


def strip_batch(preds: np.ndarray) -> np.ndarray:
    """
    Drop the leading batch axis of a `(1, 4 + C, N)` model output.
    """

    p = np.asarray(preds)
    if p.ndim == 3:
        if p.shape[0] != 1:
            raise MalformedTensorError(f"Batch > 1 is not supported (got shape {p.shape}). Pass one image at a time.")
        return p[0]
    if p.ndim == 2:
        return p
    raise MalformedTensorError(f"Expected output of shape (1, 4 + C, N) or (4 + C, N), got {p.shape}")


class RawOutputTensor:
    """
    Detector output held as one flat float32 buffer.

    Logical layout is `(num_attributes, num_candidates)`: rows 0..3 are cx, cy, w, h in
    model-input pixels, rows 4.. are one score row per class. Row `r` occupies
    `data[r * num_candidates:(r + 1) * num_candidates]`.
    """

    __slots__ = ("data", "num_attributes", "num_candidates")

    def __init__(self, data: np.ndarray, num_attributes: int, num_candidates: int):
        flat = np.ascontiguousarray(data, dtype=np.float32).reshape(-1)
        if num_attributes < BOX_ROWS + 1:
            raise MalformedTensorError(
                f"Expected at least {BOX_ROWS + 1} rows (4 box rows + class scores), got {num_attributes}"
            )
        if flat.size != num_attributes * num_candidates:
            raise MalformedTensorError(
                f"Buffer of {flat.size} values does not match shape ({num_attributes}, {num_candidates})"
            )
        self.data = flat
        self.num_attributes = int(num_attributes)
        self.num_candidates = int(num_candidates)

    @classmethod
    def from_array(cls, preds: np.ndarray, num_classes: Optional[int] = None) -> "RawOutputTensor":
        p = np.asarray(preds)
        if p.ndim != 2:
            raise MalformedTensorError(f"Expected a rank-2 (4 + C, N) tensor, got shape {p.shape}")
        rows, cols = p.shape
        if num_classes is not None and rows != BOX_ROWS + num_classes:
            raise MalformedTensorError(
                f"Expected {BOX_ROWS + num_classes} rows (4 + {num_classes} classes), got shape {p.shape}"
            )
        return cls(p, rows, cols)

    @property
    def num_classes(self) -> int:
        return self.num_attributes - BOX_ROWS

    @property
    def shape(self) -> tuple:
        return self.num_attributes, self.num_candidates

    def offset(self, row: int, col: int) -> int:
        return row * self.num_candidates + col

    def row(self, r: int) -> np.ndarray:
        if not 0 <= r < self.num_attributes:
            raise IndexError(f"row {r} out of range (num_attributes={self.num_attributes})")
        start = r * self.num_candidates
        return self.data[start:start + self.num_candidates]

    def rows(self, start: int, stop: int) -> np.ndarray:
        """(stop - start, num_candidates) view over consecutive rows."""
        if not 0 <= start <= stop <= self.num_attributes:
            raise IndexError(f"rows [{start}, {stop}) out of range (num_attributes={self.num_attributes})")
        return self.data[start * self.num_candidates:stop * self.num_candidates].reshape(
            stop - start, self.num_candidates
        )

    def value(self, row: int, col: int) -> float:
        return float(self.data[self.offset(row, col)])

    def class_scores(self) -> np.ndarray:
        return self.rows(BOX_ROWS, self.num_attributes)

    def __repr__(self) -> str:
        return f"RawOutputTensor(num_attributes={self.num_attributes}, num_candidates={self.num_candidates})"
