from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

Candidate = Tuple[float, float, float, float, Sequence[float]]


def make_output(candidates: Sequence[Candidate], num_classes: int = 3) -> np.ndarray:
    """
    Build a (4 + C, N) YOLOv8-style output from (cx, cy, w, h, class_scores) tuples.
    """

    out = np.zeros((4 + num_classes, len(candidates)), dtype=np.float32)
    for i, (cx, cy, w, h, scores) in enumerate(candidates):
        out[0:4, i] = [cx, cy, w, h]
        out[4:, i] = scores
    return out
