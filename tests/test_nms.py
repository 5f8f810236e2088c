import unittest

import numpy as np

from person_kit.nms import box_iou, nms_indices, suppress
from person_kit.types import BoundingBox, Detection


def _det(x: int, y: int, w: int, h: int, conf: float) -> Detection:
    return Detection(bbox=BoundingBox(x, y, w, h), confidence=conf)


class TestBoxIou(unittest.TestCase):
    def test_identical_boxes(self) -> None:
        a = BoundingBox(10, 10, 20, 40)
        self.assertEqual(box_iou(a, a), 1.0)

    def test_partial_overlap(self) -> None:
        a = BoundingBox(0, 0, 10, 10)
        b = BoundingBox(5, 0, 10, 10)
        # inter 50, union 150
        self.assertAlmostEqual(box_iou(a, b), 1.0 / 3.0)
        self.assertAlmostEqual(a.iou(b), box_iou(b, a))

    def test_touching_edges_do_not_overlap(self) -> None:
        self.assertEqual(box_iou(BoundingBox(0, 0, 10, 10), BoundingBox(10, 0, 10, 10)), 0.0)
        self.assertEqual(box_iou(BoundingBox(0, 0, 10, 10), BoundingBox(0, 10, 10, 10)), 0.0)

    def test_disjoint(self) -> None:
        self.assertEqual(box_iou(BoundingBox(0, 0, 5, 5), BoundingBox(100, 100, 5, 5)), 0.0)


class TestSuppress(unittest.TestCase):
    def test_identical_geometry_keeps_highest(self) -> None:
        low = _det(270, 220, 100, 200, 0.6)
        high = _det(270, 220, 100, 200, 0.9)
        self.assertEqual(suppress([low, high], iou_threshold=0.45), [high])

    def test_disjoint_boxes_sorted_by_confidence(self) -> None:
        a = _det(0, 0, 10, 10, 0.3)
        b = _det(100, 100, 10, 10, 0.8)
        c = _det(200, 200, 10, 10, 0.5)
        self.assertEqual(suppress([a, b, c], iou_threshold=0.45), [b, c, a])

    def test_iou_equal_to_threshold_is_kept(self) -> None:
        a = _det(0, 0, 10, 10, 0.9)
        b = _det(0, 0, 10, 5, 0.8)  # IoU exactly 0.5
        self.assertEqual(suppress([a, b], iou_threshold=0.5), [a, b])
        self.assertEqual(suppress([a, b], iou_threshold=0.49), [a])

    def test_suppressed_box_does_not_suppress_others(self) -> None:
        a = _det(0, 0, 10, 10, 0.9)
        b = _det(4, 0, 10, 10, 0.8)  # overlaps a and c
        c = _det(8, 0, 10, 10, 0.7)  # IoU with a is 2/18
        self.assertEqual(suppress([c, b, a], iou_threshold=0.3), [a, c])

    def test_equal_confidence_keeps_first(self) -> None:
        first = _det(0, 0, 10, 10, 0.5)
        second = _det(1, 1, 10, 10, 0.5)
        self.assertEqual(suppress([first, second], iou_threshold=0.45), [first])

    def test_empty(self) -> None:
        self.assertEqual(suppress([], iou_threshold=0.45), [])

    def test_random_boxes_respect_threshold(self) -> None:
        rng = np.random.default_rng(0)
        xy = rng.integers(0, 300, size=(150, 2))
        wh = rng.integers(5, 80, size=(150, 2))
        conf = rng.uniform(0, 1, size=150)
        dets = [
            _det(int(x), int(y), int(w), int(h), float(c)) for (x, y), (w, h), c in zip(xy, wh, conf)
        ]
        thr = 0.45
        kept = suppress(dets, iou_threshold=thr)

        confidences = [d.confidence for d in kept]
        self.assertEqual(confidences, sorted(confidences, reverse=True))
        for i, a in enumerate(kept):
            for b in kept[i + 1:]:
                self.assertLessEqual(box_iou(a.bbox, b.bbox), thr)

        # Every dropped box is explained by a kept box with higher confidence.
        kept_ids = {id(d) for d in kept}
        for d in dets:
            if id(d) in kept_ids:
                continue
            self.assertTrue(
                any(k.confidence >= d.confidence and box_iou(k.bbox, d.bbox) > thr for k in kept)
            )

    def test_suppress_is_pure(self) -> None:
        dets = [_det(0, 0, 10, 10, 0.4), _det(0, 0, 10, 10, 0.9)]
        snapshot = list(dets)
        suppress(dets, iou_threshold=0.45)
        self.assertEqual(dets, snapshot)


class TestNmsIndices(unittest.TestCase):
    def test_returns_indices_by_descending_score(self) -> None:
        boxes = np.array([[0, 0, 10, 10], [1, 1, 10, 10], [50, 50, 10, 10]], dtype=np.float32)
        scores = np.array([0.5, 0.9, 0.7], dtype=np.float32)
        keep = nms_indices(boxes, scores, iou_threshold=0.45)
        self.assertEqual(keep.tolist(), [1, 2])

    def test_empty(self) -> None:
        keep = nms_indices(np.zeros((0, 4)), np.zeros((0,)), iou_threshold=0.45)
        self.assertEqual(keep.shape, (0,))


if __name__ == "__main__":
    unittest.main()
