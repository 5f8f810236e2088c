import unittest

from person_kit.config import PipelineConfig
from person_kit.types import BoundingBox, Detection


class TestPipelineConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        cfg = PipelineConfig()
        self.assertEqual(cfg.input_resolution, 640)
        self.assertEqual(cfg.confidence_threshold, 0.25)
        self.assertEqual(cfg.iou_threshold, 0.45)
        self.assertEqual(cfg.target_class_index, 0)
        self.assertIsNone(cfg.num_classes)
        self.assertEqual(cfg.input_shape, (1, 3, 640, 640))

    def test_invalid_values(self) -> None:
        bad = [
            {"input_resolution": 0},
            {"input_resolution": 640.0},
            {"confidence_threshold": -0.1},
            {"confidence_threshold": 1.5},
            {"iou_threshold": 2.0},
            {"target_class_index": -1},
            {"num_classes": 0},
            {"num_classes": 3, "target_class_index": 3},
        ]
        for kwargs in bad:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ValueError):
                    PipelineConfig(**kwargs)

    def test_is_immutable(self) -> None:
        cfg = PipelineConfig()
        with self.assertRaises(Exception):
            cfg.iou_threshold = 0.9  # type: ignore[misc]


class TestDetectionTypes(unittest.TestCase):
    def test_bbox_helpers(self) -> None:
        box = BoundingBox(10, 20, 30, 40)
        self.assertEqual(box.as_xyxy(), (10, 20, 40, 60))
        self.assertEqual(box.as_xywh(), (10, 20, 30, 40))
        self.assertEqual(box.area, 1200)
        self.assertFalse(box.is_empty())
        self.assertTrue(BoundingBox(0, 0, 0, 5).is_empty())

    def test_iou(self) -> None:
        a = BoundingBox(0, 0, 10, 10)
        self.assertEqual(a.iou(a), 1.0)
        self.assertAlmostEqual(a.iou(BoundingBox(5, 0, 10, 10)), 1.0 / 3.0)
        self.assertEqual(a.iou(BoundingBox(10, 0, 10, 10)), 0.0)
        self.assertEqual(BoundingBox(0, 0, 0, 0).iou(BoundingBox(0, 0, 0, 0)), 0.0)

    def test_rendering(self) -> None:
        det = Detection(BoundingBox(1, 2, 3, 4), 0.456)
        self.assertEqual(str(det), "Person[bbox=(1,2,3,4), conf=0.46]")


if __name__ == "__main__":
    unittest.main()
