import unittest

import numpy as np

from person_kit.errors import MalformedTensorError
from person_kit.tensor import RawOutputTensor, strip_batch


class TestRawOutputTensor(unittest.TestCase):
    def setUp(self) -> None:
        self.array = np.arange(6 * 4, dtype=np.float32).reshape(6, 4)
        self.tensor = RawOutputTensor.from_array(self.array)

    def test_shape(self) -> None:
        self.assertEqual(self.tensor.shape, (6, 4))
        self.assertEqual(self.tensor.num_classes, 2)
        self.assertEqual(self.tensor.data.ndim, 1)

    def test_row_and_value_follow_strides(self) -> None:
        self.assertTrue(np.array_equal(self.tensor.row(2), self.array[2]))
        self.assertEqual(self.tensor.value(3, 1), float(self.array[3, 1]))
        self.assertEqual(self.tensor.offset(3, 1), 13)

    def test_rows_view(self) -> None:
        self.assertTrue(np.array_equal(self.tensor.rows(1, 3), self.array[1:3]))
        self.assertTrue(np.array_equal(self.tensor.class_scores(), self.array[4:]))

    def test_row_out_of_range(self) -> None:
        with self.assertRaises(IndexError):
            self.tensor.row(6)
        with self.assertRaises(IndexError):
            self.tensor.rows(3, 7)

    def test_from_array_checks_class_count(self) -> None:
        RawOutputTensor.from_array(self.array, num_classes=2)
        with self.assertRaises(MalformedTensorError):
            RawOutputTensor.from_array(self.array, num_classes=80)

    def test_buffer_size_must_match_shape(self) -> None:
        with self.assertRaises(MalformedTensorError):
            RawOutputTensor(np.zeros(10, dtype=np.float32), 6, 4)


class TestStripBatch(unittest.TestCase):
    def test_drops_single_batch(self) -> None:
        p = np.zeros((1, 84, 8400), dtype=np.float32)
        self.assertEqual(strip_batch(p).shape, (84, 8400))

    def test_passes_through_rank_two(self) -> None:
        p = np.zeros((84, 10), dtype=np.float32)
        self.assertEqual(strip_batch(p).shape, (84, 10))

    def test_rejects_other_shapes(self) -> None:
        with self.assertRaises(MalformedTensorError) as ctx:
            strip_batch(np.zeros((3, 84, 10), dtype=np.float32))
        self.assertIn("(3, 84, 10)", str(ctx.exception))
        with self.assertRaises(MalformedTensorError):
            strip_batch(np.zeros((1, 1, 84, 10), dtype=np.float32))


if __name__ == "__main__":
    unittest.main()
