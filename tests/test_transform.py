from __future__ import annotations

import unittest

import numpy as np

from balltrack.detection.transform import CHANNELS_LAST, decode_predictions
from balltrack.errors import MalformedPredictionError


def _channels_first() -> np.ndarray:
    return np.array(
        [
            [320.0, 64.0],  # x center
            [320.0, 64.0],  # y center
            [64.0, 32.0],  # width
            [64.0, 32.0],  # height
            [0.90, 0.10],  # score
        ],
        dtype=np.float32,
    )


class DecodePredictionsTests(unittest.TestCase):
    def test_channels_first_is_normalized_by_input_size(self) -> None:
        detections = decode_predictions(_channels_first(), input_size=640)

        self.assertEqual(len(detections), 2)
        first = detections[0]
        self.assertAlmostEqual(first.box.x, 0.5)
        self.assertAlmostEqual(first.box.y, 0.5)
        self.assertAlmostEqual(first.box.w, 0.1)
        self.assertAlmostEqual(first.box.h, 0.1)
        self.assertAlmostEqual(first.confidence, 0.9, places=5)
        self.assertEqual(first.class_id, 0)
        self.assertAlmostEqual(detections[1].box.x, 0.1)

    def test_channels_last_matches_channels_first(self) -> None:
        first = decode_predictions(_channels_first(), input_size=640)
        last = decode_predictions(_channels_first().T, input_size=640, layout=CHANNELS_LAST)
        self.assertEqual(first, last)

    def test_leading_batch_dimension_is_stripped(self) -> None:
        detections = decode_predictions(_channels_first()[None], input_size=640)
        self.assertEqual(len(detections), 2)

    def test_nested_lists_are_accepted(self) -> None:
        detections = decode_predictions(_channels_first().tolist(), input_size=640)
        self.assertEqual(len(detections), 2)

    def test_multiple_score_rows_pick_best_class(self) -> None:
        raw = np.array(
            [
                [100.0, 200.0],
                [100.0, 200.0],
                [10.0, 10.0],
                [10.0, 10.0],
                [0.20, 0.70],
                [0.80, 0.10],
            ]
        )
        detections = decode_predictions(raw, input_size=640)

        self.assertEqual(detections[0].class_id, 1)
        self.assertAlmostEqual(detections[0].confidence, 0.80)
        self.assertEqual(detections[1].class_id, 0)
        self.assertAlmostEqual(detections[1].confidence, 0.70)

    def test_no_candidates_is_empty(self) -> None:
        self.assertEqual(decode_predictions(np.zeros((5, 0)), input_size=640), [])

    def test_too_few_attributes_raise(self) -> None:
        with self.assertRaises(MalformedPredictionError):
            decode_predictions(np.zeros((4, 10)), input_size=640)

    def test_wrong_rank_raises(self) -> None:
        with self.assertRaises(MalformedPredictionError):
            decode_predictions(np.zeros(5), input_size=640)

    def test_batch_larger_than_one_raises(self) -> None:
        with self.assertRaises(MalformedPredictionError):
            decode_predictions(np.zeros((2, 5, 3)), input_size=640)

    def test_non_numeric_raises(self) -> None:
        with self.assertRaises(MalformedPredictionError):
            decode_predictions([["a", "b"]] * 5, input_size=640)

    def test_unknown_layout_raises(self) -> None:
        with self.assertRaises(MalformedPredictionError):
            decode_predictions(_channels_first(), input_size=640, layout="nchw")


if __name__ == "__main__":
    unittest.main()
