from __future__ import annotations

import unittest

import numpy as np

from balltrack.detection.pipeline import DetectionPipeline
from balltrack.detection.transform import CHANNELS_LAST


def _raw(rows: list[tuple[float, float, float, float, float]]) -> np.ndarray:
    # rows of (x, y, w, h, conf) in 640px model space -> [5][N]
    return np.array(rows, dtype=np.float64).T


class DetectionPipelineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.pipeline = DetectionPipeline(input_size=640, min_confidence=0.5, iou_threshold=0.2)

    def test_overlapping_candidates_collapse_to_weighted_box(self) -> None:
        raw = _raw(
            [
                (320.0, 320.0, 128.0, 128.0, 0.6),
                (332.8, 320.0, 128.0, 128.0, 0.6),
                (50.0, 50.0, 20.0, 20.0, 0.3),
            ]
        )
        result = self.pipeline.process(raw)

        self.assertIsNotNone(result)
        self.assertAlmostEqual(result.box.x, 0.51)
        self.assertAlmostEqual(result.box.w, 0.2)
        self.assertAlmostEqual(result.confidence, 0.6)

    def test_best_cluster_is_selected(self) -> None:
        raw = _raw(
            [
                (100.0, 100.0, 40.0, 40.0, 0.7),
                (500.0, 500.0, 40.0, 40.0, 0.95),
                (100.0, 500.0, 40.0, 40.0, 0.8),
            ]
        )
        result = self.pipeline.process(raw)
        self.assertAlmostEqual(result.box.x, 500.0 / 640.0)
        self.assertAlmostEqual(result.confidence, 0.95)

    def test_nothing_above_threshold_is_none(self) -> None:
        raw = _raw([(320.0, 320.0, 64.0, 64.0, 0.5), (100.0, 100.0, 10.0, 10.0, 0.2)])
        self.assertIsNone(self.pipeline.process(raw))

    def test_empty_prediction_is_none(self) -> None:
        self.assertIsNone(self.pipeline.process(np.zeros((5, 0))))

    def test_degenerate_boxes_never_win(self) -> None:
        raw = _raw(
            [
                (320.0, 320.0, 0.0, 64.0, 0.99),
                (100.0, 100.0, 32.0, 32.0, 0.6),
            ]
        )
        result = self.pipeline.process(raw)
        self.assertAlmostEqual(result.box.x, 100.0 / 640.0)

    def test_malformed_input_logs_and_returns_none(self) -> None:
        with self.assertLogs("balltrack.detection", level="WARNING") as logs:
            result = self.pipeline.process(np.zeros((3, 7)))
        self.assertIsNone(result)
        self.assertIn("malformed", logs.output[0])

    def test_repeated_runs_are_identical(self) -> None:
        raw = _raw(
            [
                (320.0, 320.0, 128.0, 128.0, 0.6),
                (332.8, 320.0, 128.0, 128.0, 0.4),
            ]
        )
        first = self.pipeline.process(raw)
        second = self.pipeline.process(raw)
        self.assertEqual(first, second)
        self.assertAlmostEqual(first.box.x, 0.508)

    def test_channels_last_layout(self) -> None:
        pipeline = DetectionPipeline(
            input_size=640,
            min_confidence=0.5,
            iou_threshold=0.2,
            layout=CHANNELS_LAST,
        )
        raw = _raw([(320.0, 160.0, 64.0, 64.0, 0.9)]).T
        result = pipeline.process(raw)
        self.assertAlmostEqual(result.box.x, 0.5)
        self.assertAlmostEqual(result.box.y, 0.25)


if __name__ == "__main__":
    unittest.main()
