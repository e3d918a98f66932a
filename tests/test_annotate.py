from __future__ import annotations

import unittest

import numpy as np

from balltrack.pipeline.annotate import color_for_label, draw_overlay
from balltrack.pipeline.render import draw
from balltrack.types import Box, Detection


class AnnotateTests(unittest.TestCase):
    def test_label_color_is_deterministic(self) -> None:
        self.assertEqual(color_for_label("tennis"), color_for_label("tennis"))

    def test_different_labels_get_different_colors(self) -> None:
        self.assertNotEqual(color_for_label("tennis"), color_for_label("soccer"))

    def test_ball_is_green(self) -> None:
        self.assertEqual(color_for_label("ball"), (0, 255, 0))

    def test_overlay_draws_onto_frame(self) -> None:
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        detection = Detection(box=Box(x=0.5, y=0.5, w=0.2, h=0.2), confidence=0.75)

        draw_overlay(frame, draw(detection, 640, 480))

        self.assertGreater(int(frame.sum()), 0)
        self.assertEqual(tuple(frame[240, 320]), (0, 255, 0))

    def test_missing_commands_leave_frame_untouched(self) -> None:
        frame = np.zeros((48, 64, 3), dtype=np.uint8)
        draw_overlay(frame, None)
        self.assertEqual(int(frame.sum()), 0)


if __name__ == "__main__":
    unittest.main()
