from __future__ import annotations

import unittest

from balltrack.pipeline.render import caption_for, draw
from balltrack.types import Box, Detection


class DrawTests(unittest.TestCase):
    def test_maps_normalized_box_to_canvas_pixels(self) -> None:
        detection = Detection(box=Box(x=0.5, y=0.5, w=0.2, h=0.1), confidence=0.9)

        commands = draw(detection, 640, 480)

        self.assertIsNotNone(commands)
        self.assertEqual(
            (commands.left, commands.top, commands.right, commands.bottom),
            (256, 216, 384, 264),
        )
        self.assertEqual(commands.center, (320, 240))
        self.assertEqual(
            commands.crosshair,
            (((290, 240), (350, 240)), ((320, 210), (320, 270))),
        )
        self.assertEqual(commands.caption, "Ball: 90.0%")
        self.assertEqual(commands.caption_origin, (256, 201))

    def test_caption_stays_on_canvas_near_top_edge(self) -> None:
        detection = Detection(box=Box(x=0.5, y=0.05, w=0.2, h=0.1), confidence=0.5)

        commands = draw(detection, 100, 100)

        self.assertEqual(commands.top, 0)
        self.assertEqual(commands.caption_origin[1], 15)

    def test_no_detection_draws_nothing(self) -> None:
        self.assertIsNone(draw(None, 640, 480))

    def test_zero_width_box_draws_nothing(self) -> None:
        detection = Detection(box=Box(x=0.5, y=0.5, w=0.0, h=0.1), confidence=0.9)
        self.assertIsNone(draw(detection, 640, 480))

    def test_caption_uses_label_and_one_decimal(self) -> None:
        detection = Detection(box=Box(x=0.5, y=0.5, w=0.1, h=0.1), confidence=0.8765)
        self.assertEqual(caption_for(detection, "tennis"), "Tennis: 87.7%")


if __name__ == "__main__":
    unittest.main()
