from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from balltrack.io.output.events import JsonEventSink, detection_event
from balltrack.types import Box, Detection


class JsonEventSinkTests(unittest.TestCase):
    def test_enabled_false_when_no_stdout_and_no_file(self) -> None:
        sink = JsonEventSink(stdout_enabled=False, file_path=None)
        try:
            self.assertFalse(sink.enabled())
        finally:
            sink.close()

    def test_enabled_true_when_stdout_enabled(self) -> None:
        sink = JsonEventSink(stdout_enabled=True, file_path=None)
        try:
            self.assertTrue(sink.enabled())
        finally:
            sink.close()

    def test_events_are_appended_as_json_lines(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output_path = Path(tmpdir) / "out" / "events.jsonl"
            sink = JsonEventSink(stdout_enabled=False, file_path=str(output_path))
            sink.open()
            try:
                self.assertTrue(sink.enabled())
                sink.emit({"detected": False})
                sink.emit({"detected": True})
            finally:
                sink.close()

            lines = output_path.read_text(encoding="utf-8").splitlines()
            self.assertEqual([json.loads(line)["detected"] for line in lines], [False, True])


class DetectionEventTests(unittest.TestCase):
    def test_detection_fields(self) -> None:
        detection = Detection(box=Box(x=0.5, y=0.25, w=0.1, h=0.2), confidence=0.8, class_id=1)

        event = detection_event(detection, source="frame-1")

        self.assertEqual(event["source"], "frame-1")
        self.assertTrue(event["detected"])
        self.assertEqual(event["class_id"], 1)
        self.assertEqual(event["confidence"], 0.8)
        self.assertEqual(event["box"], {"x": 0.5, "y": 0.25, "w": 0.1, "h": 0.2})

    def test_missing_detection(self) -> None:
        self.assertEqual(detection_event(None, source="x"), {"source": "x", "detected": False})


if __name__ == "__main__":
    unittest.main()
