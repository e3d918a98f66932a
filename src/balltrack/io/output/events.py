from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from balltrack.types import Detection


def detection_event(detection: Detection | None, **fields: Any) -> dict[str, Any]:
    event: dict[str, Any] = dict(fields)
    if detection is None:
        event["detected"] = False
        return event
    event.update(
        {
            "detected": True,
            "class_id": detection.class_id,
            "confidence": detection.confidence,
            "box": {
                "x": detection.box.x,
                "y": detection.box.y,
                "w": detection.box.w,
                "h": detection.box.h,
            },
        }
    )
    return event


class JsonEventSink:
    """JSON-lines writer for detection results, to stdout and/or a file."""

    def __init__(self, stdout_enabled: bool, file_path: str | None = None) -> None:
        self._stdout_enabled = stdout_enabled
        self._file_path = Path(file_path).expanduser().resolve() if file_path else None
        self._file_handle = None

    def open(self) -> None:
        if self._file_path is not None:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = self._file_path.open("a", encoding="utf-8")

    def enabled(self) -> bool:
        return self._stdout_enabled or self._file_path is not None

    def emit(self, event: dict[str, Any]) -> None:
        payload = json.dumps(event, ensure_ascii=True)
        if self._stdout_enabled:
            print(payload, flush=True)
        if self._file_handle is not None:
            self._file_handle.write(payload + "\n")
            self._file_handle.flush()

    def close(self) -> None:
        if self._file_handle is not None:
            self._file_handle.close()
            self._file_handle = None
