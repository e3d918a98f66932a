from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import cv2

from balltrack.errors import SourceUnavailable
from balltrack.io.ingest.base import FrameSource
from balltrack.types import FramePacket


class OpenCVFrameSource(FrameSource):
    """Camera index, video file or stream URL read through ``cv2.VideoCapture``."""

    def __init__(self) -> None:
        self._uri = ""
        self._frame_id = 0
        self._cap: cv2.VideoCapture | None = None
        self._source_mode = "camera"
        self._nominal_fps: float | None = None

    def open(self, uri: str) -> None:
        self.close()
        self._uri = uri
        self._frame_id = 0
        self._nominal_fps = None

        if uri.isdigit():
            self._source_mode = "camera"
            self._cap = cv2.VideoCapture(int(uri))
        elif Path(uri).is_file():
            self._source_mode = "video-file"
            self._cap = cv2.VideoCapture(uri)
        else:
            self._source_mode = "live-stream"
            if uri.startswith("rtsp://"):
                os.environ["OPENCV_FFMPEG_CAPTURE_OPTIONS"] = (
                    "rtsp_transport;tcp|reorder_queue_size;0|fflags;nobuffer"
                )
            self._cap = cv2.VideoCapture(uri, cv2.CAP_FFMPEG)

        if not self._cap.isOpened():
            self.close()
            raise SourceUnavailable(f"Could not open frame source: {uri}")

        fps = float(self._cap.get(cv2.CAP_PROP_FPS) or 0.0)
        self._nominal_fps = fps if fps > 0 else None

    def read_latest(self) -> FramePacket | None:
        if self._cap is None:
            return None

        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None

        self._frame_id += 1
        return FramePacket(
            frame_id=self._frame_id,
            frame=frame,
            source=self._uri,
            timestamp=datetime.now(),
        )

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def name(self) -> str:
        return "opencv"

    def source_mode(self) -> str:
        return self._source_mode

    def nominal_fps(self) -> float | None:
        return self._nominal_fps
