from __future__ import annotations

from abc import ABC, abstractmethod

from balltrack.types import FramePacket


class FrameSource(ABC):
    @abstractmethod
    def open(self, uri: str) -> None:
        """Open input source."""

    @abstractmethod
    def read_latest(self) -> FramePacket | None:
        """Read the next frame, or None when nothing is available."""

    @abstractmethod
    def close(self) -> None:
        """Release source resources."""

    @abstractmethod
    def name(self) -> str:
        """Stable source name."""

    def source_mode(self) -> str:
        """Source mode: camera, live-stream or video-file."""
        return "camera"

    def nominal_fps(self) -> float | None:
        """Best-effort source FPS if available."""
        return None
