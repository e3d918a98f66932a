from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Box:
    """Center-form box normalized to the image size."""

    x: float
    y: float
    w: float
    h: float

    @property
    def left(self) -> float:
        return self.x - self.w / 2

    @property
    def right(self) -> float:
        return self.x + self.w / 2

    @property
    def top(self) -> float:
        return self.y - self.h / 2

    @property
    def bottom(self) -> float:
        return self.y + self.h / 2

    @property
    def area(self) -> float:
        return self.w * self.h


@dataclass(frozen=True)
class Detection:
    """Candidate or final detection; confidence is an uncalibrated score."""

    box: Box
    confidence: float
    class_id: int = 0


@dataclass
class Cluster:
    """Running merge of same-class detections.

    The box is the confidence-weighted average of the members seen so far and
    the confidence is the max member confidence, not the mean.
    """

    box: Box
    confidence: float
    class_id: int = 0
    members: int = 1

    @classmethod
    def seed(cls, detection: Detection) -> "Cluster":
        return cls(
            box=detection.box,
            confidence=detection.confidence,
            class_id=detection.class_id,
        )

    def merge(self, detection: Detection) -> None:
        total = self.confidence + detection.confidence
        own = self.confidence
        theirs = detection.confidence

        def _blend(a: float, b: float) -> float:
            return (a * own + b * theirs) / total

        self.box = Box(
            x=_blend(self.box.x, detection.box.x),
            y=_blend(self.box.y, detection.box.y),
            w=_blend(self.box.w, detection.box.w),
            h=_blend(self.box.h, detection.box.h),
        )
        self.confidence = max(self.confidence, detection.confidence)
        self.members += 1

    def to_detection(self) -> Detection:
        return Detection(box=self.box, confidence=self.confidence, class_id=self.class_id)


@dataclass
class FramePacket:
    """Frame moved from ingest into the scheduler."""

    frame_id: int
    frame: Any
    source: str
    timestamp: datetime
