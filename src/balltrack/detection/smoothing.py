from __future__ import annotations

from collections import deque
from typing import Iterable, Iterator

from balltrack.types import Box, Detection


class DetectionHistory:
    """Bounded FIFO of recently accepted detections."""

    def __init__(self, capacity: int = 5) -> None:
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._capacity = capacity
        self._entries: deque[Detection] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    def append(self, detection: Detection) -> None:
        if self._capacity == 0:
            return
        self._entries.append(detection)

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> list[Detection]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Detection]:
        return iter(list(self._entries))


def smooth(entries: Iterable[Detection], current: Detection | None = None) -> Detection | None:
    """Confidence-weighted moving average over a detection window.

    The window confidence is the max of its entries and the class is taken
    from the newest entry. An empty window passes ``current`` through.
    """
    window = list(entries)
    if not window:
        return current

    total = 0.0
    sx = sy = sw = sh = 0.0
    max_confidence = window[0].confidence
    for det in window:
        weight = det.confidence
        total += weight
        sx += det.box.x * weight
        sy += det.box.y * weight
        sw += det.box.w * weight
        sh += det.box.h * weight
        max_confidence = max(max_confidence, det.confidence)

    newest = window[-1]
    if total <= 0:
        return newest

    return Detection(
        box=Box(x=sx / total, y=sy / total, w=sw / total, h=sh / total),
        confidence=max_confidence,
        class_id=newest.class_id,
    )
