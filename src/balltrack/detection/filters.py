from __future__ import annotations

import logging
import math
from typing import Iterable

from balltrack.types import Detection

_logger = logging.getLogger("balltrack.detection")


def filter_by_confidence(detections: Iterable[Detection], min_confidence: float) -> list[Detection]:
    # Strict: a score equal to the threshold does not pass.
    return [det for det in detections if det.confidence > min_confidence]


def is_degenerate(detection: Detection) -> bool:
    box = detection.box
    values = (box.x, box.y, box.w, box.h, detection.confidence)
    if not all(math.isfinite(v) for v in values):
        return True
    return box.w <= 0 or box.h <= 0


def reject_degenerate(detections: Iterable[Detection]) -> list[Detection]:
    kept: list[Detection] = []
    rejected = 0
    for det in detections:
        if is_degenerate(det):
            rejected += 1
            continue
        kept.append(det)
    if rejected:
        _logger.debug("rejected degenerate detections count=%d", rejected)
    return kept
