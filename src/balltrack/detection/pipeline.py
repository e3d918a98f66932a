from __future__ import annotations

import logging
from typing import Any

from balltrack.detection.clustering import cluster_detections, select_best
from balltrack.detection.filters import filter_by_confidence, reject_degenerate
from balltrack.detection.transform import CHANNELS_FIRST, decode_predictions
from balltrack.errors import MalformedPredictionError
from balltrack.types import Detection


class DetectionPipeline:
    """Reduce one frame's raw predictions to a single best detection.

    ``process`` holds no state between calls: the same input always yields
    the same output.
    """

    def __init__(
        self,
        input_size: int = 640,
        min_confidence: float = 0.5,
        iou_threshold: float = 0.2,
        layout: str = CHANNELS_FIRST,
    ) -> None:
        self.input_size = input_size
        self.min_confidence = min_confidence
        self.iou_threshold = iou_threshold
        self.layout = layout
        self._logger = logging.getLogger("balltrack.detection")

    def process(self, raw: Any) -> Detection | None:
        try:
            candidates = decode_predictions(raw, self.input_size, self.layout)
        except MalformedPredictionError as exc:
            self._logger.warning("malformed prediction array dropped: %s", exc)
            return None

        passed = filter_by_confidence(candidates, self.min_confidence)
        passed = reject_degenerate(passed)
        if not passed:
            self._logger.debug(
                "no detections above threshold candidates=%d min_confidence=%.4f",
                len(candidates),
                self.min_confidence,
            )
            return None

        clusters = cluster_detections(passed, self.iou_threshold)
        best = select_best(clusters)
        if best is None:
            return None

        self._logger.debug(
            "detection x=%.4f y=%.4f w=%.4f h=%.4f conf=%.4f class=%d clusters=%d members=%d",
            best.box.x,
            best.box.y,
            best.box.w,
            best.box.h,
            best.confidence,
            best.class_id,
            len(clusters),
            best.members,
        )
        return best.to_detection()
