from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from balltrack.monitoring.metrics import RuntimeMetrics


@dataclass
class RuntimeIdentity:
    predictor: str
    source: str


class PeriodicStatsLogger:
    def __init__(
        self,
        metrics: RuntimeMetrics,
        identity: RuntimeIdentity,
        interval_seconds: float = 5.0,
    ) -> None:
        self._metrics = metrics
        self._identity = identity
        self._interval_seconds = max(0.5, interval_seconds)
        self._next_emit = time.monotonic() + self._interval_seconds
        self._logger = logging.getLogger("balltrack.stats")

    def maybe_emit(self) -> bool:
        now = time.monotonic()
        if now < self._next_emit:
            return False

        snapshot = self._metrics.snapshot()
        self._logger.info(
            "stats fps_tick=%.2f fps_infer=%.2f ticks=%d inferences=%d reused=%d skipped_busy=%d failures=%d detections=%d empty=%d inference_ms=%.1f predictor=%s source=%s",
            snapshot.fps_tick,
            snapshot.fps_infer,
            snapshot.ticks,
            snapshot.inferences,
            snapshot.reused_ticks,
            snapshot.skipped_busy,
            snapshot.inference_failures,
            snapshot.detections,
            snapshot.empty_results,
            snapshot.inference_ms,
            self._identity.predictor,
            self._identity.source,
        )

        self._next_emit = now + self._interval_seconds
        return True
