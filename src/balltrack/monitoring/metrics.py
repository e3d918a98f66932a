from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any


@dataclass
class MetricsSnapshot:
    fps_tick: float
    fps_infer: float
    ticks: int
    inferences: int
    reused_ticks: int
    skipped_busy: int
    inference_failures: int
    detections: int
    empty_results: int
    inference_ms: float


class RuntimeMetrics:
    """Counters for one detection session.

    Only the event loop thread updates these, so no locking is done.
    """

    def __init__(self) -> None:
        self._start = time.monotonic()
        self._ticks = 0
        self._inferences = 0
        self._reused_ticks = 0
        self._skipped_busy = 0
        self._inference_failures = 0
        self._detections = 0
        self._empty_results = 0
        self._inference_ms = 0.0

        self._prometheus_started = False
        self._prometheus: dict[str, Any] | None = None

    def enable_prometheus(self, host: str, port: int) -> bool:
        from prometheus_client import Counter, Gauge, start_http_server

        if self._prometheus_started:
            return True

        start_http_server(port, addr=host)
        self._prometheus_started = True
        self._prometheus = {
            "ticks": Counter("balltrack_ticks_total", "Display ticks handled"),
            "inferences": Counter("balltrack_inferences_total", "Inference calls started"),
            "reused": Counter("balltrack_ticks_reused_total", "Ticks rendered from the cached detection"),
            "skipped_busy": Counter(
                "balltrack_ticks_skipped_busy_total",
                "Sampled ticks skipped because inference was still in flight",
            ),
            "failures": Counter("balltrack_inference_failures_total", "Inference calls that raised"),
            "detections": Counter("balltrack_detections_total", "Inferences producing a detection"),
            "empty": Counter("balltrack_empty_results_total", "Inferences producing no detection"),
            "inference_ms": Gauge("balltrack_inference_ms", "Duration of the last inference in milliseconds"),
        }
        return True

    def _inc(self, key: str, count: int = 1) -> None:
        if self._prometheus:
            self._prometheus[key].inc(count)

    def mark_tick(self) -> None:
        self._ticks += 1
        self._inc("ticks")

    def mark_inference(self) -> None:
        self._inferences += 1
        self._inc("inferences")

    def mark_reused(self) -> None:
        self._reused_ticks += 1
        self._inc("reused")

    def mark_skipped_busy(self) -> None:
        self._skipped_busy += 1
        self._inc("skipped_busy")

    def mark_failure(self) -> None:
        self._inference_failures += 1
        self._inc("failures")

    def mark_result(self, detected: bool) -> None:
        if detected:
            self._detections += 1
            self._inc("detections")
        else:
            self._empty_results += 1
            self._inc("empty")

    def set_inference_ms(self, duration_ms: float) -> None:
        self._inference_ms = max(0.0, float(duration_ms))
        if self._prometheus:
            self._prometheus["inference_ms"].set(self._inference_ms)

    def snapshot(self) -> MetricsSnapshot:
        elapsed = max(1e-6, time.monotonic() - self._start)
        return MetricsSnapshot(
            fps_tick=self._ticks / elapsed,
            fps_infer=self._inferences / elapsed,
            ticks=self._ticks,
            inferences=self._inferences,
            reused_ticks=self._reused_ticks,
            skipped_busy=self._skipped_busy,
            inference_failures=self._inference_failures,
            detections=self._detections,
            empty_results=self._empty_results,
            inference_ms=self._inference_ms,
        )
