from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from balltrack.detection.pipeline import DetectionPipeline
from balltrack.detection.smoothing import DetectionHistory, smooth
from balltrack.monitoring.logging import session_logger
from balltrack.monitoring.metrics import RuntimeMetrics
from balltrack.predictor.base import Predictor
from balltrack.types import Detection

Renderer = Callable[[Any, Optional[Detection]], None]
ResultListener = Callable[[int, Optional[Detection]], None]


class SchedulerState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"


class TickAction(str, Enum):
    IDLE = "idle"
    INFERENCE = "inference"
    REUSED = "reused"
    SKIPPED_BUSY = "skipped_busy"


@dataclass(frozen=True)
class TickReport:
    index: int
    action: TickAction
    detection: Detection | None


class FrameScheduler:
    """Per-session frame cadence and detection cache.

    Every ``process_every_n_frames``-th tick starts an inference task; the
    ticks in between render the last known detection. At most one inference
    is in flight, and a sampled tick that finds one still running is skipped
    rather than queued. Results from a session that has since been stopped
    are dropped by comparing generations.

    Stopping cancels the task waiting on the predictor but not the predictor
    call itself: a forward pass running in a worker thread cannot be
    interrupted, so it counts as in flight until it settles, across
    sessions.

    Must be driven from a running asyncio event loop.
    """

    def __init__(
        self,
        predictor: Predictor,
        pipeline: DetectionPipeline,
        renderer: Renderer | None = None,
        *,
        process_every_n_frames: int = 3,
        history_capacity: int = 5,
        metrics: RuntimeMetrics | None = None,
        on_result: ResultListener | None = None,
    ) -> None:
        if process_every_n_frames < 1:
            raise ValueError("process_every_n_frames must be >= 1")

        self._predictor = predictor
        self._pipeline = pipeline
        self._renderer = renderer
        self._on_result = on_result
        self._every_n = process_every_n_frames
        self._history = DetectionHistory(history_capacity)
        self._metrics = metrics or RuntimeMetrics()
        self._logger = session_logger("balltrack.scheduler", scheduler=uuid.uuid4().hex[:8])

        self._state = SchedulerState.IDLE
        self._generation = 0
        self._frame_count = 0
        self._last_detection: Detection | None = None
        self._consecutive_failures = 0
        self._inflight: asyncio.Task | None = None
        self._work: asyncio.Future | None = None
        self._cancelled: set[asyncio.Task] = set()

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def last_detection(self) -> Detection | None:
        return self._last_detection

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def history(self) -> DetectionHistory:
        return self._history

    @property
    def metrics(self) -> RuntimeMetrics:
        return self._metrics

    def inference_in_flight(self) -> bool:
        if self._inflight is not None and not self._inflight.done():
            return True
        return self._work is not None and not self._work.done()

    def _reset(self) -> None:
        self._frame_count = 0
        self._last_detection = None
        self._consecutive_failures = 0
        self._history.clear()

    def start(self) -> None:
        if self._state is SchedulerState.ACTIVE:
            return
        self._generation += 1
        self._reset()
        self._state = SchedulerState.ACTIVE
        self._logger.info(
            "scheduler started generation=%d every_n=%d history=%d predictor=%s",
            self._generation,
            self._every_n,
            self._history.capacity,
            self._predictor.name(),
        )

    def stop(self) -> None:
        if self._state is SchedulerState.IDLE:
            return
        self._state = SchedulerState.IDLE
        self._generation += 1

        task = self._inflight
        self._inflight = None
        if task is not None and not task.done():
            task.cancel()
            self._cancelled.add(task)
            task.add_done_callback(self._cancelled.discard)

        self._reset()
        self._logger.info("scheduler stopped generation=%d", self._generation)

    async def drain(self) -> None:
        """Wait for the in-flight inference, including abandoned predictor work, to settle."""
        tasks: list[asyncio.Future] = list(self._cancelled)
        if self._inflight is not None:
            tasks.append(self._inflight)
        if self._work is not None:
            tasks.append(self._work)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def tick(self, frame: Any) -> TickReport:
        if self._state is not SchedulerState.ACTIVE:
            return TickReport(index=-1, action=TickAction.IDLE, detection=None)

        index = self._frame_count
        self._frame_count += 1
        self._metrics.mark_tick()

        if index % self._every_n == 0:
            if self.inference_in_flight():
                action = TickAction.SKIPPED_BUSY
                self._metrics.mark_skipped_busy()
                self._logger.debug("sampled tick skipped, inference busy tick=%d", index)
            else:
                loop = asyncio.get_running_loop()
                self._inflight = loop.create_task(
                    self._infer(self._generation, index, frame),
                    name=f"balltrack-infer-{index}",
                )
                action = TickAction.INFERENCE
                self._metrics.mark_inference()
        else:
            action = TickAction.REUSED
            self._metrics.mark_reused()

        detection = self._last_detection
        if self._renderer is not None:
            self._renderer(frame, detection)
        return TickReport(index=index, action=action, detection=detection)

    async def _infer(self, generation: int, index: int, frame: Any) -> None:
        started = time.monotonic()
        work = asyncio.ensure_future(self._predictor.predict(frame))
        work.add_done_callback(_retrieve_outcome)
        self._work = work
        try:
            raw = await asyncio.shield(work)
        except Exception as exc:
            if generation != self._generation:
                return
            self._record_failure(index, exc)
            return

        if generation != self._generation:
            self._logger.debug(
                "discarding stale inference result tick=%d generation=%d current=%d",
                index,
                generation,
                self._generation,
            )
            return

        self._metrics.set_inference_ms((time.monotonic() - started) * 1000.0)
        self._accept(self._pipeline.process(raw))
        if self._on_result is not None:
            self._on_result(index, self._last_detection)

    def _accept(self, detection: Detection | None) -> None:
        self._consecutive_failures = 0
        self._metrics.mark_result(detection is not None)

        if detection is None:
            self._last_detection = None
            self._history.clear()
            return

        if self._history.capacity == 0:
            self._last_detection = detection
            return

        self._history.append(detection)
        self._last_detection = smooth(self._history.entries(), current=detection)

    def _record_failure(self, index: int, exc: Exception) -> None:
        self._consecutive_failures += 1
        self._metrics.mark_failure()
        self._logger.warning(
            "inference failed tick=%d consecutive=%d error=%s",
            index,
            self._consecutive_failures,
            exc,
        )
        # One failed inference keeps the cached detection; a second in a row drops it.
        if self._consecutive_failures > 1:
            self._last_detection = None
            self._history.clear()


def _retrieve_outcome(work: asyncio.Future) -> None:
    # Abandoned work may fail after its session ended; mark the error as seen.
    if not work.cancelled():
        work.exception()
