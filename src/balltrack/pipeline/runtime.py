from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from balltrack.config.models import RuntimeConfig
from balltrack.detection.pipeline import DetectionPipeline
from balltrack.errors import ConfigError
from balltrack.io.ingest import FrameSource, OpenCVFrameSource
from balltrack.io.output import DisplayCommand, DisplaySink, JsonEventSink
from balltrack.io.output.events import detection_event
from balltrack.monitoring import PeriodicStatsLogger, RuntimeIdentity, RuntimeMetrics
from balltrack.pipeline.annotate import draw_overlay
from balltrack.pipeline.render import draw
from balltrack.pipeline.scheduler import FrameScheduler, SchedulerState, TickAction
from balltrack.predictor import OpenCVDnnPredictor, Predictor
from balltrack.types import Detection


def build_pipeline(config: RuntimeConfig) -> DetectionPipeline:
    return DetectionPipeline(
        input_size=config.model.input_size,
        min_confidence=config.detection.min_confidence,
        iou_threshold=config.detection.iou_threshold,
        layout=config.model.output_layout,
    )


class DetectionRuntime:
    """One camera session: frame source -> scheduler -> display."""

    def __init__(
        self,
        repo_root: Path,
        config: RuntimeConfig,
        *,
        predictor: Predictor | None = None,
        source: FrameSource | None = None,
        display: DisplaySink | None = None,
    ) -> None:
        self._repo_root = repo_root
        self._config = config
        self._predictor = predictor
        self._source = source
        self._display = display
        self._logger = logging.getLogger("balltrack.runtime")

    def _build_predictor(self) -> Predictor:
        if self._predictor is not None:
            return self._predictor
        return OpenCVDnnPredictor(
            model_path=self._config.model.path,
            input_size=self._config.model.input_size,
            device=self._config.model.device,
        )

    def run(self) -> int:
        return asyncio.run(self.run_async())

    async def run_async(self) -> int:
        if not self._config.ingest.uri:
            raise ConfigError("Missing ingest URI. Provide --uri or ingest.uri in config.")

        predictor = self._build_predictor()
        predictor.load()
        predictor.warmup()
        self._logger.info(
            "predictor selected=%s device=%s",
            predictor.name(),
            predictor.device_info(),
        )

        metrics = RuntimeMetrics()
        if self._config.monitoring.prometheus_enabled:
            metrics.enable_prometheus(
                self._config.monitoring.prometheus_host,
                self._config.monitoring.prometheus_port,
            )
            self._logger.info(
                "prometheus endpoint enabled at %s:%d",
                self._config.monitoring.prometheus_host,
                self._config.monitoring.prometheus_port,
            )

        source = self._source or OpenCVFrameSource()
        display: DisplaySink | None = None
        if not self._config.output.headless:
            display = self._display or DisplaySink(window_name=self._config.output.window_name)
        event_sink = JsonEventSink(
            stdout_enabled=self._config.monitoring.event_stdout,
            file_path=self._config.monitoring.event_file,
        )

        stop_requested = False
        toggle_requested = False

        def render(frame: Any, detection: Detection | None) -> None:
            nonlocal stop_requested, toggle_requested
            if display is None:
                return
            if detection is not None:
                height, width = frame.shape[:2]
                label = self._config.model.label_for(detection.class_id)
                draw_overlay(frame, draw(detection, width, height, label), label)
            command = display.write(frame)
            if command is DisplayCommand.QUIT:
                stop_requested = True
            elif command is DisplayCommand.TOGGLE:
                toggle_requested = True

        def emit_result(index: int, detection: Detection | None) -> None:
            event = detection_event(
                detection,
                ts=datetime.now(timezone.utc).isoformat(),
                source=source.name(),
                tick=index,
            )
            if detection is not None:
                event["label"] = self._config.model.label_for(detection.class_id)
            event_sink.emit(event)

        scheduler = FrameScheduler(
            predictor,
            build_pipeline(self._config),
            render,
            process_every_n_frames=self._config.scheduler.process_every_n_frames,
            history_capacity=self._config.scheduler.history_capacity,
            metrics=metrics,
            on_result=(emit_result if event_sink.enabled() else None),
        )

        loop = asyncio.get_running_loop()
        interval = 1.0 / self._config.scheduler.target_fps
        try:
            source.open(self._config.ingest.uri)
            self._logger.info(
                "source opened name=%s mode=%s nominal_fps=%s",
                source.name(),
                source.source_mode(),
                source.nominal_fps(),
            )
            if display is not None:
                display.open()
            event_sink.open()

            stats_logger = PeriodicStatsLogger(
                metrics=metrics,
                identity=RuntimeIdentity(predictor=predictor.name(), source=source.name()),
                interval_seconds=self._config.monitoring.stats_interval_seconds,
            )

            scheduler.start()
            next_tick = loop.time()
            while not stop_requested:
                packet = source.read_latest()
                if packet is None:
                    if source.source_mode() == "video-file":
                        self._logger.info("source exhausted frames=%d", scheduler.frame_count)
                        break
                    await asyncio.sleep(interval)
                    continue

                report = scheduler.tick(packet.frame)
                if report.action is TickAction.IDLE:
                    # Paused: keep the window live so it can be resumed.
                    render(packet.frame, None)
                stats_logger.maybe_emit()

                if toggle_requested:
                    toggle_requested = False
                    if scheduler.state is SchedulerState.ACTIVE:
                        scheduler.stop()
                        self._logger.info("detection paused")
                    else:
                        scheduler.start()
                        self._logger.info("detection resumed")

                next_tick += interval
                delay = next_tick - loop.time()
                if delay > 0:
                    await asyncio.sleep(delay)
                else:
                    # Behind schedule: yield so the inference task can progress.
                    next_tick = loop.time()
                    await asyncio.sleep(0)
            return 0
        finally:
            scheduler.stop()
            await scheduler.drain()
            event_sink.close()
            source.close()
            if display is not None:
                display.close()
