from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ModelConfig:
    name: str = "ball"
    path: str | None = None
    input_size: int = 640
    output_layout: str = "channels_first"
    labels: list[str] = field(default_factory=lambda: ["ball"])
    device: str = "cpu"

    def label_for(self, class_id: int) -> str:
        if 0 <= class_id < len(self.labels):
            return self.labels[class_id]
        return str(class_id)


@dataclass
class DetectionConfig:
    min_confidence: float = 0.5
    iou_threshold: float = 0.2


@dataclass
class SchedulerConfig:
    process_every_n_frames: int = 3
    history_capacity: int = 5
    target_fps: float = 30.0


@dataclass
class IngestConfig:
    uri: str | None = None


@dataclass
class OutputConfig:
    headless: bool = False
    window_name: str = "balltrack"


@dataclass
class MonitoringConfig:
    json_logs: bool = False
    log_level: str = "INFO"
    stats_interval_seconds: float = 5.0
    prometheus_enabled: bool = False
    prometheus_host: str = "0.0.0.0"
    prometheus_port: int = 9108
    event_stdout: bool = True
    event_file: str | None = None


@dataclass
class RuntimeConfig:
    model: ModelConfig = field(default_factory=ModelConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    def as_log_context(self) -> dict[str, Any]:
        return {
            "model": self.model.name,
            "input_size": self.model.input_size,
            "output_layout": self.model.output_layout,
            "min_confidence": self.detection.min_confidence,
            "iou_threshold": self.detection.iou_threshold,
            "every_n": self.scheduler.process_every_n_frames,
            "history": self.scheduler.history_capacity,
            "headless": self.output.headless,
            "json_logs": self.monitoring.json_logs,
        }
