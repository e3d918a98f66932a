from __future__ import annotations

import copy
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable

from dynaconf import Dynaconf

from balltrack.config.defaults import DEFAULT_CONFIG
from balltrack.config.models import (
    DetectionConfig,
    IngestConfig,
    ModelConfig,
    MonitoringConfig,
    OutputConfig,
    RuntimeConfig,
    SchedulerConfig,
)
from balltrack.detection.transform import OUTPUT_LAYOUTS
from balltrack.errors import ConfigError

_CONFIG_NAMES = (
    "balltrack.toml",
    "balltrack.yaml",
    "balltrack.yml",
    "balltrack.json",
    "settings.toml",
    "settings.yaml",
    "settings.yml",
    "settings.json",
)


def _merge_dict(base: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    for key, value in patch.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge_dict(base[key], value)
        else:
            base[key] = value
    return base


def _lower_keys(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_lower_keys(item) for item in obj]
    return obj


def _read_settings(config_paths: list[Path]) -> dict[str, Any]:
    """Load config files and ``BALLTRACK_*`` environment variables through Dynaconf."""
    settings = Dynaconf(
        envvar_prefix="BALLTRACK",
        settings_files=[str(path) for path in config_paths],
        merge_enabled=True,
        environments=False,
        load_dotenv=True,
    )
    return _lower_keys(settings.as_dict())


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _as_lower(value: Any) -> str:
    return str(value).strip().lower()


def _as_upper(value: Any) -> str:
    return str(value).strip().upper()


def _as_labels(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    labels = [str(item).strip() for item in value or []]
    return [label for label in labels if label] or ["ball"]


Coercer = Callable[[Any], Any]

# Section name -> (dataclass, field -> coercer). Keys not listed are ignored.
_SECTIONS: dict[str, tuple[type, dict[str, Coercer]]] = {
    "model": (
        ModelConfig,
        {
            "name": str,
            "path": _as_optional_str,
            "input_size": int,
            "output_layout": _as_lower,
            "labels": _as_labels,
            "device": _as_lower,
        },
    ),
    "detection": (
        DetectionConfig,
        {"min_confidence": float, "iou_threshold": float},
    ),
    "scheduler": (
        SchedulerConfig,
        {"process_every_n_frames": int, "history_capacity": int, "target_fps": float},
    ),
    "ingest": (IngestConfig, {"uri": _as_optional_str}),
    "output": (OutputConfig, {"headless": _as_bool, "window_name": str}),
    "monitoring": (
        MonitoringConfig,
        {
            "json_logs": _as_bool,
            "log_level": _as_upper,
            "stats_interval_seconds": float,
            "prometheus_enabled": _as_bool,
            "prometheus_host": str,
            "prometheus_port": int,
            "event_stdout": _as_bool,
            "event_file": _as_optional_str,
        },
    ),
}


def _build_section(name: str, raw: dict[str, Any]) -> Any:
    cls, coercers = _SECTIONS[name]
    values: dict[str, Any] = {}
    for key, coerce in coercers.items():
        if key not in raw:
            continue
        try:
            values[key] = coerce(raw[key])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"{name}.{key}: invalid value {raw[key]!r}") from exc
    return cls(**values)


def _repo_relative(path_value: str | None, repo_root: Path) -> str | None:
    if not path_value:
        return path_value
    path = Path(path_value).expanduser()
    if not path.is_absolute():
        path = (repo_root / path).resolve()
    return str(path)


def _check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if value != value or value < low or (high is not None and value > high):
        bound = f"[{low}, {high}]" if high is not None else f">= {low}"
        raise ConfigError(f"{name} must be {bound}, got {value}")


def _validate(config: RuntimeConfig) -> None:
    if config.model.input_size <= 0:
        raise ConfigError(f"model.input_size must be > 0, got {config.model.input_size}")
    if config.model.output_layout not in OUTPUT_LAYOUTS:
        raise ConfigError(
            f"model.output_layout must be one of {', '.join(OUTPUT_LAYOUTS)}, "
            f"got {config.model.output_layout}"
        )
    _check_range("detection.min_confidence", config.detection.min_confidence, 0.0, 1.0)
    _check_range("detection.iou_threshold", config.detection.iou_threshold, 0.0, 1.0)
    _check_range("scheduler.process_every_n_frames", config.scheduler.process_every_n_frames, 1)
    _check_range("scheduler.history_capacity", config.scheduler.history_capacity, 0)
    if not config.scheduler.target_fps > 0:
        raise ConfigError(f"scheduler.target_fps must be > 0, got {config.scheduler.target_fps}")


def _to_runtime_config(data: dict[str, Any], repo_root: Path) -> RuntimeConfig:
    sections = {name: _build_section(name, data.get(name) or {}) for name in _SECTIONS}
    config = RuntimeConfig(**sections)
    config.model.path = _repo_relative(config.model.path, repo_root)
    config.monitoring.event_file = _repo_relative(config.monitoring.event_file, repo_root)
    _validate(config)
    return config


def load_runtime_config(
    repo_root: Path,
    config_path: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> RuntimeConfig:
    """Resolve defaults, config files, environment and CLI overrides, in that order."""
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        config_paths = [path]
    else:
        config_paths = [repo_root / name for name in _CONFIG_NAMES if (repo_root / name).exists()]

    merged = copy.deepcopy(DEFAULT_CONFIG)
    _merge_dict(merged, _read_settings(config_paths))
    if cli_overrides:
        _merge_dict(merged, _lower_keys(cli_overrides))

    # Headless runs never print per-detection events over the log stream.
    if _as_bool(merged["output"].get("headless", False)):
        merged["monitoring"]["event_stdout"] = False

    return _to_runtime_config(merged, repo_root)


def runtime_config_to_dict(config: RuntimeConfig) -> dict[str, Any]:
    return asdict(config)
