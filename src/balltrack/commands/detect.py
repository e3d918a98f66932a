from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from balltrack.config import RuntimeConfig, load_runtime_config, runtime_config_to_dict
from balltrack.errors import BalltrackError
from balltrack.monitoring import configure_logging


def _clean_overrides(payload: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in payload.items():
        if isinstance(value, dict):
            nested = _clean_overrides(value)
            if nested:
                cleaned[key] = nested
            continue
        if value is not None:
            cleaned[key] = value
    return cleaned


def build_common_overrides(args: Any) -> dict[str, Any]:
    overrides = {
        "model": {
            "input_size": args.input_size,
            "output_layout": args.output_layout,
            "labels": args.label,
        },
        "detection": {
            "min_confidence": args.min_confidence,
            "iou_threshold": args.iou_threshold,
        },
        "monitoring": {
            "json_logs": (True if args.json_logs else None),
            "log_level": args.log_level,
            "event_stdout": (False if args.no_event_stdout else None),
            "event_file": args.event_file,
        },
    }
    return _clean_overrides(overrides)


def build_detect_overrides(args: Any) -> dict[str, Any]:
    overrides = {
        "model": {
            "name": args.model_name,
            "path": args.model_path,
            "device": args.device,
        },
        "scheduler": {
            "process_every_n_frames": args.every_n,
            "history_capacity": args.history,
            "target_fps": args.target_fps,
        },
        "ingest": {
            "uri": args.uri,
        },
        "output": {
            "headless": (True if args.headless else None),
            "window_name": args.window_name,
        },
        "monitoring": {
            "prometheus_enabled": (True if args.prometheus else None),
            "prometheus_host": args.prometheus_host,
            "prometheus_port": args.prometheus_port,
        },
    }
    merged = build_common_overrides(args)
    for section, values in _clean_overrides(overrides).items():
        merged.setdefault(section, {}).update(values)
    return merged


def load_and_configure(args: Any, repo_root: Path, overrides: dict[str, Any]) -> RuntimeConfig:
    config = load_runtime_config(
        repo_root=repo_root,
        config_path=args.config,
        cli_overrides=overrides,
    )

    if args.quiet:
        config.monitoring.log_level = "WARNING"

    configure_logging(
        level=config.monitoring.log_level,
        json_logs=config.monitoring.json_logs,
    )
    return config


def run_detect(args: Any, repo_root: Path) -> int:
    try:
        config = load_and_configure(args, repo_root, build_detect_overrides(args))
    except BalltrackError as exc:
        logging.getLogger("balltrack.detect").error("invalid configuration: %s", exc)
        return 2

    logger = logging.getLogger("balltrack.detect")
    logger.info("starting detect with config=%s", config.as_log_context())
    logger.debug("resolved config=%s", runtime_config_to_dict(config))

    from balltrack.pipeline.runtime import DetectionRuntime

    runtime = DetectionRuntime(repo_root=repo_root, config=config)
    try:
        return runtime.run()
    except BalltrackError as exc:
        logger.error("detect failed: %s", exc)
        return 2
    except KeyboardInterrupt:
        logger.info("interrupted, session stopped")
        return 0
