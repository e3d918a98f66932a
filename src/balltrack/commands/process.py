from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import numpy as np

from balltrack.commands.detect import build_common_overrides, load_and_configure
from balltrack.errors import BalltrackError
from balltrack.io.output.events import JsonEventSink, detection_event
from balltrack.pipeline.runtime import build_pipeline


def load_prediction_array(path: Path) -> Any:
    suffix = path.suffix.lower()
    if suffix == ".npy":
        return np.load(path, allow_pickle=False)
    if suffix == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = payload.get("predictions", payload)
        return payload
    raise ValueError(f"Unsupported prediction file extension: {suffix}")


def run_process(args: Any, repo_root: Path) -> int:
    logger = logging.getLogger("balltrack.process")
    try:
        config = load_and_configure(args, repo_root, build_common_overrides(args))
    except BalltrackError as exc:
        logger.error("invalid configuration: %s", exc)
        return 2

    pipeline = build_pipeline(config)
    sink = JsonEventSink(
        stdout_enabled=config.monitoring.event_stdout,
        file_path=config.monitoring.event_file,
    )
    sink.open()

    failures = 0
    try:
        for raw_path in args.inputs:
            path = Path(raw_path)
            try:
                raw = load_prediction_array(path)
            except (OSError, ValueError) as exc:
                failures += 1
                logger.error("could not read predictions path=%s error=%s", path, exc)
                continue

            detection = pipeline.process(raw)
            event = detection_event(
                detection,
                ts=datetime.now(timezone.utc).isoformat(),
                source=str(path),
            )
            if detection is not None:
                event["label"] = config.model.label_for(detection.class_id)
            sink.emit(event)
    finally:
        sink.close()

    logger.info("processed files=%d failures=%d", len(args.inputs), failures)
    return 1 if failures else 0
