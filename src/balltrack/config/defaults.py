from __future__ import annotations


DEFAULT_CONFIG: dict = {
    "model": {
        "name": "ball",
        "path": None,
        "input_size": 640,
        "output_layout": "channels_first",
        "labels": ["ball"],
        "device": "cpu",
    },
    "detection": {
        "min_confidence": 0.5,
        "iou_threshold": 0.2,
    },
    "scheduler": {
        "process_every_n_frames": 3,
        "history_capacity": 5,
        "target_fps": 30.0,
    },
    "ingest": {
        "uri": None,
    },
    "output": {
        "headless": False,
        "window_name": "balltrack",
    },
    "monitoring": {
        "json_logs": False,
        "log_level": "INFO",
        "stats_interval_seconds": 5.0,
        "prometheus_enabled": False,
        "prometheus_host": "0.0.0.0",
        "prometheus_port": 9108,
        "event_stdout": True,
        "event_file": None,
    },
}
