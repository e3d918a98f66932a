from __future__ import annotations

import argparse
from pathlib import Path


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="Path to TOML/YAML/JSON config file")
    parser.add_argument("--input-size", type=int, help="Model input size in pixels (square)")
    parser.add_argument(
        "--output-layout",
        choices=["channels_first", "channels_last"],
        help="Prediction array layout: [attrs][N] or [N][attrs]",
    )
    parser.add_argument(
        "--label",
        action="append",
        default=None,
        help="Class label in class-id order (repeatable)",
    )
    parser.add_argument("--min-confidence", type=float, help="Confidence threshold (strict)")
    parser.add_argument("--iou-threshold", type=float, help="IoU threshold for clustering")

    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON logs")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Runtime log level")
    parser.add_argument("--quiet", action="store_true", help="Suppress non-warning logs")
    parser.add_argument("--event-file", help="Write per-result JSON events to file")
    parser.add_argument("--no-event-stdout", action="store_true", help="Disable JSON events on stdout")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="balltrack",
        description="Ball detection post-processing and live tracking runtime",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    detect = subparsers.add_parser("detect", help="Run the live detection session")
    _add_common_args(detect)
    detect.add_argument("--uri", help="Camera index, video path or stream URL")
    detect.add_argument("--model-name", help="Model name label for logs")
    detect.add_argument("--model-path", help="Model file readable by OpenCV DNN (.onnx, ...)")
    detect.add_argument("--device", choices=["cpu", "cuda", "opencl"], help="OpenCV DNN target")
    detect.add_argument(
        "--every-n",
        type=int,
        help="Run inference on every Nth display tick",
    )
    detect.add_argument(
        "--history",
        type=int,
        help="Temporal smoothing window size (0 disables smoothing)",
    )
    detect.add_argument("--target-fps", type=float, help="Display tick rate")
    detect.add_argument("--headless", action="store_true", help="Disable the local display window")
    detect.add_argument("--window-name", help="OpenCV window title")
    detect.add_argument("--prometheus", action="store_true", help="Enable Prometheus metrics endpoint")
    detect.add_argument("--prometheus-host", help="Prometheus bind host")
    detect.add_argument("--prometheus-port", type=int, help="Prometheus bind port")

    process = subparsers.add_parser(
        "process",
        help="Run the detection pipeline over saved prediction arrays",
    )
    _add_common_args(process)
    process.add_argument(
        "inputs",
        nargs="+",
        help="Prediction array files (.npy or .json)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    repo_root = Path.cwd()

    if args.command == "detect":
        from balltrack.commands.detect import run_detect

        return run_detect(args, repo_root)
    if args.command == "process":
        from balltrack.commands.process import run_process

        return run_process(args, repo_root)

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
