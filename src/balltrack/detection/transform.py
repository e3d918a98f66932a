from __future__ import annotations

from typing import Any

import numpy as np

from balltrack.errors import MalformedPredictionError
from balltrack.types import Box, Detection

CHANNELS_FIRST = "channels_first"
CHANNELS_LAST = "channels_last"
OUTPUT_LAYOUTS = (CHANNELS_FIRST, CHANNELS_LAST)

# x, y, w, h followed by one or more score rows.
_MIN_ATTRS = 5


def _coerce_prediction_array(raw: Any, layout: str) -> np.ndarray:
    """Return predictions as an ``[attrs][N]`` float array."""
    if layout not in OUTPUT_LAYOUTS:
        raise MalformedPredictionError(f"Unknown output layout: {layout}")

    try:
        arr = np.asarray(raw, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise MalformedPredictionError(f"Prediction array is not numeric: {exc}") from exc

    if arr.ndim == 3:
        if arr.shape[0] != 1:
            raise MalformedPredictionError(
                f"Unsupported prediction batch size={arr.shape[0]} shape={tuple(arr.shape)}"
            )
        arr = arr[0]

    if arr.ndim != 2:
        raise MalformedPredictionError(
            f"Unsupported prediction rank={arr.ndim} shape={tuple(arr.shape)}"
        )

    if layout == CHANNELS_LAST:
        arr = arr.T

    if arr.shape[0] < _MIN_ATTRS:
        raise MalformedPredictionError(
            f"Prediction attribute dimension too small: shape={tuple(arr.shape)} layout={layout}"
        )
    return arr


def decode_predictions(raw: Any, input_size: int, layout: str = CHANNELS_FIRST) -> list[Detection]:
    """Convert model-space predictions into normalized detections.

    ``raw`` holds parallel rows ``xs, ys, ws, hs, scores...`` (``channels_first``)
    or one row per candidate (``channels_last``). With more than one score row
    the best-scoring class wins.
    """
    if input_size <= 0:
        raise MalformedPredictionError(f"Model input size must be positive, got {input_size}")

    arr = _coerce_prediction_array(raw, layout)
    if arr.shape[1] == 0:
        return []

    coords = arr[:4] / float(input_size)
    scores = arr[4:]
    if scores.shape[0] == 1:
        class_ids = np.zeros(scores.shape[1], dtype=np.int64)
        confidences = scores[0]
    else:
        class_ids = np.argmax(scores, axis=0)
        confidences = scores[class_ids, np.arange(scores.shape[1])]

    detections: list[Detection] = []
    for idx in range(arr.shape[1]):
        detections.append(
            Detection(
                box=Box(
                    x=float(coords[0, idx]),
                    y=float(coords[1, idx]),
                    w=float(coords[2, idx]),
                    h=float(coords[3, idx]),
                ),
                confidence=float(confidences[idx]),
                class_id=int(class_ids[idx]),
            )
        )
    return detections
