from balltrack.detection.clustering import cluster_detections, select_best
from balltrack.detection.filters import filter_by_confidence, reject_degenerate
from balltrack.detection.geometry import iou
from balltrack.detection.pipeline import DetectionPipeline
from balltrack.detection.smoothing import DetectionHistory, smooth
from balltrack.detection.transform import (
    CHANNELS_FIRST,
    CHANNELS_LAST,
    OUTPUT_LAYOUTS,
    decode_predictions,
)

__all__ = [
    "CHANNELS_FIRST",
    "CHANNELS_LAST",
    "OUTPUT_LAYOUTS",
    "DetectionHistory",
    "DetectionPipeline",
    "cluster_detections",
    "decode_predictions",
    "filter_by_confidence",
    "iou",
    "reject_degenerate",
    "select_best",
    "smooth",
]
