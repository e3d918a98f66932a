from __future__ import annotations

from typing import Iterable

from balltrack.detection.geometry import iou
from balltrack.types import Cluster, Detection


def cluster_detections(detections: Iterable[Detection], iou_threshold: float) -> list[Cluster]:
    """Greedy single-pass grouping of overlapping detections.

    Each detection joins the first same-class cluster (in creation order)
    whose current box overlaps it by more than ``iou_threshold``; otherwise
    it seeds a new cluster. There is no best-match search and clusters are
    never merged with each other, so the result depends on input order.
    """
    clusters: list[Cluster] = []
    for detection in detections:
        for cluster in clusters:
            if cluster.class_id != detection.class_id:
                continue
            if iou(detection.box, cluster.box) > iou_threshold:
                cluster.merge(detection)
                break
        else:
            clusters.append(Cluster.seed(detection))
    return clusters


def select_best(clusters: Iterable[Cluster]) -> Cluster | None:
    best: Cluster | None = None
    for cluster in clusters:
        # Strict comparison keeps the earliest cluster on ties.
        if best is None or cluster.confidence > best.confidence:
            best = cluster
    return best
