from __future__ import annotations

import unittest

from balltrack.detection.clustering import cluster_detections, select_best
from balltrack.types import Box, Cluster, Detection


def _det(x: float, conf: float, w: float = 0.2, class_id: int = 0) -> Detection:
    return Detection(box=Box(x=x, y=0.5, w=w, h=0.2), confidence=conf, class_id=class_id)


def _cluster(conf: float) -> Cluster:
    return Cluster(box=Box(x=0.5, y=0.5, w=0.1, h=0.1), confidence=conf)


class ClusterDetectionsTests(unittest.TestCase):
    def test_overlapping_pair_merges_with_weighted_box_and_max_confidence(self) -> None:
        clusters = cluster_detections([_det(0.5, 0.6), _det(0.52, 0.4)], iou_threshold=0.2)

        self.assertEqual(len(clusters), 1)
        merged = clusters[0]
        self.assertAlmostEqual(merged.confidence, 0.6)
        self.assertAlmostEqual(merged.box.x, 0.508)
        self.assertAlmostEqual(merged.box.y, 0.5)
        self.assertAlmostEqual(merged.box.w, 0.2)
        self.assertEqual(merged.members, 2)

    def test_overlap_not_above_threshold_keeps_two_clusters(self) -> None:
        # IoU of this pair is ~0.82.
        clusters = cluster_detections([_det(0.5, 0.6), _det(0.52, 0.4)], iou_threshold=0.9)
        self.assertEqual(len(clusters), 2)

    def test_disjoint_detections_keep_creation_order(self) -> None:
        clusters = cluster_detections([_det(0.2, 0.3), _det(0.8, 0.9)], iou_threshold=0.2)
        self.assertEqual([round(c.box.x, 6) for c in clusters], [0.2, 0.8])

    def test_different_classes_never_merge(self) -> None:
        clusters = cluster_detections(
            [_det(0.5, 0.6, class_id=0), _det(0.5, 0.6, class_id=1)],
            iou_threshold=0.2,
        )
        self.assertEqual([c.class_id for c in clusters], [0, 1])

    def test_first_matching_cluster_wins_over_better_overlap(self) -> None:
        first = _det(0.40, 0.5)
        second = _det(0.56, 0.5)
        # Overlaps `first` by IoU 0.25 and `second` by IoU ~0.67.
        third = _det(0.52, 0.5)

        clusters = cluster_detections([first, second, third], iou_threshold=0.2)

        self.assertEqual(len(clusters), 2)
        self.assertEqual(clusters[0].members, 2)
        self.assertEqual(clusters[1].members, 1)
        self.assertAlmostEqual(clusters[0].box.x, 0.46)

    def test_empty_input(self) -> None:
        self.assertEqual(cluster_detections([], iou_threshold=0.2), [])

    def test_input_detections_are_not_mutated(self) -> None:
        detections = [_det(0.5, 0.6), _det(0.52, 0.4)]
        cluster_detections(detections, iou_threshold=0.2)
        self.assertAlmostEqual(detections[0].box.x, 0.5)


class SelectBestTests(unittest.TestCase):
    def test_highest_confidence_wins(self) -> None:
        clusters = [_cluster(0.7), _cluster(0.9), _cluster(0.3)]
        self.assertIs(select_best(clusters), clusters[1])

    def test_ties_resolve_to_earliest(self) -> None:
        clusters = [_cluster(0.3), _cluster(0.9), _cluster(0.9)]
        self.assertIs(select_best(clusters), clusters[1])

    def test_empty_returns_none(self) -> None:
        self.assertIsNone(select_best([]))


if __name__ == "__main__":
    unittest.main()
