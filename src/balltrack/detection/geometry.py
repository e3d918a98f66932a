from __future__ import annotations

from balltrack.types import Box


def iou(a: Box, b: Box) -> float:
    """Intersection over union of two center-form boxes."""
    left = max(a.left, b.left)
    right = min(a.right, b.right)
    top = max(a.top, b.top)
    bottom = min(a.bottom, b.bottom)

    if right < left or bottom < top:
        return 0.0

    intersection = (right - left) * (bottom - top)
    union = a.area + b.area - intersection
    if union <= 0:
        return 0.0
    return intersection / union
