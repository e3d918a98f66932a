from __future__ import annotations

from dataclasses import dataclass

from balltrack.types import Detection

CROSSHAIR_ARM_PX = 30
LABEL_OFFSET_PX = 15


@dataclass(frozen=True)
class DrawCommands:
    """Screen-space primitives for one detection."""

    left: int
    top: int
    right: int
    bottom: int
    center: tuple[int, int]
    crosshair: tuple[tuple[tuple[int, int], tuple[int, int]], ...]
    caption: str
    caption_origin: tuple[int, int]
    confidence: float
    class_id: int


def caption_for(detection: Detection, label: str = "ball") -> str:
    return f"{label.capitalize()}: {detection.confidence * 100:.1f}%"


def draw(
    detection: Detection | None,
    canvas_width: int,
    canvas_height: int,
    label: str = "ball",
) -> DrawCommands | None:
    """Map a normalized detection onto a ``canvas_width`` x ``canvas_height`` surface."""
    if detection is None:
        return None

    box = detection.box
    center_x = box.x * canvas_width
    center_y = box.y * canvas_height
    box_w = box.w * canvas_width
    box_h = box.h * canvas_height
    if not box_w > 0 or not box_h > 0:
        return None

    left = center_x - box_w / 2
    top = center_y - box_h / 2
    cx, cy = int(round(center_x)), int(round(center_y))

    return DrawCommands(
        left=int(round(left)),
        top=int(round(top)),
        right=int(round(left + box_w)),
        bottom=int(round(top + box_h)),
        center=(cx, cy),
        crosshair=(
            ((cx - CROSSHAIR_ARM_PX, cy), (cx + CROSSHAIR_ARM_PX, cy)),
            ((cx, cy - CROSSHAIR_ARM_PX), (cx, cy + CROSSHAIR_ARM_PX)),
        ),
        caption=caption_for(detection, label),
        caption_origin=(int(round(left)), max(LABEL_OFFSET_PX, int(round(top)) - LABEL_OFFSET_PX)),
        confidence=detection.confidence,
        class_id=detection.class_id,
    )
