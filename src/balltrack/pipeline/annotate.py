from __future__ import annotations

import hashlib

from balltrack.pipeline.render import DrawCommands

_WHITE = (255, 255, 255)
_BLACK = (0, 0, 0)
_GREEN = (0, 255, 0)


def color_for_label(label: str) -> tuple[int, int, int]:
    # Deterministic per-class BGR color; the first class keeps the classic green.
    if label in {"", "ball"}:
        return _GREEN
    digest = hashlib.sha1(label.encode("utf-8")).digest()
    b = 50 + (digest[0] % 180)
    g = 50 + (digest[1] % 180)
    r = 50 + (digest[2] % 180)
    return int(b), int(g), int(r)


def draw_overlay(frame, commands: DrawCommands | None, label: str = "ball") -> None:
    if commands is None:
        return

    import cv2

    color = color_for_label(label)
    top_left = (commands.left, commands.top)
    bottom_right = (commands.right, commands.bottom)

    cv2.rectangle(frame, top_left, bottom_right, _WHITE, 8)
    cv2.rectangle(frame, top_left, bottom_right, color, 4)

    (text_w, text_h), baseline = cv2.getTextSize(
        commands.caption, cv2.FONT_HERSHEY_SIMPLEX, 0.8, 2
    )
    origin_x, origin_y = commands.caption_origin
    cv2.rectangle(
        frame,
        (origin_x, origin_y - text_h - 10),
        (origin_x + text_w + 20, origin_y + baseline),
        _BLACK,
        -1,
    )
    cv2.putText(
        frame,
        commands.caption,
        (origin_x + 10, origin_y),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.8,
        color,
        2,
        cv2.LINE_AA,
    )

    for start, end in commands.crosshair:
        cv2.line(frame, start, end, _WHITE, 6)
    for start, end in commands.crosshair:
        cv2.line(frame, start, end, color, 2)
