from __future__ import annotations

from enum import Enum
from typing import Any

import cv2


class DisplayCommand(str, Enum):
    NONE = "none"
    TOGGLE = "toggle"
    QUIT = "quit"


_KEY_COMMANDS = {
    27: DisplayCommand.QUIT,
    ord("q"): DisplayCommand.QUIT,
    ord("s"): DisplayCommand.TOGGLE,
    ord(" "): DisplayCommand.TOGGLE,
}


class DisplaySink:
    """Local OpenCV window.

    ``s`` or space starts and stops detection, ``q`` or Esc ends the session.
    """

    def __init__(self, window_name: str = "balltrack") -> None:
        self._window_name = window_name
        self._open = False

    def open(self) -> None:
        if self._open:
            return
        cv2.namedWindow(self._window_name, cv2.WINDOW_NORMAL | cv2.WINDOW_KEEPRATIO)
        self._open = True

    def write(self, frame: Any) -> DisplayCommand:
        if not self._open:
            self.open()
        cv2.imshow(self._window_name, frame)
        key = cv2.waitKey(1) & 0xFF
        return _KEY_COMMANDS.get(key, DisplayCommand.NONE)

    def close(self) -> None:
        if self._open:
            cv2.destroyWindow(self._window_name)
            self._open = False

    def name(self) -> str:
        return "display"
