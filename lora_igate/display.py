"""Screen handling: status page, queued message frames and power saving."""

from __future__ import annotations

import abc
from collections import deque
from typing import Callable, Deque, Optional

from .bitmap import Bitmap
from .font import FontDesc
from .oled_display import OLEDDisplay
from .timer import Timer

FRAME_RATE_MS = 500
FRAME_TIMEOUT_MS = 15 * 1000
DISPLAY_SAVE_TIMEOUT_MS = 10 * 1000


class DisplayFrame(abc.ABC):
    """Something that can paint one page onto a bitmap."""

    @abc.abstractmethod
    def draw_status_page(self, bitmap: Bitmap) -> None:
        """Paint this frame onto ``bitmap``."""


class TextFrame(DisplayFrame):
    """A header line followed by wrapped text."""

    def __init__(self, header: str, text: str) -> None:
        self.header = header
        self.text = text

    def draw_status_page(self, bitmap: Bitmap) -> None:
        bitmap.draw_string(0, 0, self.header)
        bitmap.draw_string_lf(0, 10, self.text)


class Display:
    """Drives an OLED panel from the main loop.

    Queued frames are shown one after another, each for a fixed time. With
    no frames queued the status frame is shown, and in save mode the panel
    is switched off after a period without new frames.
    """

    def __init__(
        self,
        font: Optional[FontDesc] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self._font = font
        self._disp: Optional[OLEDDisplay] = None
        self._frame_rate = Timer(clock)
        self._frame_timeout = Timer(clock)
        self._save_mode_timer = Timer(clock)
        self._status_frame: Optional[DisplayFrame] = None
        self._frames: Deque[DisplayFrame] = deque()
        self._save_mode = False

    @property
    def oled(self) -> Optional[OLEDDisplay]:
        return self._disp

    @property
    def pending_frames(self) -> int:
        return len(self._frames)

    def _require_display(self) -> OLEDDisplay:
        if self._disp is None:
            raise RuntimeError("display has not been set up")
        return self._disp

    def _new_bitmap(self) -> Bitmap:
        return Bitmap.for_display(self._require_display(), self._font)

    def setup(self, oled: OLEDDisplay) -> None:
        """Attach the panel, blank it and arm the timers."""
        self._disp = oled
        oled.display(self._new_bitmap())
        self._frame_rate.set_timeout(FRAME_RATE_MS)
        self._frame_rate.start()
        self._frame_timeout.set_timeout(FRAME_TIMEOUT_MS)
        self._save_mode_timer.set_timeout(DISPLAY_SAVE_TIMEOUT_MS)

    def show_splash_screen(self, firmware_title: str, version: str) -> None:
        bitmap = self._new_bitmap()
        bitmap.draw_string(0, 10, firmware_title)
        bitmap.draw_string(0, 20, version)
        self._require_display().display(bitmap)

    def set_status_frame(self, frame: DisplayFrame) -> None:
        self._status_frame = frame

    def show_status_screen(self, header: str, text: str) -> None:
        bitmap = self._new_bitmap()
        bitmap.draw_string(0, 0, header)
        bitmap.draw_string_lf(0, 10, text)
        self._require_display().display(bitmap)

    def turn_180(self) -> None:
        self._require_display().flip_screen_vertically()

    def activate_display_save_mode(self) -> None:
        self._save_mode = True

    def set_display_save_timeout(self, timeout: int) -> None:
        """Set the idle time in seconds before the panel is switched off."""
        self._save_mode_timer.set_timeout(timeout * 1000)

    def update(self) -> None:
        """Redraw the panel when the frame interval has passed."""
        disp = self._require_display()
        if not self._frame_rate.check():
            return

        if self._frames:
            bitmap = self._new_bitmap()
            self._frames[0].draw_status_page(bitmap)
            disp.display(bitmap)

            if not self._frame_timeout.is_active():
                self._frame_timeout.start()
                self._save_mode_timer.reset()
            elif self._frame_timeout.check():
                self._frames.popleft()
                self._frame_timeout.reset()
        elif disp.is_display_on():
            bitmap = self._new_bitmap()
            if self._status_frame is not None:
                self._status_frame.draw_status_page(bitmap)
            disp.display(bitmap)

            if self._save_mode:
                if self._save_mode_timer.is_active() and self._save_mode_timer.check():
                    disp.display_off()
                    self._save_mode_timer.reset()
                elif not self._save_mode_timer.is_active():
                    self._save_mode_timer.start()

        self._frame_rate.start()

    def add_frame(self, frame: DisplayFrame) -> None:
        self._frames.append(frame)