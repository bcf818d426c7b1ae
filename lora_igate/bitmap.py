"""Monochrome frame buffer with drawing primitives."""

from __future__ import annotations

from typing import Optional

from .font import CHAR_SPACING, FontDesc


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


class Bitmap:
    """A 1-bit image laid out in pages of 8 rows, one byte per column."""

    def __init__(self, width: int, height: int, font: Optional[FontDesc] = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("bitmap dimensions must be positive")
        if height % 8:
            raise ValueError("bitmap height must be a multiple of 8")
        self._width = width
        self._height = height
        self.font = font
        self._buffer = bytearray(width * height // 8)

    @classmethod
    def for_display(cls, display, font: Optional[FontDesc] = None) -> "Bitmap":
        """A bitmap sized to fit ``display``."""
        return cls(display.width, display.height, font)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def buffer(self) -> bytes:
        """The raw page-ordered frame buffer."""
        return bytes(self._buffer)

    def _inside(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def set_pixel(self, x: int, y: int) -> None:
        if self._inside(x, y):
            self._buffer[x + (y // 8) * self._width] |= 1 << (y % 8)

    def clear_pixel(self, x: int, y: int) -> None:
        if self._inside(x, y):
            self._buffer[x + (y // 8) * self._width] &= ~(1 << (y % 8)) & 0xFF

    def get_pixel(self, x: int, y: int) -> bool:
        if self._inside(x, y):
            return bool(self._buffer[x + (y // 8) * self._width] & (1 << (y % 8)))
        return False

    def clear(self) -> None:
        self._buffer[:] = bytes(len(self._buffer))

    def draw_line(self, x0: int, y0: int, x1: int, y1: int) -> None:
        dx = abs(x1 - x0)
        dy = abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = _tdiv(dx if dx > dy else -dy, 2)
        while True:
            self.set_pixel(x0, y0)
            if x0 == x1 and y0 == y1:
                break
            e2 = err
            if e2 > -dx:
                err -= dy
                x0 += sx
            if e2 < dy:
                err += dx
                y0 += sy

    def draw_horizontal_line(self, x: int, y: int, length: int) -> None:
        if not 0 <= y < self._height:
            return
        for i in range(length):
            self.set_pixel(x + i, y)

    def draw_vertical_line(self, x: int, y: int, length: int) -> None:
        if not 0 <= x < self._width:
            return
        for i in range(length):
            self.set_pixel(x, y + i)

    def draw_rect(self, x: int, y: int, width: int, height: int) -> None:
        self.draw_horizontal_line(x, y, width)
        self.draw_vertical_line(x, y, height)
        self.draw_vertical_line(x + width - 1, y, height)
        self.draw_horizontal_line(x, y + height - 1, width)

    def fill_rect(self, x: int, y: int, width: int, height: int) -> None:
        for i in range(width):
            self.draw_vertical_line(x + i, y, height)

    @staticmethod
    def _circle_steps(radius: int, check_first: bool):
        """Yield (x, y) midpoint-circle steps for one octant."""
        x, y, dp = 0, radius, 1 - radius
        if check_first and not x < y:
            return
        while True:
            if dp < 0:
                dp = dp + x * 2 + 3
                x += 1
            else:
                dp = dp + x * 2 - y * 2 + 5
                x += 1
                y -= 1
            yield x, y
            if not x < y:
                break

    def draw_circle(self, x0: int, y0: int, radius: int) -> None:
        for x, y in self._circle_steps(radius, check_first=False):
            for px, py in ((x, y), (-x, y), (x, -y), (-x, -y),
                           (y, x), (-y, x), (y, -x), (-y, -x)):
                self.set_pixel(x0 + px, y0 + py)
        self.set_pixel(x0 + radius, y0)
        self.set_pixel(x0, y0 + radius)
        self.set_pixel(x0 - radius, y0)
        self.set_pixel(x0, y0 - radius)

    def fill_circle(self, x0: int, y0: int, radius: int) -> None:
        for x, y in self._circle_steps(radius, check_first=False):
            self.draw_horizontal_line(x0 - x, y0 - y, 2 * x)
            self.draw_horizontal_line(x0 - x, y0 + y, 2 * x)
            self.draw_horizontal_line(x0 - y, y0 - x, 2 * y)
            self.draw_horizontal_line(x0 - y, y0 + x, 2 * y)
        self.draw_horizontal_line(x0 - radius, y0, 2 * radius)

    def draw_circle_quads(self, x0: int, y0: int, radius: int, quads: int) -> None:
        """Draw the quarters of a circle selected by bits 0x1, 0x2, 0x4 and 0x8."""
        for x, y in self._circle_steps(radius, check_first=True):
            if quads & 0x1:
                self.set_pixel(x0 + x, y0 - y)
                self.set_pixel(x0 + y, y0 - x)
            if quads & 0x2:
                self.set_pixel(x0 - y, y0 - x)
                self.set_pixel(x0 - x, y0 - y)
            if quads & 0x4:
                self.set_pixel(x0 - y, y0 + x)
                self.set_pixel(x0 - x, y0 + y)
            if quads & 0x8:
                self.set_pixel(x0 + x, y0 + y)
                self.set_pixel(x0 + y, y0 + x)
        if quads & 0x1 and quads & 0x8:
            self.set_pixel(x0 + radius, y0)
        if quads & 0x4 and quads & 0x8:
            self.set_pixel(x0, y0 + radius)
        if quads & 0x2 and quads & 0x4:
            self.set_pixel(x0 - radius, y0)
        if quads & 0x1 and quads & 0x2:
            self.set_pixel(x0, y0 - radius)

    def draw_progress_bar(self, x: int, y: int, width: int, height: int, progress: int) -> None:
        """Draw a rounded bar filled to ``progress`` percent."""
        radius = _tdiv(height, 2)
        x_radius = x + radius
        y_radius = y + radius
        double_radius = 2 * radius
        inner_radius = radius - 2

        self.draw_circle_quads(x_radius, y_radius, radius, 0b00000110)
        self.draw_horizontal_line(x_radius, y, width - double_radius + 1)
        self.draw_horizontal_line(x_radius, y + height, width - double_radius + 1)
        self.draw_circle_quads(x + width - radius, y_radius, radius, 0b00001001)

        max_progress_width = _tdiv((width - double_radius + 1) * progress, 100) & 0xFFFF

        self.fill_circle(x_radius, y_radius, inner_radius)
        self.fill_rect(x_radius + 1, y + 2, max_progress_width, height - 3)
        self.fill_circle(x_radius + max_progress_width, y_radius, inner_radius)

    def _require_font(self) -> FontDesc:
        if self.font is None:
            raise ValueError("no font set on this bitmap")
        return self.font

    def draw_char(self, x: int, y: int, c: str) -> int:
        """Draw one character and return the x position of the next one."""
        font = self._require_font()
        if c == " ":
            return x + font.width_in_pixel * 4 // 10

        code = ord(c)
        if not font.contains(code):
            code = ord("?")

        bit = font.glyph_bit_offset(code)
        glyphs = font.glyph_data
        width = font.char_width(code)
        for column in range(width):
            for row in range(font.height_in_pixel):
                if glyphs[bit >> 3] & (1 << (bit & 7)):
                    self.set_pixel(x + column, y + row)
                else:
                    self.clear_pixel(x + column, y + row)
                bit += 1
        return x + width + CHAR_SPACING

    def draw_string(self, x: int, y: int, text: str) -> int:
        next_x = x
        for c in text:
            next_x = self.draw_char(next_x, y, c)
        return next_x

    def draw_string_lf(self, x: int, y: int, text: str) -> int:
        """Draw text, wrapping to a new line at the right edge."""
        font = self._require_font()
        next_x = x
        for c in text:
            if next_x + font.width_in_pixel > self._width:
                next_x = 0
                y += font.height_in_pixel
            next_x = self.draw_char(next_x, y, c)
        return next_x