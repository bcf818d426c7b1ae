"""Description of the bitmap fonts used for drawing text on the display."""

from __future__ import annotations

from dataclasses import dataclass

CHAR_SPACING = 2
"""Blank columns left between two drawn characters."""


@dataclass(frozen=True)
class FontDesc:
    """A proportional 1-bit font.

    ``data`` starts with one width byte per character from ``first_char`` to
    ``last_char``. The glyph bits follow as one bit stream. Each glyph is
    stored column by column, top to bottom, least significant bit first.
    """

    width_in_pixel: int
    height_in_pixel: int
    first_char: int
    last_char: int
    data: bytes
    bits_per_pixel: int = 1
    total_size: int = 0

    def __post_init__(self) -> None:
        if self.last_char < self.first_char:
            raise ValueError("last_char must not be below first_char")
        if self.height_in_pixel <= 0:
            raise ValueError("font height must be positive")
        object.__setattr__(self, "data", bytes(self.data))
        if len(self.data) < self.char_count:
            raise ValueError("font data is shorter than its width table")
        if not self.total_size:
            object.__setattr__(self, "total_size", len(self.data))

    @property
    def char_count(self) -> int:
        return self.last_char - self.first_char + 1

    @property
    def glyph_data(self) -> bytes:
        """The glyph bit stream that follows the width table."""
        return self.data[self.char_count:]

    def contains(self, code: int) -> bool:
        return self.first_char <= code <= self.last_char

    def char_width(self, code: int) -> int:
        """Width in pixels of the character ``code``."""
        if not self.contains(code):
            raise ValueError(f"character code {code:#x} is not in this font")
        return self.data[code - self.first_char]

    def glyph_bit_offset(self, code: int) -> int:
        """Position of the first bit of ``code`` in :attr:`glyph_data`."""
        if not self.contains(code):
            raise ValueError(f"character code {code:#x} is not in this font")
        return sum(self.data[: code - self.first_char]) * self.height_in_pixel