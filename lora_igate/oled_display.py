"""Common command set of small monochrome OLED controllers."""

from __future__ import annotations

import abc
import enum

CHARGEPUMP = 0x8D
COLUMNADDR = 0x21
COMSCANDEC = 0xC8
COMSCANINC = 0xC0
DISPLAYALLON = 0xA5
DISPLAYALLON_RESUME = 0xA4
DISPLAYOFF = 0xAE
DISPLAYON = 0xAF
EXTERNALVCC = 0x1
INVERTDISPLAY = 0xA7
MEMORYMODE = 0x20
NORMALDISPLAY = 0xA6
PAGEADDR = 0x22
SEGREMAP = 0xA0
SETCOMPINS = 0xDA
SETCONTRAST = 0x81
SETDISPLAYCLOCKDIV = 0xD5
SETDISPLAYOFFSET = 0xD3
SETHIGHCOLUMN = 0x10
SETLOWCOLUMN = 0x00
SETMULTIPLEX = 0xA8
SETPRECHARGE = 0xD9
SETSEGMENTREMAP = 0xA1
SETSTARTLINE = 0x40
SETVCOMDETECT = 0xDB
SWITCHCAPVCC = 0x2


class Geometry(enum.IntEnum):
    G128_64 = 0
    G128_32 = 1
    G64_48 = 2
    G64_32 = 3

    @property
    def width(self) -> int:
        return 128 if self in (Geometry.G128_64, Geometry.G128_32) else 64

    @property
    def height(self) -> int:
        return {
            Geometry.G128_64: 64,
            Geometry.G64_48: 48,
            Geometry.G128_32: 32,
            Geometry.G64_32: 32,
        }[self]


class OLEDDisplay(abc.ABC):
    """Base display: subclasses provide the transport for commands and data."""

    def __init__(self, geometry: Geometry = Geometry.G128_64) -> None:
        self._geometry = Geometry(geometry)
        self._display_is_on = False

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    @property
    def width(self) -> int:
        return self._geometry.width

    @property
    def height(self) -> int:
        return self._geometry.height

    @abc.abstractmethod
    def send_command(self, command: int) -> None:
        """Send one command byte to the controller."""

    @abc.abstractmethod
    def intern_display(self, bitmap) -> None:
        """Transfer a frame buffer to the display memory."""

    def display_on(self) -> None:
        self.send_command(DISPLAYON)
        self._display_is_on = True

    def is_display_on(self) -> bool:
        return self._display_is_on

    def display_off(self) -> None:
        self.send_command(DISPLAYOFF)
        self._display_is_on = False

    def is_display_off(self) -> bool:
        return not self._display_is_on

    def invert_display(self) -> None:
        self.send_command(INVERTDISPLAY)

    def normal_display(self) -> None:
        self.send_command(NORMALDISPLAY)

    def set_contrast(self, contrast: int, precharge: int = 241, comdetect: int = 64) -> None:
        for command in (
            SETPRECHARGE, precharge & 0xFF,
            SETCONTRAST, contrast & 0xFF,
            SETVCOMDETECT, comdetect & 0xFF,
            DISPLAYALLON_RESUME, NORMALDISPLAY, DISPLAYON,
        ):
            self.send_command(command)

    def set_brightness(self, brightness: int) -> None:
        """Map a 0-255 brightness onto contrast, precharge and VCOM detect."""
        if not 0 <= brightness <= 255:
            raise ValueError("brightness must be between 0 and 255")
        if brightness < 128:
            contrast = int(brightness * 1.171)
        else:
            contrast = int(brightness * 1.171 - 43)
        precharge = 0 if brightness == 0 else 241
        self.set_contrast(contrast & 0xFF, precharge, brightness // 8)

    def reset_orientation(self) -> None:
        self.send_command(SEGREMAP)
        self.send_command(COMSCANINC)

    def flip_screen_vertically(self) -> None:
        self.send_command(SEGREMAP | 0x01)
        self.send_command(COMSCANDEC)

    def mirror_screen(self) -> None:
        self.send_command(SEGREMAP)
        self.send_command(COMSCANDEC)

    def display(self, bitmap) -> None:
        """Show ``bitmap``, switching the panel on first if needed."""
        if self.is_display_off():
            self.display_on()
        self.intern_display(bitmap)

    def clear(self) -> None:
        """Nothing is buffered in the display object, so nothing is cleared."""

    def send_init_commands(self) -> None:
        geometry = self._geometry
        tall = geometry in (Geometry.G128_64, Geometry.G64_48, Geometry.G64_32)
        commands = [
            DISPLAYOFF,
            SETDISPLAYCLOCKDIV, 0xF0,
            SETMULTIPLEX, (self.height - 1) & 0xFF,
            SETDISPLAYOFFSET, 0x00,
            0x00 if geometry is Geometry.G64_32 else SETSTARTLINE,
            CHARGEPUMP, 0x14,
            MEMORYMODE, 0x00,
            SEGREMAP,
            COMSCANINC,
            SETCOMPINS, 0x12 if tall else 0x02,
            SETCONTRAST, 0xCF if tall else 0x8F,
            SETPRECHARGE, 0xF1,
            SETVCOMDETECT, 0x40,
            DISPLAYALLON_RESUME,
            NORMALDISPLAY,
            0x2E,
            DISPLAYON,
        ]
        for command in commands:
            self.send_command(command)