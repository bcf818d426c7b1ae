"""SSD1306 OLED controller attached over I2C."""

from __future__ import annotations

from typing import Protocol

from .oled_display import COLUMNADDR, PAGEADDR, Geometry, OLEDDisplay

_COMMAND_PREFIX = 0x80
_DATA_PREFIX = 0x40
_DATA_CHUNK = 16


class I2CBus(Protocol):
    """Anything that can send one I2C write transaction."""

    def write(self, address: int, payload: bytes) -> None:
        ...


class SSD1306(OLEDDisplay):
    """SSD1306 display; the panel is initialised on construction."""

    def __init__(self, bus: I2CBus, address: int, geometry: Geometry = Geometry.G128_64) -> None:
        super().__init__(geometry)
        self._bus = bus
        self._address = address
        self.send_init_commands()

    @property
    def address(self) -> int:
        return self._address

    def intern_display(self, bitmap) -> None:
        """Send the whole frame buffer in 16-byte data transactions."""
        size = self.width * self.height // 8
        buffer = bitmap.buffer
        if len(buffer) < size:
            raise ValueError("bitmap is smaller than the display")

        for command in (PAGEADDR, 0x0, 0xFF, COLUMNADDR, 0x0, self.width - 1):
            self.send_command(command)

        for start in range(0, size, _DATA_CHUNK):
            chunk = buffer[start:start + _DATA_CHUNK]
            self._bus.write(self._address, bytes([_DATA_PREFIX]) + chunk)

    def send_command(self, command: int) -> None:
        self._bus.write(self._address, bytes([_COMMAND_PREFIX, command & 0xFF]))