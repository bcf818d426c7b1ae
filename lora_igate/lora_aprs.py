"""LoRa modem carrying APRS frames behind a three byte header."""

from __future__ import annotations

from typing import Any, Callable, Optional

from .lora import LoRa, RegisterTransport

APRS_HEADER = b"<\xff\x01"
DEFAULT_FREQUENCY = 433_775_000


class LoRaAPRS(LoRa):
    """Sends and receives APRS text frames.

    Received text is passed through ``decoder`` when one is given. A
    message to send may be a string or any object whose ``encode()``
    returns the frame text.
    """

    def __init__(
        self,
        transport: RegisterTransport,
        decoder: Optional[Callable[[str], Any]] = None,
        tx_timeout: Optional[float] = None,
    ) -> None:
        super().__init__(transport, tx_timeout)
        self._decoder = decoder
        self._last_received: Any = None
        self._rx_frequency = DEFAULT_FREQUENCY
        self._tx_frequency = DEFAULT_FREQUENCY

    @property
    def message(self) -> Any:
        """The last APRS message received."""
        return self._last_received

    @property
    def rx_frequency(self) -> int:
        return self._rx_frequency

    @property
    def tx_frequency(self) -> int:
        return self._tx_frequency

    def check_message(self) -> bool:
        """Read a waiting packet; True if it was an APRS frame."""
        if not self.parse_packet():
            return False
        header = self.read_bytes(3)
        if not header or header[0] != APRS_HEADER[0]:
            while self.read() is not None:
                pass
            return False
        payload = bytearray()
        while (byte := self.read()) is not None:
            payload.append(byte)
        text = payload.decode("latin-1")
        self._last_received = self._decoder(text) if self._decoder else text
        return True

    def send_message(self, message: Any) -> None:
        """Transmit on the TX frequency, then return to the RX frequency."""
        self.set_frequency(self._tx_frequency)
        text = message if isinstance(message, str) else message.encode()
        self.begin_packet()
        self.write(APRS_HEADER)
        self.write(text.encode("latin-1"))
        self.end_packet()
        self.set_frequency(self._rx_frequency)

    def set_rx_frequency(self, frequency: int) -> None:
        self._rx_frequency = frequency
        self.set_frequency(frequency)

    def set_tx_frequency(self, frequency: int) -> None:
        self._tx_frequency = frequency