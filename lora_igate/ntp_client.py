"""Simple NTP client that keeps time from periodic server queries."""

from __future__ import annotations

import random as _random
import socket
import time
from typing import Callable, Optional, Protocol

SEVENTY_YEARS = 2208988800
NTP_PACKET_SIZE = 48
NTP_DEFAULT_LOCAL_PORT = 1337
NTP_SERVER_PORT = 123
DEFAULT_POOL_SERVER = "pool.ntp.org"
DEFAULT_UPDATE_INTERVAL_MS = 60000

_MASK32 = 0xFFFFFFFF
_POLL_DELAY_S = 0.01
_MAX_POLLS = 100


def _millis() -> int:
    return int(time.monotonic() * 1000) & _MASK32


def _request_packet() -> bytes:
    packet = bytearray(NTP_PACKET_SIZE)
    packet[0] = 0b11100011  # leap indicator, version, mode
    packet[1] = 0  # stratum
    packet[2] = 6  # polling interval
    packet[3] = 0xEC  # peer clock precision
    packet[12:16] = bytes([49, 0x4E, 49, 52])
    return bytes(packet)


class UdpTransport(Protocol):
    """A datagram endpoint bound to a local port."""

    def open(self, port: int) -> None:
        ...

    def close(self) -> None:
        ...

    def send(self, host: str, port: int, data: bytes) -> None:
        ...

    def receive(self) -> Optional[bytes]:
        """Next waiting datagram, or None when nothing is waiting."""


class SocketUdpTransport:
    """UDP transport on a non-blocking socket."""

    def __init__(self) -> None:
        self._sock: Optional[socket.socket] = None

    def open(self, port: int) -> None:
        self.close()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.bind(("", port))
        sock.setblocking(False)
        self._sock = sock

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def _require(self) -> socket.socket:
        if self._sock is None:
            raise RuntimeError("UDP transport is not open")
        return self._sock

    def send(self, host: str, port: int, data: bytes) -> None:
        self._require().sendto(data, (host, port))

    def receive(self) -> Optional[bytes]:
        try:
            data, _ = self._require().recvfrom(1024)
        except BlockingIOError:
            return None
        return data


class NTPClient:
    """Queries an NTP server at most once per update interval.

    ``pool_server_name`` may be a host name or an IP address. Times are
    seconds since 1970 plus the configured offset in seconds.
    """

    def __init__(
        self,
        pool_server_name: str = DEFAULT_POOL_SERVER,
        time_offset: int = 0,
        update_interval: int = DEFAULT_UPDATE_INTERVAL_MS,
        transport: Optional[UdpTransport] = None,
        clock: Optional[Callable[[], int]] = None,
        sleep: Optional[Callable[[float], None]] = None,
        rng: Optional[_random.Random] = None,
    ) -> None:
        self._pool_server_name = pool_server_name
        self._time_offset = time_offset
        self._update_interval = update_interval
        self._transport: UdpTransport = transport if transport is not None else SocketUdpTransport()
        self._clock = clock or _millis
        self._sleep = sleep or time.sleep
        self._rng = rng or _random.Random()
        self._udp_setup = False
        self._port = NTP_DEFAULT_LOCAL_PORT
        self._current_epoch = 0
        self._last_update = 0

    @property
    def port(self) -> int:
        return self._port

    @property
    def pool_server_name(self) -> str:
        return self._pool_server_name

    def _now(self) -> int:
        return self._clock() & _MASK32

    def begin(self, port: int = NTP_DEFAULT_LOCAL_PORT) -> None:
        """Open the local UDP port."""
        self._port = port
        self._transport.open(port)
        self._udp_setup = True

    def update(self) -> bool:
        """Query the server if the interval has passed; True on a fresh time."""
        elapsed = (self._now() - self._last_update) & _MASK32
        if elapsed >= self._update_interval or self._last_update == 0:
            if not self._udp_setup or self._port != NTP_DEFAULT_LOCAL_PORT:
                self.begin(self._port)
            return self.force_update()
        return False

    def force_update(self) -> bool:
        """Query the server now; False if no answer came within about a second."""
        if not self._udp_setup:
            self.begin(self._port)

        while self._transport.receive() is not None:
            pass

        self._transport.send(self._pool_server_name, NTP_SERVER_PORT, _request_packet())

        polls = 0
        while True:
            self._sleep(_POLL_DELAY_S)
            packet = self._transport.receive()
            if polls > _MAX_POLLS:
                return False
            polls += 1
            if packet:
                break

        self._last_update = (self._now() - 10 * (polls + 1)) & _MASK32

        if len(packet) < 44:
            raise ValueError(f"NTP reply too short: {len(packet)} bytes")
        secs_since_1900 = int.from_bytes(packet[40:44], "big")
        self._current_epoch = (secs_since_1900 - SEVENTY_YEARS) & _MASK32
        return True

    def epoch_time(self) -> int:
        """Seconds since 1 January 1970, offset applied."""
        since_update = ((self._now() - self._last_update) & _MASK32) // 1000
        return (self._time_offset + self._current_epoch + since_update) & _MASK32

    def day(self) -> int:
        """Day of the week, 0 being Sunday."""
        return (self.epoch_time() // 86400 + 4) % 7

    def hours(self) -> int:
        return (self.epoch_time() % 86400) // 3600

    def minutes(self) -> int:
        return (self.epoch_time() % 3600) // 60

    def seconds(self) -> int:
        return self.epoch_time() % 60

    def formatted_time(self) -> str:
        """The time as ``hh:mm:ss``."""
        raw = self.epoch_time()
        return f"{(raw % 86400) // 3600:02d}:{(raw % 3600) // 60:02d}:{raw % 60:02d}"

    def end(self) -> None:
        self._transport.close()
        self._udp_setup = False

    def set_time_offset(self, time_offset: int) -> None:
        self._time_offset = time_offset

    def set_update_interval(self, update_interval: int) -> None:
        self._update_interval = update_interval

    def set_pool_server_name(self, pool_server_name: str) -> None:
        self._pool_server_name = pool_server_name

    def set_random_port(self, min_value: int = 49152, max_value: int = 65535) -> None:
        """Pick a local port in ``[min_value, max_value)``."""
        self._port = self._rng.randrange(min_value, max_value)