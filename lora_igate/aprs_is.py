"""Client for the APRS-IS network over a TCP connection."""

from __future__ import annotations

import logging
import socket
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)

_ENCODING = "latin-1"


class LoginError(ConnectionError):
    """Raised when the server does not verify the login."""


class APRSIS:
    """Logs in to an APRS-IS server and exchanges APRS lines with it.

    ``connection_factory`` opens a socket-like object for ``(server, port)``.
    Received lines are passed through ``decoder`` when one is given; a
    message to send may be a string or an object whose ``encode()`` returns
    the frame text.
    """

    def __init__(
        self,
        connection_factory: Optional[Callable[[str, int], Any]] = None,
        decoder: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self._factory = connection_factory or (lambda server, port: socket.create_connection((server, port)))
        self._decoder = decoder
        self._user = ""
        self._passcode = ""
        self._tool_name = ""
        self._version = ""
        self._conn: Any = None
        self._closed = True
        self._buffer = bytearray()

    def setup(self, user: str, passcode: str, tool_name: str, version: str) -> None:
        self._user = user
        self._passcode = passcode
        self._tool_name = tool_name
        self._version = version

    def _login_line(self, filter: Optional[str]) -> str:
        line = f"user {self._user} pass {self._passcode} vers {self._tool_name} {self._version}"
        if filter is not None:
            line += f" filter {filter}"
        return line + "\n\r"

    def connect(self, server: str, port: int, filter: Optional[str] = None) -> None:
        """Connect and log in; raise ConnectionError or LoginError on failure."""
        self.close()
        try:
            self._conn = self._factory(server, port)
        except OSError as exc:
            log.error("Something went wrong on connecting! Is the server reachable?")
            raise ConnectionError(f"cannot connect to {server}:{port}") from exc
        self._closed = False
        self._buffer.clear()

        self.send_message(self._login_line(filter))
        while True:
            if self._closed and not self._buffer:
                raise ConnectionError("connection closed before login response")
            line = self._read_line()
            if "logresp" in line:
                if "unverified" in line:
                    log.error("User can not be verified with passcode!")
                    raise LoginError("user can not be verified with passcode")
                return

    def connected(self) -> bool:
        return self._conn is not None and not self._closed

    def send_message(self, message: Any) -> None:
        """Send a line; raise ConnectionError when not connected."""
        if not self.connected():
            raise ConnectionError("not connected")
        text = message if isinstance(message, str) else message.encode() + "\n"
        self._conn.sendall((text + "\r\n").encode(_ENCODING))

    def _receive(self, blocking: bool) -> None:
        self._conn.settimeout(None if blocking else 0.0)
        try:
            data = self._conn.recv(4096)
        except (BlockingIOError, TimeoutError):
            return
        if not data:
            self._closed = True
            return
        self._buffer.extend(data)

    def _read_line(self) -> str:
        while b"\n" not in self._buffer and not self._closed:
            self._receive(blocking=True)
        index = self._buffer.find(b"\n")
        if index == -1:
            raw = bytes(self._buffer)
            self._buffer.clear()
        else:
            raw = bytes(self._buffer[:index])
            del self._buffer[: index + 1]
        return raw.decode(_ENCODING).rstrip("\r")

    def available(self) -> int:
        """Number of received bytes waiting to be read."""
        if self.connected():
            self._receive(blocking=False)
        return len(self._buffer)

    def get_message(self) -> Any:
        """Next APRS line, decoded; None for no data or a server comment."""
        if self.available() <= 0:
            return None
        line = self._read_line()
        if line.startswith("#"):
            log.debug("%s", line)
            return None
        if not line:
            return None
        return self._decoder(line) if self._decoder else line

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
        self._conn = None
        self._closed = True
        self._buffer.clear()