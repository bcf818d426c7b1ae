from collections import deque

import pytest

from lora_igate.aprs_is import APRSIS, LoginError


class FakeConn:
    def __init__(self, chunks):
        self.chunks = deque(chunks)
        self.sent = bytearray()
        self.timeout = None
        self.closed = False

    def settimeout(self, value):
        self.timeout = value

    def recv(self, size):
        if self.chunks:
            return self.chunks.popleft()
        if self.timeout == 0.0:
            raise BlockingIOError
        return b""

    def sendall(self, data):
        self.sent.extend(data)

    def close(self):
        self.closed = True


VERIFIED = b"# logresp N0CALL verified, server T2TEST\r\n"


def make_client(chunks, decoder=None):
    conn = FakeConn(chunks)
    calls = []

    def factory(server, port):
        calls.append((server, port))
        return conn

    client = APRSIS(factory, decoder)
    client.setup("N0CALL", "password", "Tool", "1.0")
    return client, conn, calls


def test_login_line_and_success():
    client, conn, calls = make_client([b"# aprsc 2.1\r\n", VERIFIED])
    client.connect("aprs.example.com", 14580)
    assert calls == [("aprs.example.com", 14580)]
    assert bytes(conn.sent) == b"user N0CALL pass password vers Tool 1.0\n\r\r\n"
    assert client.connected() is True


def test_login_with_filter():
    client, conn, _ = make_client([VERIFIED])
    client.connect("aprs.example.com", 14580, "r/48/16/100")
    assert bytes(conn.sent) == b"user N0CALL pass password vers Tool 1.0 filter r/48/16/100\n\r\r\n"


def test_unverified_login_raises():
    client, _, _ = make_client([b"# logresp N0CALL unverified, server T2TEST\r\n"])
    with pytest.raises(LoginError):
        client.connect("aprs.example.com", 14580)


def test_unreachable_server_raises():
    def factory(server, port):
        raise OSError("refused")

    client = APRSIS(factory)
    with pytest.raises(ConnectionError):
        client.connect("aprs.example.com", 14580)
    assert client.connected() is False


def test_closed_before_logresp_raises():
    client, _, _ = make_client([b"# aprsc 2.1\r\n"])
    with pytest.raises(ConnectionError):
        client.connect("aprs.example.com", 14580)


def test_get_message_returns_lines_and_skips_comments():
    client, _, _ = make_client([VERIFIED, b"# keepalive\r\nN0CALL>APRS:>hello\r\n"])
    client.connect("aprs.example.com", 14580)
    assert client.available() > 0
    assert client.get_message() is None
    assert client.get_message() == "N0CALL>APRS:>hello"
    assert client.available() == 0
    assert client.get_message() is None


def test_decoder_is_applied():
    client, _, _ = make_client([VERIFIED, b"N0CALL>APRS:>hi\r\n"], decoder=lambda s: ("decoded", s))
    client.connect("aprs.example.com", 14580)
    assert client.get_message() == ("decoded", "N0CALL>APRS:>hi")


def test_send_message_object_and_string():
    class Msg:
        def encode(self):
            return "N0CALL>APRS:>x"

    client, conn, _ = make_client([VERIFIED])
    client.connect("aprs.example.com", 14580)
    conn.sent.clear()
    client.send_message(Msg())
    assert bytes(conn.sent) == b"N0CALL>APRS:>x\n\r\n"
    conn.sent.clear()
    client.send_message("N0CALL>APRS:>y")
    assert bytes(conn.sent) == b"N0CALL>APRS:>y\r\n"


def test_send_without_connection_raises():
    client = APRSIS(lambda s, p: FakeConn([]))
    with pytest.raises(ConnectionError):
        client.send_message("N0CALL>APRS:>x")


def test_close():
    client, conn, _ = make_client([VERIFIED])
    client.connect("aprs.example.com", 14580)
    client.close()
    assert conn.closed is True
    assert client.connected() is False