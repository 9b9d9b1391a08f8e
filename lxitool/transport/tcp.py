# lxitool/transport/tcp.py
from __future__ import annotations

import logging
import socket
from typing import Optional

from lxitool.protocol.tmc import TERMINATOR, is_indefinite_block, response_complete

from .base import Transport
from .errors import TransportIOError, TransportOpenError, TransportTimeout

_log = logging.getLogger(__name__)


class SocketTransport(Transport):
    """
    Raw SCPI-over-TCP transport (port 5025 on most LXI instruments).

    Messages are newline terminated; receive() reads until a complete text
    line or a complete TMC block has arrived. An indefinite-length block
    (`#0`) carries no length, so it ends when the peer closes or the timeout
    expires after a trailing newline.
    """

    def __init__(self, address: str, port: int = 5025, timeout: float = 1.0, chunk_size: int = 4096):
        self.address = address
        self.port = port
        self.timeout = timeout
        self.chunk_size = chunk_size
        self.sock: Optional[socket.socket] = None

    def open(self) -> None:
        try:
            self.sock = socket.create_connection((self.address, self.port), timeout=self.timeout)
        except socket.timeout:
            self.sock = None
            raise TransportTimeout(
                f"Connect to {self.address}:{self.port} timed out",
                details={"address": self.address, "port": self.port},
            ) from None
        except OSError as e:
            self.sock = None
            raise TransportOpenError(
                f"Connect to {self.address}:{self.port} failed: {e}",
                hint="Check the IP address and that raw SCPI sockets are enabled on the instrument.",
                details={"address": self.address, "port": self.port},
            ) from None
        _log.debug("SOCKET_OPEN address=%s port=%d", self.address, self.port)

    def close(self) -> None:
        if self.sock is not None:
            try:
                self.sock.close()
            finally:
                self.sock = None

    def is_open(self) -> bool:
        return self.sock is not None

    def send(self, data: bytes) -> int:
        if self.sock is None:
            raise TransportIOError("send while transport not open")

        data = bytes(data)
        if not data.endswith(TERMINATOR):
            data += TERMINATOR
        try:
            self.sock.sendall(data)
        except socket.timeout:
            raise TransportTimeout(f"Send to {self.address} timed out") from None
        except OSError as e:
            self.close()
            raise TransportIOError(f"Socket send failed: {e}") from None
        return len(data)

    def receive(self) -> bytes:
        if self.sock is None:
            raise TransportIOError("receive while transport not open")

        buf = bytearray()
        try:
            while not response_complete(buf):
                chunk = self.sock.recv(self.chunk_size)
                if not chunk:
                    # peer closed → return whatever is collected
                    break
                buf += chunk
        except socket.timeout:
            if not (is_indefinite_block(buf) and buf.endswith(TERMINATOR)):
                raise TransportTimeout(
                    f"No response from {self.address} within {self.timeout}s",
                    details={"received": len(buf)},
                ) from None
            _log.debug("SOCKET_INDEFINITE_BLOCK_END received=%d", len(buf))
        except OSError as e:
            self.close()
            raise TransportIOError(f"Socket receive failed: {e}") from None

        if not buf:
            raise TransportIOError(f"Connection to {self.address} closed without a response")
        return bytes(buf)
