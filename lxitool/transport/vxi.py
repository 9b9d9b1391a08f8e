# lxitool/transport/vxi.py
from __future__ import annotations

import logging
import socket
from typing import Optional

import vxi11
from vxi11.vxi11 import Vxi11Exception

from .base import Transport
from .errors import TransportError, TransportIOError, TransportOpenError, TransportTimeout

_log = logging.getLogger(__name__)

# VXI-11 device error code for "I/O timeout"
VXI11_IO_TIMEOUT = 15


def _translate(e: Exception, action: str, address: str, *, opening: bool = False) -> TransportError:
    details = {"address": address, "action": action}
    if isinstance(e, Vxi11Exception):
        if getattr(e, "err", None) == VXI11_IO_TIMEOUT:
            return TransportTimeout(f"VXI-11 {action} timed out ({address})", details=details)
        err_cls = TransportOpenError if opening else TransportIOError
        return err_cls(f"VXI-11 {action} failed ({address}): {e}", details=details)
    if isinstance(e, socket.timeout):
        return TransportTimeout(f"VXI-11 {action} timed out ({address})", details=details)
    err_cls = TransportOpenError if opening else TransportIOError
    return err_cls(
        f"VXI-11 {action} failed ({address}): {e}",
        hint="Check the IP address and that the instrument has LAN/LXI enabled." if opening else None,
        details=details,
    )


class VXI11Transport(Transport):
    """
    VXI-11 transport implemented via python-vxi11.

    The link is created on open(); timeouts are in seconds and apply to
    every RPC.
    """

    def __init__(self, address: str, timeout: float = 1.0):
        self.address = address
        self.timeout = timeout
        self.instr: Optional[vxi11.Instrument] = None

    def open(self) -> None:
        try:
            instr = vxi11.Instrument(self.address)
            instr.timeout = self.timeout
            instr.open()
        except (Vxi11Exception, OSError) as e:
            raise _translate(e, "connect", self.address, opening=True) from None

        self.instr = instr
        _log.debug("VXI11_OPEN address=%s timeout=%s", self.address, self.timeout)

    def close(self) -> None:
        if self.instr is not None:
            try:
                self.instr.close()
            except (Vxi11Exception, OSError) as e:
                _log.warning("VXI11_CLOSE_FAILED address=%s err=%s", self.address, e)
            finally:
                self.instr = None

    def is_open(self) -> bool:
        return self.instr is not None

    def send(self, data: bytes) -> int:
        if self.instr is None:
            raise TransportIOError("send while transport not open")

        try:
            self.instr.write_raw(bytes(data))
        except (Vxi11Exception, OSError) as e:
            raise _translate(e, "send", self.address) from None
        return len(data)

    def receive(self) -> bytes:
        if self.instr is None:
            raise TransportIOError("receive while transport not open")

        try:
            return bytes(self.instr.read_raw())
        except (Vxi11Exception, OSError) as e:
            raise _translate(e, "receive", self.address) from None


def discover_devices(timeout: float = 1.0) -> list[str]:
    """
    Broadcast a VXI-11 portmapper query and return the responding addresses.
    """
    try:
        found = vxi11.list_devices(timeout=timeout)
    except OSError as e:
        raise TransportIOError(
            f"Discovery failed: {e}",
            hint="Discovery needs a network interface that allows UDP broadcast.",
        ) from None
    return sorted(set(found))
