# transport/__init__.py

from .base import Transport
from .errors import TransportError, TransportIOError, TransportOpenError, TransportTimeout
from .registry import TransportDriverRegistry
from .tcp import SocketTransport
from .vxi import VXI11Transport, discover_devices

__all__ = [
    "Transport", "TransportDriverRegistry",
    "SocketTransport", "VXI11Transport", "discover_devices",
    "TransportError", "TransportIOError", "TransportOpenError", "TransportTimeout",
]
