# lxitool/transport/errors.py
from __future__ import annotations

from lxitool.core.errors import LxiError


class TransportError(LxiError):
    """Base class for transport-layer failures."""
    code = "transport_error"


class TransportOpenError(TransportError):
    code = "transport_open_error"


class TransportIOError(TransportError):
    code = "transport_io_error"


class TransportTimeout(TransportError):
    """No answer within the configured timeout."""
    code = "transport_timeout"
