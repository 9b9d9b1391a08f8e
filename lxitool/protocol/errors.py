# lxitool/protocol/errors.py
from __future__ import annotations

from lxitool.core.errors import LxiError


class MalformedResponse(LxiError):
    """
    The instrument replied but the reply framing could not be validated.

    Examples:
      - missing '#' block marker
      - non-digit header byte
      - declared block length disagrees with the received byte count
    """
    code = "malformed_response"

    def __init__(self, message: str, *, raw: bytes = b"", **kwargs):
        details = dict(kwargs.pop("details", None) or {})
        details.setdefault("length", len(raw))
        details.setdefault("head", raw[:16])
        super().__init__(message, details=details, **kwargs)
