"""
TMC / IEEE 488.2 definite-length block handling.

A block reply looks like::

    #<n><n length digits><payload><terminator>

e.g. ``b"#15HELLO\\n"``. ``n == 0`` marks an indefinite-length block whose
payload runs up to the final terminator byte.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import MalformedResponse

_log = logging.getLogger(__name__)

BLOCK_MARKER = b"#"
TERMINATOR = b"\n"


@dataclass(frozen=True)
class DecodedPayload:
    data: bytes
    length: int

    @classmethod
    def of(cls, data: bytes) -> "DecodedPayload":
        data = bytes(data)
        return cls(data=data, length=len(data))


def is_tmc_block(raw: bytes) -> bool:
    """True if raw starts with '#' followed by a decimal digit."""
    return len(raw) >= 2 and raw[:1] == BLOCK_MARKER and raw[1:2].isdigit()


def is_indefinite_block(raw: bytes) -> bool:
    """True for an IEEE 488.2 indefinite-length block (`#0...`)."""
    return raw[:2] == BLOCK_MARKER + b"0"


def _header(raw: bytes) -> tuple[int, int | None]:
    """
    Validate the block header.

    Returns (header_size, declared_length); declared_length is None for
    indefinite-length blocks.
    """
    if raw[:1] != BLOCK_MARKER:
        raise MalformedResponse("Response is not a TMC block (missing '#' marker)", raw=raw)
    if len(raw) < 2 or not raw[1:2].isdigit():
        raise MalformedResponse("TMC block header has no digit count", raw=raw)

    n = int(raw[1:2])
    header_size = n + 2
    if len(raw) < header_size:
        raise MalformedResponse(
            f"TMC block truncated inside header (need {header_size} bytes, got {len(raw)})",
            raw=raw,
        )
    if n == 0:
        return header_size, None

    digits = raw[2:header_size]
    if not digits.isdigit():
        raise MalformedResponse(f"TMC block length field is not decimal: {digits!r}", raw=raw)
    return header_size, int(digits)


def decode_tmc_block(raw: bytes) -> DecodedPayload:
    """
    Strip the block header and the single trailing terminator byte.

    Raises MalformedResponse when the header is invalid or the declared
    length does not match the buffer size.
    """
    raw = bytes(raw)
    header_size, declared = _header(raw)

    # header + at least the terminator byte
    remaining = len(raw) - header_size
    if remaining < 1:
        raise MalformedResponse("TMC block has no terminator", raw=raw)

    length = remaining - 1
    if declared is not None and declared != length:
        raise MalformedResponse(
            f"TMC block length mismatch: header declares {declared} bytes, buffer holds {length}",
            raw=raw,
            details={"declared": declared, "available": length},
        )

    payload = DecodedPayload.of(raw[header_size: header_size + length])
    _log.debug("TMC_DECODED header=%d payload=%d", header_size, payload.length)
    return payload


def extract_payload(raw: bytes) -> DecodedPayload:
    """
    Payload of any instrument reply.

    Block replies go through decode_tmc_block; plain text answers only lose
    their line terminator.
    """
    if is_tmc_block(raw):
        return decode_tmc_block(raw)

    data = bytes(raw)
    if data.endswith(TERMINATOR):
        data = data[:-1]
        if data.endswith(b"\r"):
            data = data[:-1]
    return DecodedPayload.of(data)


def response_complete(buf: bytes | bytearray) -> bool:
    """
    Whether a partially received stream holds a whole reply.

    An indefinite-length block is never complete here: the reader keeps going
    until the peer closes or the timeout expires.
    """
    if not buf:
        return False
    if not is_tmc_block(buf):
        return buf.endswith(TERMINATOR)

    n = int(buf[1:2])
    if n == 0:
        # no length to wait for; binary payloads may contain newlines
        return False
    if len(buf) < n + 2:
        return False

    digits = buf[2: n + 2]
    if not digits.isdigit():
        # let the decoder report it
        return True
    return len(buf) >= n + 2 + int(digits) + 1
