# protocol/__init__.py

from .errors import MalformedResponse
from .tmc import (
    DecodedPayload,
    decode_tmc_block,
    extract_payload,
    is_tmc_block,
    response_complete,
)

__all__ = [
    "MalformedResponse",
    "DecodedPayload",
    "decode_tmc_block", "extract_payload", "is_tmc_block", "response_complete",
]
