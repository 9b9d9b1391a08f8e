from __future__ import annotations

import pytest

from lxitool.protocol.errors import MalformedResponse
from lxitool.protocol.tmc import (
    DecodedPayload,
    decode_tmc_block,
    extract_payload,
    is_indefinite_block,
    is_tmc_block,
    response_complete,
)


def _block(payload: bytes, terminator: bytes = b"\n") -> bytes:
    length = str(len(payload)).encode()
    return b"#" + str(len(length)).encode() + length + payload + terminator


def test_decode_hello_example():
    out = decode_tmc_block(b"#15HELLO\n")
    assert out == DecodedPayload(data=b"HELLO", length=5)


@pytest.mark.parametrize("size", [0, 1, 9, 10, 99, 100, 12345])
def test_decode_strips_header_and_terminator(size):
    payload = bytes(range(256)) * (size // 256 + 1)
    payload = payload[:size]
    raw = _block(payload)

    out = decode_tmc_block(raw)

    n = int(raw[1:2])
    assert out.data == payload
    assert out.length == len(raw) - (n + 2) - 1


def test_decode_payload_may_contain_newlines_and_hash():
    payload = b"#9\n\n\x00BM"
    assert decode_tmc_block(_block(payload)).data == payload


def test_decode_accepts_any_terminator_byte():
    assert decode_tmc_block(b"#13abc\r").data == b"abc"


def test_decode_returns_independent_copy():
    raw = bytearray(b"#15HELLO\n")
    out = decode_tmc_block(raw)
    raw[3:8] = b"xxxxx"
    assert out.data == b"HELLO"
    assert isinstance(out.data, bytes)


def test_decode_indefinite_length_block():
    out = decode_tmc_block(b"#0some data\n")
    assert out.data == b"some data"
    assert out.length == 9


def test_decode_rejects_already_stripped_payload():
    out = decode_tmc_block(b"#15HELLO\n")
    with pytest.raises(MalformedResponse):
        decode_tmc_block(out.data)


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"#",
        b"HELLO\n",
        b"#X5HELLO\n",
        b"#25",                 # truncated inside length field
        b"#2a5HELLO\n",         # non-decimal length field
        b"#15",                 # no terminator
        b"#15HELL\n",           # shorter than declared
        b"#15HELLO!!\n",        # longer than declared
    ],
)
def test_decode_malformed_inputs_raise(raw):
    with pytest.raises(MalformedResponse):
        decode_tmc_block(raw)


def test_malformed_response_carries_details():
    with pytest.raises(MalformedResponse) as ei:
        decode_tmc_block(b"#15HELL\n")
    err = ei.value
    assert err.code == "malformed_response"
    assert err.details["declared"] == 5
    assert err.details["available"] == 4
    assert err.details["length"] == 8


def test_is_tmc_block():
    assert is_tmc_block(b"#15HELLO\n") is True
    assert is_tmc_block(b"#0x\n") is True
    assert is_tmc_block(b"#") is False
    assert is_tmc_block(b"RIGOL,DS1054Z\n") is False


def test_extract_payload_text_strips_line_terminator():
    assert extract_payload(b"RIGOL TECHNOLOGIES,DS1054Z\n").data == b"RIGOL TECHNOLOGIES,DS1054Z"
    assert extract_payload(b"1.0E+00\r\n").data == b"1.0E+00"
    assert extract_payload(b"no terminator").data == b"no terminator"


def test_extract_payload_block_goes_through_decoder():
    assert extract_payload(b"#15HELLO\n").data == b"HELLO"
    with pytest.raises(MalformedResponse):
        extract_payload(b"#15HELL\n")


def test_response_complete_text():
    assert response_complete(b"") is False
    assert response_complete(b"RIGOL") is False
    assert response_complete(b"RIGOL\n") is True


def test_response_complete_block_waits_for_declared_length():
    assert response_complete(b"#") is False
    assert response_complete(b"#2") is False
    assert response_complete(b"#21") is False
    assert response_complete(b"#210abc\n") is False  # newline inside payload
    assert response_complete(b"#210abc\ndefghi") is False
    assert response_complete(b"#210abc\ndefghi\n") is True
    assert response_complete(bytearray(b"#15HELLO\n")) is True


def test_response_complete_bad_length_field_stops_reading():
    assert response_complete(b"#2ab") is True


def test_response_complete_indefinite_block_ignores_newlines():
    # bitmap bytes routinely contain 0x0a
    assert response_complete(b"#0BM\n") is False
    assert response_complete(b"#0BM\n\x00\x01\x02\n") is False
    assert is_indefinite_block(b"#0BM\n") is True
    assert is_indefinite_block(b"#15HELLO\n") is False
