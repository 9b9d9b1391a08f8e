from __future__ import annotations

import pytest

from lxitool.app.client import InstrumentClient, create_transport, is_query
from lxitool.core.config import Command, Configuration
from lxitool.core.errors import ConfigurationError
from lxitool.protocol.errors import MalformedResponse
from lxitool.transport.base import Transport
from lxitool.transport.registry import TransportDriverRegistry
from lxitool.transport.tcp import SocketTransport
from lxitool.transport.vxi import VXI11Transport


class FakeTransport(Transport):
    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.sent = []

    def open(self) -> None: ...
    def close(self) -> None: ...

    def send(self, data: bytes) -> int:
        self.sent.append(data)
        return len(data)

    def receive(self) -> bytes:
        return self.replies.pop(0)


def _cfg(**kw) -> Configuration:
    base = {"command": Command.SEND_COMMAND, "address": "192.0.2.5", "scpi_command": "*IDN?"}
    base.update(kw)
    return Configuration(**base)


def test_is_query():
    assert is_query("*IDN?") is True
    assert is_query(":MEAS:VPP? CHAN1") is True
    assert is_query("*RST") is False


def test_create_transport_default_is_vxi11():
    t = create_transport(_cfg(timeout_s=3))
    assert isinstance(t, VXI11Transport)
    assert t.address == "192.0.2.5"
    assert t.timeout == 3


def test_create_transport_socket_gets_port():
    t = create_transport(_cfg(transport="socket", port=5555))
    assert isinstance(t, SocketTransport)
    assert t.port == 5555


def test_create_transport_requires_address():
    with pytest.raises(ConfigurationError, match="No IP address"):
        create_transport(_cfg(address=""))


def test_create_transport_constructor_mismatch():
    class NoAddress(FakeTransport):
        def __init__(self):
            super().__init__()

    reg = TransportDriverRegistry({"vxi11": NoAddress})
    with pytest.raises(ConfigurationError):
        create_transport(_cfg(), reg)


def test_query_text_reply():
    t = FakeTransport([b"RIGOL TECHNOLOGIES,DS1054Z\n"])
    out = InstrumentClient(t).query("*IDN?")

    assert t.sent == [b"*IDN?"]
    assert out.data == b"RIGOL TECHNOLOGIES,DS1054Z"


def test_query_block_reply():
    t = FakeTransport([b"#15HELLO\n"])
    assert InstrumentClient(t).query(":WAV:DATA?").data == b"HELLO"


def test_query_block_rejects_text_reply():
    t = FakeTransport([b"HELLO\n"])
    with pytest.raises(MalformedResponse):
        InstrumentClient(t).query_block("display:data?")


def test_dispatch_non_query_does_not_receive():
    t = FakeTransport([])
    assert InstrumentClient(t).dispatch("*RST") is None
    assert t.sent == [b"*RST"]


def test_dispatch_query_returns_payload():
    t = FakeTransport([b"1\n"])
    assert InstrumentClient(t).dispatch("*OPC?").data == b"1"
