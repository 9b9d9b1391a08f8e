from __future__ import annotations

import pytest

from lxitool.core.errors import ConfigurationError
from lxitool.transport.base import Transport
from lxitool.transport.registry import TransportDriverRegistry
from lxitool.transport.tcp import SocketTransport
from lxitool.transport.vxi import VXI11Transport


class DummyTransport(Transport):
    def __init__(self, *, x: int = 0):
        self.x = x

    def open(self) -> None: ...
    def close(self) -> None: ...
    def send(self, data: bytes) -> int: return len(data)
    def receive(self) -> bytes: return b""


def test_registry_has_and_get_class_case_insensitive():
    reg = TransportDriverRegistry({"DUMMY": DummyTransport})

    assert reg.has("dummy") is True
    assert reg.has("DUMMY") is True
    assert reg.has("DuMmY") is True

    assert reg.get_class("dummy") is DummyTransport


def test_registry_get_class_unknown_raises():
    reg = TransportDriverRegistry({"dummy": DummyTransport})
    with pytest.raises(ConfigurationError) as ei:
        reg.get_class("gpib")
    assert "dummy" in ei.value.hint


def test_registry_create_instantiates_with_params():
    reg = TransportDriverRegistry({"dummy": DummyTransport})

    t = reg.create("DUMMY", x=42)
    assert isinstance(t, DummyTransport)
    assert t.x == 42


def test_default_registry_drivers():
    reg = TransportDriverRegistry.default()

    assert reg.names() == ["socket", "vxi11"]
    assert reg.get_class("vxi11") is VXI11Transport
    assert reg.get_class("socket") is SocketTransport
