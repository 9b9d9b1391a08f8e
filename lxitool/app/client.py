# lxitool/app/client.py
from __future__ import annotations

import logging
from typing import Optional

from lxitool.core.config import Configuration
from lxitool.core.errors import ConfigurationError
from lxitool.protocol.tmc import DecodedPayload, decode_tmc_block, extract_payload
from lxitool.transport.base import Transport
from lxitool.transport.registry import TransportDriverRegistry


def is_query(command: str) -> bool:
    """SCPI queries carry a '?'; only those produce a reply."""
    return "?" in command


def create_transport(config: Configuration, registry: Optional[TransportDriverRegistry] = None) -> Transport:
    """
    Construct (but do not open) the transport selected by the configuration.
    """
    if not config.address:
        raise ConfigurationError(
            "No IP address specified",
            hint="Pass the instrument address with --ip <address>.",
        )

    registry = registry or TransportDriverRegistry.default()
    params = {"address": config.address, "timeout": config.timeout_s}
    if config.transport.lower() == "socket":
        params["port"] = config.port

    try:
        return registry.create(config.transport, **params)
    except TypeError as e:
        # constructor mismatch for a custom driver
        raise ConfigurationError(
            f"Failed to construct transport '{config.transport}'.",
            hint=str(e),
            details={"driver": config.transport, "params": params},
        ) from None


class InstrumentClient:
    """
    One request/response exchange per call over an already opened transport.
    """

    def __init__(self, transport: Transport):
        self._transport = transport
        self._log = logging.getLogger(__name__)

    def write(self, command: str) -> None:
        data = command.encode("ascii", errors="replace")
        self._transport.send(data)
        self._log.info("SCPI_SEND cmd=%r bytes=%d", command, len(data))

    def read_raw(self) -> bytes:
        raw = self._transport.receive()
        self._log.info("SCPI_RECV bytes=%d", len(raw))
        return raw

    def query(self, command: str) -> DecodedPayload:
        """Send a query; TMC blocks are unframed, text loses its terminator."""
        self.write(command)
        return extract_payload(self.read_raw())

    def query_block(self, command: str) -> DecodedPayload:
        """Send a query whose answer must be a TMC block."""
        self.write(command)
        return decode_tmc_block(self.read_raw())

    def dispatch(self, command: str) -> Optional[DecodedPayload]:
        """Send any command; returns a payload only for queries."""
        if is_query(command):
            return self.query(command)
        self.write(command)
        return None
