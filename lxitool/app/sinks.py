# lxitool/app/sinks.py
from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO

from lxitool.core.config import Configuration
from lxitool.core.errors import OutputError
from lxitool.protocol.tmc import DecodedPayload

HEX_ROW = 16


class PayloadSink(ABC):
    """Consumer of decoded instrument replies."""

    @abstractmethod
    def write(self, payload: DecodedPayload) -> None: ...


class TextSink(PayloadSink):
    """Print the payload as text (invalid UTF-8 is replaced)."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def write(self, payload: DecodedPayload) -> None:
        out = self._stream or sys.stdout
        out.write(payload.data.decode("utf-8", errors="replace") + "\n")
        out.flush()


def hex_lines(data: bytes, width: int = HEX_ROW) -> list[str]:
    """Rows of `offset  hex bytes  |ascii|`."""
    lines = []
    for off in range(0, len(data), width):
        row = data[off: off + width]
        hexpart = " ".join(f"{b:02x}" for b in row)
        text = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in row)
        lines.append(f"{off:08x}  {hexpart:<{width * 3 - 1}}  |{text}|")
    return lines


class HexSink(PayloadSink):
    """Print the payload as a hex dump."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def write(self, payload: DecodedPayload) -> None:
        out = self._stream or sys.stdout
        for line in hex_lines(payload.data):
            out.write(line + "\n")
        out.flush()


class FileSink(PayloadSink):
    """
    Write the payload verbatim to a file (created or truncated).

    `label` names what was saved in the confirmation line.
    """

    def __init__(self, path: str | Path, *, label: str = "response", stream: Optional[TextIO] = None):
        self.path = Path(path)
        self._label = label
        self._stream = stream
        self._log = logging.getLogger(__name__)

    def write(self, payload: DecodedPayload) -> None:
        try:
            with open(self.path, "wb") as f:
                f.write(payload.data)
        except OSError as e:
            raise OutputError(
                f"Cannot write {self._label} to {self.path}: {e.strerror or e}",
                details={"path": str(self.path)},
            ) from None

        self._log.info("OUTPUT_WRITTEN path=%s bytes=%d", self.path, payload.length)
        out = self._stream or sys.stdout
        out.write(f"Saved {self._label} to {self.path}\n")
        out.flush()


def make_sink(config: Configuration, stream: Optional[TextIO] = None) -> PayloadSink:
    if config.dump_file:
        return FileSink(config.output_filename, stream=stream)
    if config.dump_hex:
        return HexSink(stream)
    return TextSink(stream)
