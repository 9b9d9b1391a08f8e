# lxitool/cli/commands.py
from __future__ import annotations

import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional, TextIO

from lxitool.app.client import InstrumentClient, create_transport
from lxitool.app.settings import Settings
from lxitool.app.sinks import FileSink, PayloadSink, make_sink
from lxitool.core.config import SCREENSHOT_COMMAND, Configuration
from lxitool.core.errors import LxiError, OutputError
from lxitool.transport.registry import TransportDriverRegistry
from lxitool.transport.vxi import discover_devices

_log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
EXIT_COMMANDS = ("exit", "quit")


# ---------------- Logging ----------------

def configure_logging(settings: Settings) -> None:
    """
    Attach stderr (and optional file) handlers to the root logger (idempotent).
    Kept in CLI (presentation-layer concern).
    """
    root = logging.getLogger()
    level = getattr(logging, settings.log_level, logging.WARNING)

    if not any(getattr(h, "_lxi_console", False) for h in root.handlers):
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        sh._lxi_console = True  # type: ignore[attr-defined]
        root.addHandler(sh)
    for h in root.handlers:
        if getattr(h, "_lxi_console", False):
            h.setLevel(level)

    if settings.log_file:
        log_path = Path(settings.log_file).expanduser()
        target = str(log_path.resolve())
        if not any(
            isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target
            for h in root.handlers
        ):
            log_path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_path, encoding="utf-8", delay=True)
            fh.setLevel(logging.INFO)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(fh)
        level = min(level, logging.INFO)

    if root.level == logging.NOTSET or root.level > level:
        root.setLevel(level)


# ---------------- Discover ----------------

def _identify(address: str, config: Configuration, registry: Optional[TransportDriverRegistry]) -> Optional[str]:
    try:
        transport = create_transport(replace(config, address=address), registry)
        with transport:
            payload = InstrumentClient(transport).query("*IDN?")
    except LxiError as e:
        _log.info("IDN_FAILED address=%s err=%s", address, e)
        return None
    return payload.data.decode("utf-8", errors="replace").strip() or None


def cmd_discover(config: Configuration, *, registry: Optional[TransportDriverRegistry] = None) -> int:
    print("Searching for LXI devices - please wait...\n")
    addresses = discover_devices(timeout=config.timeout_s)

    for address in addresses:
        ident = _identify(address, config, registry)
        if ident:
            print(f'  Found "{ident}" on address {address}')
        else:
            print(f"  Found device on address {address}")

    print(f"\nFound {len(addresses)} device(s)")
    return 0


# ---------------- SCPI ----------------

def run_lines(client: InstrumentClient, lines: Iterable[str], sink: PayloadSink) -> int:
    """Dispatch SCPI lines one by one; blank lines and '#' comments are skipped."""
    sent = 0
    for line in lines:
        cmd = line.strip()
        if not cmd or cmd.startswith("#"):
            continue
        payload = client.dispatch(cmd)
        if payload is not None:
            sink.write(payload)
        sent += 1
    return sent


def run_script(client: InstrumentClient, path: str, sink: PayloadSink) -> int:
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError as e:
        raise OutputError(f"Cannot read script {path}: {e.strerror or e}") from None

    sent = run_lines(client, lines, sink)
    _log.info("SCRIPT_DONE path=%s commands=%d", path, sent)
    return sent


def _interactive_lines(stdin: TextIO, stdout: TextIO) -> Iterable[str]:
    prompt = stdin.isatty()
    while True:
        if prompt:
            stdout.write("lxi> ")
            stdout.flush()
        line = stdin.readline()
        if not line:
            return
        if line.strip().lower() in EXIT_COMMANDS:
            return
        yield line


def run_interactive(
    client: InstrumentClient,
    sink: PayloadSink,
    *,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    return run_lines(client, _interactive_lines(stdin, stdout), sink)


def cmd_scpi(
    config: Configuration,
    *,
    registry: Optional[TransportDriverRegistry] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    sink = make_sink(config, stream=stdout)
    transport = create_transport(config, registry)

    with transport:
        client = InstrumentClient(transport)

        if config.has_inline_command:
            payload = client.dispatch(config.scpi_command)
            if payload is not None:
                sink.write(payload)

        if config.run_script:
            run_script(client, config.script_filename, sink)

        if config.interactive:
            run_interactive(client, sink, stdin=stdin, stdout=stdout)

    return 0


# ---------------- Screenshot ----------------

def cmd_screenshot(
    config: Configuration,
    *,
    registry: Optional[TransportDriverRegistry] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    transport = create_transport(config, registry)
    with transport:
        payload = InstrumentClient(transport).query_block(SCREENSHOT_COMMAND)

    FileSink(config.output_filename, label="screenshot", stream=stdout).write(payload)
    return 0
