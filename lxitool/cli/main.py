# lxitool/cli/main.py
from __future__ import annotations

import logging
import sys
from typing import Optional

from lxitool.app.settings import Settings, load_settings
from lxitool.core.config import Command
from lxitool.core.errors import LxiError

from lxitool.cli.args import parse_args
from lxitool.cli.commands import (
    cmd_discover,
    cmd_scpi,
    cmd_screenshot,
    configure_logging,
)

_log = logging.getLogger(__name__)

# invocations answered by argparse alone; the settings file is never read
GLOBAL_FLAGS = {"-h", "--help", "-v", "--version"}


def _needs_settings(argv: list[str]) -> bool:
    return bool(argv) and argv[0] not in GLOBAL_FLAGS


def main(argv: Optional[list[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        settings = load_settings() if _needs_settings(argv) else Settings()
        configure_logging(settings)
        config = parse_args(argv, settings=settings)

        if config.command is Command.DISCOVER:
            return cmd_discover(config)
        if config.command is Command.SEND_COMMAND:
            return cmd_scpi(config)
        if config.command is Command.SCREENSHOT:
            return cmd_screenshot(config)

        return 2
    except LxiError as e:
        _log.debug("COMMAND_FAILED code=%s details=%s", e.code, e.details)
        print(f"ERROR: {e.message}", file=sys.stderr)
        if e.hint:
            print(f"Hint: {e.hint}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
