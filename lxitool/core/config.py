# lxitool/core/config.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from lxitool.core.errors import ConfigurationError, UsageError


DEFAULT_TIMEOUT_S = 1
DEFAULT_SCREENSHOT_TIMEOUT_S = 5
DEFAULT_TRANSPORT = "vxi11"
DEFAULT_SOCKET_PORT = 5025

SCREENSHOT_COMMAND = "display:data?"


class Command(Enum):
    DISCOVER = "discover"
    SEND_COMMAND = "scpi"
    SCREENSHOT = "screenshot"


@dataclass(frozen=True)
class Configuration:
    """
    Resolved command line configuration.

    Built once by the CLI parser and handed to the command that runs.
    """
    command: Command
    timeout_s: int = DEFAULT_TIMEOUT_S
    address: str = ""
    scpi_command: str = ""
    dump_hex: bool = False
    dump_file: bool = False
    output_filename: str = ""
    interactive: bool = False
    run_script: bool = False
    script_filename: str = ""
    transport: str = DEFAULT_TRANSPORT
    port: int = DEFAULT_SOCKET_PORT

    @property
    def has_inline_command(self) -> bool:
        return bool(self.scpi_command)

    def validate(self) -> "Configuration":
        """Check cross-field invariants; returns self so it can be chained."""
        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"Timeout must be a positive number of seconds (got {self.timeout_s}).",
            )

        if self.dump_file and not self.output_filename:
            raise ConfigurationError("--dump-file requires a filename.")
        if self.run_script and not self.script_filename:
            raise ConfigurationError("--run-script requires a filename.")
        if self.dump_file and self.run_script:
            raise ConfigurationError(
                "--dump-file and --run-script cannot be used together.",
                hint="Run the script first, then dump a single response with --dump-file.",
                details={"dump_file": self.output_filename, "script": self.script_filename},
            )

        if self.command is Command.SEND_COMMAND:
            if self.has_inline_command and not self.address:
                raise ConfigurationError(
                    "No IP address specified",
                    hint="Pass the instrument address with --ip <address>.",
                )
            if not (self.has_inline_command or self.interactive or self.run_script):
                raise UsageError(
                    "No SCPI command specified",
                    hint="Give a command, or use --interactive / --run-script <file>.",
                )

        if self.command is Command.SCREENSHOT:
            if not self.address:
                raise ConfigurationError(
                    "No IP address specified",
                    hint="Pass the instrument address with --ip <address>.",
                )
            if not self.output_filename:
                raise UsageError("No screenshot filename specified")

        return self
