# lxitool/core/errors.py
from __future__ import annotations


class LxiError(Exception):
    """
    Base class for all expected operational errors in lxi-tool.
    """

    #: Machine-readable tag written to the debug log when `lxi` exits with an error
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Command line / configuration errors (no network access yet)
# ---------------------------------------------------------------------------

class UsageError(LxiError):
    """
    Command line arguments are malformed or incomplete.

    Examples:
      - leftover positional tokens after the SCPI command
      - `scpi` without a command, --interactive or --run-script
    """
    code = "usage_error"


class ConfigurationError(LxiError):
    """
    The resolved configuration violates an invariant.

    Examples:
      - inline SCPI command without --ip
      - --dump-file and --run-script given together
      - settings file with unknown keys or invalid values
      - unknown transport driver key
    """
    code = "configuration_error"


# ---------------------------------------------------------------------------
# Output errors
# ---------------------------------------------------------------------------

class OutputError(LxiError):
    """
    A local file could not be created, written or read.

    Examples:
      - dump / screenshot destination not writable
      - script file missing
    """
    code = "output_error"
