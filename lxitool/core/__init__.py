# core/__init__.py

from .config import Command, Configuration
from .errors import LxiError, UsageError, ConfigurationError, OutputError

__all__ = [
    "Command", "Configuration",
    "LxiError", "UsageError", "ConfigurationError", "OutputError",
]
