# lxitool/app/settings.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from lxitool.core.config import (
    DEFAULT_SCREENSHOT_TIMEOUT_S,
    DEFAULT_SOCKET_PORT,
    DEFAULT_TIMEOUT_S,
    DEFAULT_TRANSPORT,
)
from lxitool.core.errors import ConfigurationError

_log = logging.getLogger(__name__)

ENV_CONFIG = "LXI_CONFIG"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def default_settings_path() -> Path:
    return Path.home() / ".config" / "lxi" / "config.yml"


@dataclass(frozen=True)
class Settings:
    """
    User defaults, read from a YAML file.

    Values only seed the command line defaults; explicit flags always win.
    """
    discover_timeout: int = DEFAULT_TIMEOUT_S
    scpi_timeout: int = DEFAULT_TIMEOUT_S
    screenshot_timeout: int = DEFAULT_SCREENSHOT_TIMEOUT_S
    transport: str = DEFAULT_TRANSPORT
    port: int = DEFAULT_SOCKET_PORT
    log_level: str = "WARNING"
    log_file: Optional[str] = None


_INT_KEYS = ("discover_timeout", "scpi_timeout", "screenshot_timeout", "port")


def _coerce(doc: Dict[str, Any], source: Path) -> Dict[str, Any]:
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(doc) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown settings key(s) in {source}: {', '.join(unknown)}",
            hint=f"Valid keys: {', '.join(sorted(known))}",
        )

    out: Dict[str, Any] = {}
    for key, value in doc.items():
        if key in _INT_KEYS:
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"Setting '{key}' must be a positive integer (got {value!r}).")
            out[key] = value
        elif key == "log_level":
            level = str(value).upper()
            if level not in LOG_LEVELS:
                raise ConfigurationError(
                    f"Setting 'log_level' must be one of {', '.join(LOG_LEVELS)} (got {value!r})."
                )
            out[key] = level
        elif key == "log_file":
            out[key] = None if value is None else str(value)
        else:
            out[key] = str(value)
    return out


def load_settings(path: str | Path | None = None) -> Settings:
    """
    Load settings.

    Lookup order: explicit path, $LXI_CONFIG, ~/.config/lxi/config.yml.
    Only an explicitly requested file must exist.
    """
    explicit = path is not None or bool(os.environ.get(ENV_CONFIG))
    source = Path(path) if path is not None else Path(os.environ.get(ENV_CONFIG) or default_settings_path())

    if not source.exists():
        if explicit:
            raise ConfigurationError(f"Settings file not found: {source}")
        return Settings()

    try:
        with open(source, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {source}: {e}") from None
    except OSError as e:
        raise ConfigurationError(f"Cannot read settings file {source}: {e}") from None

    if not isinstance(doc, dict):
        raise ConfigurationError(f"{source} must contain a mapping")

    settings = replace(Settings(), **_coerce(doc, source))
    _log.debug("SETTINGS_LOADED path=%s", source)
    return settings
