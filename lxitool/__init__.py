# lxitool/__init__.py
"""Command-line client for LXI instruments (SCPI pass-through and screenshots)."""

__version__ = "1.0.0"

__all__ = ["__version__"]
