# app/__init__.py

from .client import InstrumentClient, create_transport, is_query
from .settings import Settings, load_settings
from .sinks import FileSink, HexSink, PayloadSink, TextSink, make_sink

__all__ = [
    "InstrumentClient", "create_transport", "is_query",
    "Settings", "load_settings",
    "PayloadSink", "FileSink", "HexSink", "TextSink", "make_sink",
]
