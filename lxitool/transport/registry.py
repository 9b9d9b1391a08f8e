from __future__ import annotations

from typing import Dict, Type

from lxitool.core.errors import ConfigurationError

from .base import Transport
from .tcp import SocketTransport
from .vxi import VXI11Transport


class TransportDriverRegistry:
    """
    Maps driver keys -> concrete transport classes.

    Keys are case-insensitive.
    """

    def __init__(self, drivers: Dict[str, Type[Transport]]):
        self._drivers: Dict[str, Type[Transport]] = {k.lower(): v for k, v in drivers.items()}

    @classmethod
    def default(cls) -> "TransportDriverRegistry":
        return cls(
            drivers={
                "vxi11": VXI11Transport,
                "socket": SocketTransport,
            }
        )

    def names(self) -> list[str]:
        return sorted(self._drivers)

    def has(self, driver: str) -> bool:
        return driver.lower() in self._drivers

    def get_class(self, driver: str) -> Type[Transport]:
        key = driver.lower()
        if key not in self._drivers:
            raise ConfigurationError(
                f"Transport driver '{driver}' not registered",
                hint=f"Known drivers: {', '.join(self.names())}",
            )
        return self._drivers[key]

    def create(self, driver: str, **params) -> Transport:
        """
        Instantiate a transport by driver key. Does NOT open it.
        """
        transport_cls = self.get_class(driver)
        return transport_cls(**params)
