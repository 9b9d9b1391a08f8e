from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """
    Abstract instrument transport (VXI-11, raw SCPI socket, ...).

    Contract:
      - open()/close() manage the underlying connection.
      - send(data) transmits one complete SCPI message and returns the number
        of bytes sent.
      - receive() returns one complete reply, raw and unmodified.
      - Both raise TransportTimeout when the timeout given at construction
        expires, and TransportIOError for any other failure.
    """

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def send(self, data: bytes) -> int: ...

    @abstractmethod
    def receive(self) -> bytes: ...

    def __enter__(self) -> "Transport":
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()
