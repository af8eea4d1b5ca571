"""Transport interface.

This is the (small) contract that transport implementations should follow:
connect, write, and two event sources, one for inbound bytes and one for
connection failures. It lives outside :mod:`mqueue.protocol` so the protocol
remains transport-agnostic.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional


log = logging.getLogger(__name__)

DATA = "data"
ERROR = "error"


# Transport agnostic exceptions

class TransportError(Exception):
    """Base class for all transport-layer errors."""


class TransportConnectionError(TransportError, ConnectionError):
    """The transport could not establish or maintain a connection."""


class TransportTimeout(TransportError, TimeoutError):
    """A request did not receive a timely response."""


class ChannelBusy(TransportError):
    """An exchange is already in flight on this connection."""


class Transport(ABC):
    """Minimal contract for a wire-level transport.

    Listeners registered with :func:`on` are invoked from whichever thread
    detects the event, usually the transport's own I/O thread; they should
    return quickly.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = {DATA: [], ERROR: []}
        self._listeners_lock = threading.Lock()

    @abstractmethod
    def open(self, timeout: Optional[float] = None) -> None:
        """Establish the underlying connection/socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Send raw bytes; failures are reported via the ERROR event."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False

    # --- event sources ---
    def on(self, event: str, callback: Callable) -> None:
        with self._listeners_lock:
            self._listeners[event].append(callback)

    def off(self, event: str, callback: Callable) -> None:
        with self._listeners_lock:
            try:
                self._listeners[event].remove(callback)
            except ValueError:
                pass

    def listeners(self, event: str) -> int:
        with self._listeners_lock:
            return len(self._listeners[event])

    def emit(self, event: str, *args) -> None:
        # Iterate over a snapshot; one-shot listeners remove themselves
        # while being called.
        with self._listeners_lock:
            callbacks = tuple(self._listeners[event])

        for callback in callbacks:
            try:
                callback(*args)
            except Exception:
                log.exception("%s listener %r failed", event, callback)
