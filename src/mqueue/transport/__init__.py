"""Transport layer implementations."""

import os

from .base import (
    DATA,
    ERROR,
    ChannelBusy,
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)
from . import listeners

_BACKEND = os.environ.get("MQUEUE_TRANSPORT", "zmq")

if _BACKEND == "zmq":
    from .zmq import StreamTransport as Stream
else:
    raise ImportError(f"unknown MQUEUE_TRANSPORT backend: {_BACKEND!r}")
