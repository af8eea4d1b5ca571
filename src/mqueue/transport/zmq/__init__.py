"""ZeroMQ-backed transports."""

from .stream import StreamTransport
