"""ZeroMQ raw TCP transport.

The queue server speaks plain text over TCP, not ZMTP. A ZeroMQ ``STREAM``
socket connects to such a peer directly: every inbound chunk of bytes is
received as ``[routing_id, data]``, and the connection being established or
dropped is announced as ``[routing_id, b'']``.

ZeroMQ sockets are not thread safe. Each :class:`StreamTransport` owns one
background thread that is the only user of its socket; callers hand their
writes over through a queue and an inproc PAIR signal socket.
"""

from __future__ import annotations

import atexit
import itertools
import logging
import queue
import threading
import weakref
from typing import Optional

import zmq
import zmq.utils.monitor

from ... import config
from ..base import DATA, ERROR, Transport, TransportConnectionError, TransportError


log = logging.getLogger(__name__)

zmq_context = zmq.Context()
_serial = itertools.count()
_live = weakref.WeakSet()


class StreamTransport(Transport):
    """Connect to *address* and *port* as a raw TCP client."""

    # Milliseconds allowed for queued writes to drain on a local close.
    linger = 500

    def __init__(self, address: str, port: int):
        Transport.__init__(self)

        self.address = address
        self.port = int(port)
        self.routing_id: Optional[bytes] = None
        self.socket = None
        self.monitor = None

        self._lock = threading.Lock()
        self._opened = threading.Event()
        self._settled = threading.Event()
        self._refused = False
        self._closed = False
        self._dropped = False
        self._shutdown = False
        self._outbox = queue.SimpleQueue()
        self._signal_rx = None
        self._signal_tx = None
        self._thread: Optional[threading.Thread] = None

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<StreamTransport {self.address}:{self.port} {state}>"

    @property
    def is_open(self) -> bool:
        return self._opened.is_set() and not self._closed

    def open(self, timeout: Optional[float] = None) -> None:
        if timeout is None:
            timeout = config.connect_timeout

        server = f"tcp://{self.address}:{self.port}"

        # Reconnection is disabled: a dropped connection is reported as an
        # error and the caller decides whether to open a new transport.

        self.socket = zmq_context.socket(zmq.STREAM)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.setsockopt(zmq.RECONNECT_IVL, -1)
        self.socket.setsockopt(zmq.STREAM_NOTIFY, 1)

        # A refused connection is only visible on the monitor socket, as the
        # file descriptor being closed before any notification frame.

        self.monitor = self.socket.get_monitor_socket(zmq.EVENT_CLOSED | zmq.EVENT_CONNECT_RETRIED)

        try:
            self.socket.connect(server)
        except zmq.ZMQError as exc:
            self.socket.disable_monitor()
            self.monitor.close(linger=0)
            self.socket.close(linger=0)
            self._closed = True
            raise TransportConnectionError(
                f"cannot connect to {self.address}:{self.port}: {exc}"
            ) from exc

        internal = f"inproc://mqueue.stream:{next(_serial)}"
        self._signal_rx = zmq_context.socket(zmq.PAIR)
        self._signal_rx.bind(internal)
        self._signal_tx = zmq_context.socket(zmq.PAIR)
        self._signal_tx.connect(internal)

        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()
        _live.add(self)

        if not self._settled.wait(timeout):
            self.close()
            raise TransportConnectionError(
                f"{self.address}:{self.port}: no connection in {timeout:.2f} sec"
            )

        if self._refused:
            self.close()
            raise TransportConnectionError(
                f"{self.address}:{self.port}: connection refused"
            )

        log.debug("connected to %s:%d", self.address, self.port)

    def close(self) -> None:
        with self._lock:
            if self._shutdown:
                return
            self._closed = True
            self._shutdown = True
            if self._signal_tx is not None:
                self._signal_tx.send(b"")

    def write(self, data: bytes) -> None:
        with self._lock:
            closed = self._closed or self.routing_id is None
            if not closed:
                self._outbox.put(data)
                self._signal_tx.send(b"")

        if closed:
            self.emit(ERROR, TransportConnectionError(
                f"connection to {self.address}:{self.port} is closed"
            ))

    # --- internal ---
    def _handle_outgoing(self) -> None:
        # Clear one signal and send one chunk of bytes, if any.
        self._signal_rx.recv(flags=zmq.NOBLOCK)

        try:
            data = self._outbox.get(block=False)
        except queue.Empty:
            return

        try:
            self.socket.send_multipart((self.routing_id, data))
        except zmq.ZMQError as exc:
            self.emit(ERROR, TransportError(
                f"write to {self.address}:{self.port} failed: {exc}"
            ))
        else:
            log.debug("%s:%d <- %r", self.address, self.port, data)

    def _handle_incoming(self, parts) -> None:
        routing_id = parts[0]
        data = parts[-1]

        if data:
            log.debug("%s:%d -> %r", self.address, self.port, data)
            self.emit(DATA, data)
            return

        # An empty frame is a connection notification: the first one means
        # the connection is up, the next one that it went away.

        if self.routing_id is None:
            self.routing_id = routing_id
            self._opened.set()
            self._settled.set()
            return

        if routing_id != self.routing_id:
            return

        with self._lock:
            self._closed = True
            self._shutdown = True
            self._dropped = True

        log.warning("connection to %s:%d closed by peer", self.address, self.port)
        self.emit(ERROR, TransportConnectionError(
            f"connection to {self.address}:{self.port} closed by peer"
        ))

    def _handle_monitor(self) -> None:
        event = zmq.utils.monitor.recv_monitor_message(self.monitor)

        if self._settled.is_set():
            return

        if event["event"] in (zmq.EVENT_CLOSED, zmq.EVENT_CONNECT_RETRIED):
            log.debug("connection to %s:%d refused", self.address, self.port)
            self._refused = True
            self._settled.set()

    def _teardown(self) -> None:
        with self._lock:
            self._signal_tx.close(linger=0)
            self._signal_tx = None

        self._signal_rx.close(linger=0)

        # Writes accepted before a local close still go out, typically the
        # END that precedes a release.

        while not self._dropped:
            try:
                data = self._outbox.get(block=False)
            except queue.Empty:
                break

            try:
                self.socket.send_multipart((self.routing_id, data))
            except zmq.ZMQError:
                break

        self.socket.disable_monitor()
        self.monitor.close(linger=0)

        if self._dropped:
            self.socket.close(linger=0)
        else:
            self.socket.close(linger=self.linger)
        _live.discard(self)

    def run(self) -> None:
        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)
        poller.register(self._signal_rx, zmq.POLLIN)
        poller.register(self.monitor, zmq.POLLIN)

        while not self._shutdown:
            for active, _flag in poller.poll(1000):
                if active == self._signal_rx:
                    self._handle_outgoing()
                elif active == self.socket:
                    parts = self.socket.recv_multipart()
                    self._handle_incoming(parts)
                elif active == self.monitor:
                    self._handle_monitor()

        self._teardown()


def _cleanup() -> None:
    for transport in list(_live):
        transport.close()


atexit.register(_cleanup)
