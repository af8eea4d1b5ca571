"""One-shot listeners.

Every exchange with the queue server is strictly one request followed by
one reply, and the protocol carries no request identifier. A listener left
attached after its exchange would fire again for the next exchange's bytes;
the listeners here fire for the *next* occurrence of their event only, then
detach themselves.
"""

from __future__ import annotations

import threading
from typing import Callable, Optional, Tuple

from .base import DATA, ERROR, Transport


class OneShot:
    """Wrap *callback* so that it is invoked at most once."""

    def __init__(self, transport: Transport, event: str, callback: Callable):
        self.transport = transport
        self.event = event
        self.callback = callback
        self.fired = False
        self._lock = threading.Lock()

    def __call__(self, *args) -> None:
        with self._lock:
            if self.fired:
                return
            self.fired = True

        self.transport.off(self.event, self)
        self.callback(*args)

    def cancel(self) -> None:
        """Detach without firing. An event already being dispatched to this
        listener when it is cancelled is ignored."""

        with self._lock:
            self.fired = True

        self.transport.off(self.event, self)


class Binding:
    """The set of one-shot listeners registered by a single :func:`bind_once`
    call."""

    def __init__(self, shots: Tuple[OneShot, ...]):
        self.shots = shots

    def cancel(self) -> None:
        for shot in self.shots:
            shot.cancel()


def bind_once(
    transport: Transport,
    data: Optional[Callable[[bytes], None]] = None,
    error: Optional[Callable[[Exception], None]] = None,
) -> Binding:
    """Attach *data* and/or *error* listeners that each fire at most once.
    The returned :class:`Binding` can be cancelled to detach whichever
    listeners have not fired yet."""

    shots = []

    if data is not None:
        shots.append(OneShot(transport, DATA, data))
    if error is not None:
        shots.append(OneShot(transport, ERROR, error))

    for shot in shots:
        transport.on(shot.event, shot)

    return Binding(tuple(shots))
