""" The request/response stream to the queue server is unframed and
    untagged: a reply can only be tied to a request by the order in which
    they appear. A :class:`Channel` wraps a transport with the explicit
    state needed to keep that correlation intact, namely whether an exchange
    is currently awaiting its reply.
"""

import threading

from .transport import listeners
from .transport.base import ChannelBusy


IDLE = 'IDLE'
AWAITING_REPLY = 'AWAITING_REPLY'


class Channel:
    """ Guard a single *transport* so that at most one exchange is in flight
        at any given time. A request issued while another is awaiting its
        reply is rejected with :class:`ChannelBusy`; it is never queued
        behind the first one.

        :ivar state: Either ``IDLE`` or ``AWAITING_REPLY``.
        :ivar transport: The :class:`mqueue.transport.Transport` instance.
    """

    def __init__(self, transport):

        self.transport = transport
        self.state = IDLE

        self._lock = threading.Lock()
        self._watch = None


    def __repr__(self):
        return '<Channel %s %s>' % (self.state, repr(self.transport))


    def begin(self):
        """ Transition from ``IDLE`` to ``AWAITING_REPLY``. Any error watch
            left behind by a fire-and-forget command is dropped; from here on
            errors belong to the new exchange.
        """

        self._lock.acquire()

        try:
            if self.state != IDLE:
                raise ChannelBusy('an exchange is already in flight on ' + repr(self.transport))

            self.state = AWAITING_REPLY
            watch = self._watch
            self._watch = None
        finally:
            self._lock.release()

        if watch is not None:
            watch.cancel()


    def end(self):
        """ Return to ``IDLE``. Safe to call more than once.
        """

        self._lock.acquire()
        self.state = IDLE
        self._lock.release()


    def watch(self, on_error):
        """ Arm a one-shot error listener for a fire-and-forget command. The
            watch remains armed until the transport reports an error, or
            until the next exchange or command begins on this channel.
        """

        self._lock.acquire()

        try:
            if self.state != IDLE:
                raise ChannelBusy('an exchange is already in flight on ' + repr(self.transport))

            previous = self._watch
            self._watch = None

            if on_error is not None:
                self._watch = listeners.bind_once(self.transport, error=on_error)
        finally:
            self._lock.release()

        if previous is not None:
            previous.cancel()


    def write(self, data):
        self.transport.write(data)


    def close(self):
        self._lock.acquire()
        watch = self._watch
        self._watch = None
        self._lock.release()

        if watch is not None:
            watch.cancel()

        self.transport.close()


# end of class Channel


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
