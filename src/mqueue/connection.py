""" Establish and retire sessions with a queue server. A :class:`Connection`
    is an immutable value: closing or failing a session never changes an
    existing instance, it produces a new one with ``active`` set to False.
    Callers are expected to carry forward whichever value an operation
    hands back to them.
"""

import logging

from . import transport
from .channel import Channel
from .protocol import codec
from .protocol import fields

log = logging.getLogger(__name__)


class Connection:
    """ Describe a session with the queue server at *host* and *port*.
        The *channel* is the opaque handle wrapping the live transport; it
        is shared, never copied, between a connection and the inactive
        values derived from it.

        :ivar host: The hostname of the queue server.
        :ivar port: The port number of the queue server.
        :ivar channel: The :class:`mqueue.channel.Channel` for this session.
        :ivar active: True while the session may be used for requests.
        :ivar json_mode: If True, all tasks are JSON objects.
    """

    __slots__ = ('host', 'port', 'channel', 'active', 'json_mode')

    def __init__(self, host, port, channel, active=True, json_mode=False):

        object.__setattr__(self, 'host', host)
        object.__setattr__(self, 'port', int(port))
        object.__setattr__(self, 'channel', channel)
        object.__setattr__(self, 'active', bool(active))
        object.__setattr__(self, 'json_mode', bool(json_mode))


    def __setattr__(self, name, value):
        raise AttributeError('Connection instances are immutable')


    def __delattr__(self, name):
        raise AttributeError('Connection instances are immutable')


    def __repr__(self):
        state = 'active' if self.active else 'inactive'
        mode = ' json' if self.json_mode else ''
        return '<Connection %s:%d %s%s>' % (self.host, self.port, state, mode)


    def replace(self, **changes):
        """ Return a new :class:`Connection` with the requested fields
            changed and everything else carried over.
        """

        values = dict()
        for name in self.__slots__:
            values[name] = getattr(self, name)

        values.update(changes)
        return Connection(**values)


# end of class Connection



def get_message_queue(host, port, json_mode=False, timeout=None):
    """ Connect to the queue server at *host* and *port* and return an active
        :class:`Connection`. If *json_mode* is True, every task sent or
        received over this connection must be a JSON object. Raises
        :class:`mqueue.TransportConnectionError` if no connection is
        established within *timeout* seconds.
    """

    stream = transport.Stream(host, port)
    stream.open(timeout)

    log.debug("session with %s:%s established", host, port)
    return Connection(host, port, Channel(stream), True, json_mode)


def reopen(queue, timeout=None):
    """ Open a fresh transport for the same server and mode as *queue*. The
        old transport, if any, is abandoned rather than closed: it may still
        be referenced by other values, and a failed one closes itself.
    """

    log.debug("reconnecting to %s:%d", queue.host, queue.port)
    return get_message_queue(queue.host, queue.port, queue.json_mode, timeout)


def close_message_queue(queue):
    """ End the session by sending END to the server, and return an inactive
        copy of *queue*. There is no acknowledgment to wait for, and the
        transport itself is left alone; use :func:`release` to tear it down.
        Raises :class:`mqueue.ChannelBusy` if an exchange is in flight. Any
        error watch left by an earlier ACK, DCL or DEL is dropped.
    """

    queue.channel.watch(None)
    queue.channel.write(codec.finalize(fields.END))
    return queue.replace(active=False)


def release(queue):
    """ Tear down the transport behind *queue* without sending anything, and
        return an inactive copy of *queue*.
    """

    queue.channel.close()
    return queue.replace(active=False)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
