""" One-shot listener and channel state checks against an in-memory
    transport; no sockets are involved.
"""

import mqueue
import pytest

from mqueue import channel
from mqueue.transport import listeners
from mqueue.transport.base import DATA, ERROR, Transport


class Loopback(Transport):

    def __init__(self):
        Transport.__init__(self)
        self.written = list()

    def open(self, timeout=None):
        pass

    def close(self):
        pass

    def write(self, data):
        self.written.append(data)


def test_data_fires_once():

    transport = Loopback()
    seen = list()

    listeners.bind_once(transport, data=seen.append)
    assert transport.listeners(DATA) == 1
    assert transport.listeners(ERROR) == 0

    transport.emit(DATA, b'first')
    transport.emit(DATA, b'second')

    assert seen == [b'first']
    assert transport.listeners(DATA) == 0


def test_listeners_are_independent():

    transport = Loopback()
    data = list()
    errors = list()

    listeners.bind_once(transport, data=data.append, error=errors.append)

    transport.emit(DATA, b'reply')
    assert data == [b'reply']

    # The error listener is still armed after the data listener fired.

    assert transport.listeners(ERROR) == 1
    failure = mqueue.TransportError('gone')
    transport.emit(ERROR, failure)
    transport.emit(ERROR, failure)

    assert errors == [failure]
    assert transport.listeners(ERROR) == 0


def test_no_accumulation():

    transport = Loopback()
    seen = list()

    for count in range(5):
        binding = listeners.bind_once(transport, data=seen.append, error=seen.append)
        transport.emit(DATA, count)
        binding.cancel()

    assert seen == [0, 1, 2, 3, 4]
    assert transport.listeners(DATA) == 0
    assert transport.listeners(ERROR) == 0


def test_cancel():

    transport = Loopback()
    seen = list()

    binding = listeners.bind_once(transport, data=seen.append, error=seen.append)
    binding.cancel()

    transport.emit(DATA, b'late')
    transport.emit(ERROR, mqueue.TransportError('late'))

    assert seen == []

    # A listener cancelled while its event is being dispatched stays quiet.

    shot = listeners.OneShot(transport, DATA, seen.append)
    shot.cancel()
    shot(b'in flight')
    assert seen == []


def test_failing_listener():

    transport = Loopback()
    seen = list()

    def explode(data):
        raise RuntimeError('listener bug')

    transport.on(DATA, explode)
    transport.on(DATA, seen.append)

    transport.emit(DATA, b'still delivered')
    assert seen == [b'still delivered']


def test_channel_states():

    guarded = channel.Channel(Loopback())
    assert guarded.state == channel.IDLE

    guarded.begin()
    assert guarded.state == channel.AWAITING_REPLY

    with pytest.raises(mqueue.ChannelBusy):
        guarded.begin()

    with pytest.raises(mqueue.ChannelBusy):
        guarded.watch(None)

    guarded.end()
    assert guarded.state == channel.IDLE

    guarded.begin()
    guarded.end()
    guarded.end()
    assert guarded.state == channel.IDLE


def test_channel_watch():

    transport = Loopback()
    guarded = channel.Channel(transport)
    errors = list()

    guarded.watch(errors.append)
    assert transport.listeners(ERROR) == 1

    # A second command replaces the first watch rather than adding to it.

    guarded.watch(errors.append)
    assert transport.listeners(ERROR) == 1

    failure = mqueue.TransportConnectionError('dropped')
    transport.emit(ERROR, failure)
    assert errors == [failure]

    # The next exchange drops any watch still armed.

    guarded.watch(errors.append)
    guarded.begin()
    assert transport.listeners(ERROR) == 0
    guarded.end()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
