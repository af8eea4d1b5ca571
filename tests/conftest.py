import pytest

import mqueue
import mockserver


@pytest.fixture()
def server():

    instance = mockserver.MockServer()

    yield instance

    instance.cleanup()


@pytest.fixture()
def queue(server):
    """ An active connection to the mock server. The transport is released
        after the test regardless of what the test did with the connection.
    """

    connection = mqueue.get_message_queue(server.host, server.port)
    server.wait_connections(1)

    yield connection

    mqueue.release(connection)


@pytest.fixture()
def fast(monkeypatch):
    """ Shorten the default timeouts so that failure paths are quick.
    """

    monkeypatch.setattr(mqueue.config, 'connect_timeout', 0.5)
    monkeypatch.setattr(mqueue.config, 'ask_timeout', 0.5)
    monkeypatch.setattr(mqueue.config, 'schedule_timeout', 0.2)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
