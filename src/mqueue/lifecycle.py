""" Finalize the task most recently delivered over a connection.

    The protocol has no task identifiers: ACK, DCL and DEL apply to whatever
    task the server last handed out on this particular TCP connection. If
    the connection drops in between, that association is gone and there is
    nothing meaningful to resend, so these commands are never retried. An
    optional *on_error* callback is invoked with the transport's exception
    if the connection fails after the command is written; the callback runs
    on the transport's I/O thread, and is a reasonable place to reschedule
    the task by hand.
"""

import logging

from .protocol import codec
from .protocol import fields

log = logging.getLogger(__name__)


def _finalize(queue, command, on_error):

    channel = queue.channel
    channel.watch(on_error)

    log.debug("%s for last task on %s:%d", command, queue.host, queue.port)
    channel.write(codec.finalize(command))


def accept_last_task(queue, on_error=None):
    """ Mark the last task received over *queue* as accepted (ACK).
    """

    _finalize(queue, fields.ACK, on_error)


def decline_last_task(queue, on_error=None):
    """ Mark the last task received over *queue* as declined (DCL). The
        server is expected to hand it out again.
    """

    _finalize(queue, fields.DCL, on_error)


def delete_last_task(queue, on_error=None):
    """ Mark the last task received over *queue* as deleted (DEL).
    """

    _finalize(queue, fields.DEL, on_error)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
