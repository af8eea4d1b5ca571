""" Request/response exchanges with the queue server: asking for a task,
    and scheduling a new one. Both follow the same pattern. A one-shot
    listener is bound for the next reply and/or error, the command is
    written, and the caller blocks until something happens or the wait
    expires. A transport error on the first attempt is masked by exactly
    one retry over a brand new connection; idle connections are routinely
    dropped by the server, and the retry is what keeps that invisible.
"""

import logging
import threading

from . import config
from . import connection
from .protocol import codec
from .task import Task
from .transport import listeners
from .transport.base import TransportError, TransportTimeout

log = logging.getLogger(__name__)


class Pending:
    """ Client-side helper that records the outcome of a single exchange:
        whichever of a reply or an error arrives first, the other is
        ignored.

        :ivar response: The raw bytes of the reply, if any.
        :ivar error: The exception reported by the transport, if any.
    """

    def __init__(self):

        self.response = None
        self.error = None

        self.event = threading.Event()
        self._lock = threading.Lock()


    def _complete(self, response):
        self._lock.acquire()
        if not self.event.is_set():
            self.response = response
            self.event.set()
        self._lock.release()


    def _fail(self, error):
        self._lock.acquire()
        if not self.event.is_set():
            self.error = error
            self.event.set()
        self._lock.release()


    def wait(self, timeout):
        """ Block until the exchange is resolved, one way or the other.
            Returns False if the *timeout* expired first.
        """

        return self.event.wait(timeout)


# end of class Pending



def _exchange(queue, command, timeout, reply):
    """ Run a single exchange on the channel of *queue*. If *reply* is True
        the exchange completes when the server answers; otherwise only an
        error can complete it early. Returns the :class:`Pending` instance
        and whether it completed before the *timeout* expired.
    """

    channel = queue.channel
    pending = Pending()

    channel.begin()

    try:
        if reply:
            binding = listeners.bind_once(channel.transport, data=pending._complete, error=pending._fail)
        else:
            binding = listeners.bind_once(channel.transport, error=pending._fail)

        try:
            channel.write(command)
            completed = pending.wait(timeout)
        finally:
            binding.cancel()
    finally:
        channel.end()

    return pending, completed


def _stale(queue):
    """ A connection is replaced before use if it was closed, or if its
        transport is gone: dropped by the peer, or retired after a timeout.
    """

    return not queue.active or not queue.channel.transport.is_open



def get_task(queue, origin='', refresh=False, timeout=None):
    """ Ask the queue server for a task, optionally from the queue named
        *origin*. Returns a :class:`mqueue.Task`, or None if no task is
        available.

        If the connection is inactive, its transport is closed, or *refresh*
        is True, a new connection is established first. A transport error on
        the first attempt is retried once over a fresh connection; an error
        on that retry raises :class:`mqueue.TransportError`. If the server
        stays silent for *timeout* seconds, :class:`mqueue.TransportTimeout`
        is raised and the transport is closed; an overdue reply is never
        taken as the answer to a later request.
    """

    if timeout is None:
        timeout = config.ask_timeout

    command = codec.ask(origin)

    if refresh or _stale(queue):
        queue = connection.reopen(queue)

    pending, completed = _exchange(queue, command, timeout, reply=True)

    if not completed:
        queue.channel.close()
        raise TransportTimeout("no response from %s:%d in %.2f sec" % (queue.host, queue.port, timeout))

    if pending.error is not None:
        queue.channel.close()

        if refresh:
            raise TransportError("ASK failed on retry: %s" % (pending.error)) from pending.error

        log.info("ASK to %s:%d failed (%s), retrying once", queue.host, queue.port, pending.error)
        return get_task(queue, origin, refresh=True, timeout=timeout)

    delivered, data = codec.decode_task(pending.response, queue.json_mode)

    if not delivered:
        return None

    if origin:
        return Task(queue, data, origin)
    else:
        return Task(queue, data)



def schedule_task(queue, task, for_queue=None, timeout=None, refresh=False):
    """ Hand a new *task* to the queue server, optionally for the queue named
        *for_queue*. A *task* that is a dict or list is sent JSON-encoded;
        in JSON mode nothing else is accepted, and anything else raises
        :class:`mqueue.ValidationError` before any network activity.

        The protocol does not confirm a scheduled task. After writing the
        command this function waits *timeout* seconds purely to give a late
        transport error a chance to surface; if none does, the task is
        assumed to have been scheduled. The guarantee is that the task was
        sent, not that it was received.

        Returns the :class:`mqueue.Connection` that was used, which differs
        from *queue* if a reconnect was necessary. Retry behavior is the same
        as for :func:`get_task`.
    """

    if timeout is None:
        timeout = config.schedule_timeout

    command = codec.schedule(task, for_queue, queue.json_mode)

    if refresh or _stale(queue):
        queue = connection.reopen(queue)

    pending, _completed = _exchange(queue, command, timeout, reply=False)

    if pending.error is None:
        return queue

    queue.channel.close()

    if refresh:
        raise TransportError("SCHED failed on retry: %s" % (pending.error)) from pending.error

    log.info("SCHED to %s:%d failed (%s), retrying once", queue.host, queue.port, pending.error)
    return schedule_task(queue, task, for_queue, timeout, refresh=True)



def reschedule_task(task, timeout=None):
    """ Put a received *task* back on the queue it came from, over its parent
        connection. This does not decline the task; it only submits its data
        again. Returns the connection used, as :func:`schedule_task` does.
    """

    return schedule_task(task.parent, task.data, task.origin, timeout)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
