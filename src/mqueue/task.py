""" A class representation of a task delivered by the queue server.
"""


class Task:
    """ One unit of work received in reply to an ASK request.

        The *parent* is the :class:`mqueue.Connection` that delivered the
        task; it is kept only so that the task can be rescheduled, and
        carries no ownership of the underlying transport. The *data* is
        the payload as a string, or the decoded JSON object if the parent
        connection is in JSON mode. The *origin* is the name of the queue
        the task was drawn from, or None for the server's default queue.
    """

    def __init__(self, parent, data, origin=None):

        self.parent = parent
        self.data = data
        self.origin = origin


    def __repr__(self):
        return 'Task(data=%s, origin=%s)' % (repr(self.data), repr(self.origin))


    def __eq__(self, other):

        if not isinstance(other, Task):
            return NotImplemented

        return self.data == other.data and self.origin == other.origin


    __hash__ = None


# end of class Task


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
