""" Python client for a line-protocol message queue server. A session is a
    single TCP connection over which the client asks for tasks, finalizes
    the tasks it received, and schedules new ones.

        queue = mqueue.get_message_queue('localhost', 8080)
        task = mqueue.get_task(queue)
        if task is not None:
            queue = task.parent
            ...
            mqueue.accept_last_task(queue)
        queue = mqueue.close_message_queue(queue)

    Operations that may reconnect hand back the connection they used; the
    task's parent is the connection the finalizing commands must go to.
"""

# Utility components.

from . import config

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .connection import Connection
from .connection import get_message_queue, close_message_queue, release
from .task import Task
from .request import get_task, schedule_task, reschedule_task
from .lifecycle import accept_last_task, decline_last_task, delete_last_task

from .protocol.codec import ValidationError
from .transport.base import (
    ChannelBusy,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
