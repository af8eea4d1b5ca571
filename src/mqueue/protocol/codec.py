""" Encode outgoing commands as bytes and decode the replies to them. These
    are pure functions: nothing here touches a socket, and nothing here knows
    whether a connection is alive.
"""

import json
import re

from .. import config
from . import fields


queue_pattern = re.compile(r'[A-Za-z]+')
want_pattern = re.compile(re.escape(fields.WANT) + r' (.+)')


class ValidationError(ValueError):
    """ A task or queue name cannot be put on the wire as requested. This is
        always the caller's fault and is never retried.
    """
    pass


def is_object(value):
    """ Return True if *value* is something JSON encodes as an object or an
        array. Only such values are valid tasks in JSON mode.
    """

    return isinstance(value, (dict, list))


def validate_queue(name):
    """ Queue names are restricted to ASCII letters. An empty name, or None,
        refers to the server's default queue and is returned as ''.
    """

    if name is None or name == '':
        return ''

    name = str(name)

    if queue_pattern.fullmatch(name) is None:
        raise ValidationError('invalid queue name: ' + repr(name))

    return name


def command(name, argument=None):
    """ Build the bytes for a single protocol command. The configured line
        terminator, if any, is appended.
    """

    if argument is None:
        line = name
    else:
        line = name + ' ' + argument

    return line.encode() + config.terminator


def ask(origin=''):
    """ Request the next task, optionally from the named queue. The space
        after ASK is sent even when no queue is named.
    """

    origin = validate_queue(origin)
    return command(fields.ASK, origin)


def schedule(task, for_queue=None, json_mode=False):
    """ Enqueue *task*, optionally on the named queue. Objects are always
        JSON-encoded; in *json_mode* anything else is rejected.
    """

    if json_mode and not is_object(task):
        raise ValidationError('task has to be an object when using json mode, not ' + type(task).__name__)

    for_queue = validate_queue(for_queue)

    if is_object(task):
        payload = json.dumps(task, separators=(',', ':'))
    else:
        payload = str(task)

    if '\n' in payload or '\r' in payload:
        raise ValidationError('task may not contain line breaks')

    if for_queue:
        payload = payload + fields.QUEUE_SEPARATOR + for_queue

    return command(fields.SCHED, payload)


def finalize(name):
    """ ACK, DCL, DEL and END carry no arguments.
    """

    if name not in (fields.ACK, fields.DCL, fields.DEL, fields.END):
        raise ValueError('not a finalizing command: ' + repr(name))

    return command(name)


def want(reply):
    """ Return the payload following ``WANT? `` in *reply*, without the
        prefix, or None if the reply does not deliver a task.
    """

    if isinstance(reply, bytes):
        reply = reply.decode('utf-8', errors='replace')

    match = want_pattern.search(reply)

    if match is None:
        return None

    return match.group(1).rstrip('\r')


def decode_task(reply, json_mode=False):
    """ Interpret a full reply from the server. Returns a tuple of
        (delivered, data); *delivered* is False if no task is available,
        in which case *data* is None. In *json_mode* a payload that is
        not a JSON object counts as no task at all, since the server has
        no way to flag a malformed payload.
    """

    payload = want(reply)

    if payload is None:
        return (False, None)

    if json_mode == False:
        return (True, payload)

    try:
        data = json.loads(payload)
    except ValueError:
        return (False, None)

    if is_object(data):
        return (True, data)

    return (False, None)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
