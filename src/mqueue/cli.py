""" Command line access to a queue server, mostly for poking at a running
    deployment by hand:

        mqueue --host localhost --port 8080 ask --from jobs --accept
        mqueue --json sched '{"job": 1}' --for jobs
"""

import argparse
import json
import logging
import sys

from . import config
from . import connection
from . import lifecycle
from . import request
from .protocol import codec
from .protocol.codec import ValidationError
from .transport.base import TransportError

log = logging.getLogger(__name__)


def setup_logging(verbose=False):
    """ Send log records to stderr. The library itself never configures
        logging; only this command line entry point does.
    """

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt='%(asctime)s %(levelname)s %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    ))

    logger = logging.getLogger('mqueue')
    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    logger.addHandler(handler)

    if verbose:
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.WARNING)


def parser():

    parser = argparse.ArgumentParser(
        prog='mqueue',
        description='Talk to a message queue server.'
    )
    parser.add_argument(
        '--host',
        default=config.host,
        help='Hostname of the queue server (default: %(default)s)'
    )
    parser.add_argument(
        '--port',
        type=int,
        default=config.port,
        help='Port of the queue server (default: %(default)s)'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Only send and accept JSON objects as tasks'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log protocol traffic to stderr'
    )

    commands = parser.add_subparsers(dest='command', required=True)

    ask = commands.add_parser('ask', help='Request a task and print it')
    ask.add_argument(
        '--from',
        dest='origin',
        default='',
        help='Name of the queue to draw from'
    )
    ask.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='Seconds to wait for a reply'
    )
    finalize = ask.add_mutually_exclusive_group()
    finalize.add_argument('--accept', action='store_true', help='Acknowledge the task')
    finalize.add_argument('--decline', action='store_true', help='Decline the task')
    finalize.add_argument('--delete', action='store_true', help='Delete the task')

    sched = commands.add_parser('sched', help='Schedule a new task')
    sched.add_argument('payload', help='The task; parsed as JSON with --json')
    sched.add_argument(
        '--for',
        dest='for_queue',
        default=None,
        help='Name of the queue to schedule on'
    )
    sched.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='Seconds to listen for transport errors after sending'
    )

    return parser


def _ask(queue, arguments):

    task = request.get_task(queue, arguments.origin, timeout=arguments.timeout)

    if task is None:
        return queue, 1

    queue = task.parent

    if queue.json_mode:
        print(json.dumps(task.data))
    else:
        print(task.data)

    if arguments.accept:
        lifecycle.accept_last_task(queue)
    elif arguments.decline:
        lifecycle.decline_last_task(queue)
    elif arguments.delete:
        lifecycle.delete_last_task(queue)

    return queue, 0


def _payload(arguments):
    """ In JSON mode the payload given on the command line is parsed before
        any connection is made, so that a typo costs nothing.
    """

    task = arguments.payload

    if arguments.json:
        try:
            task = json.loads(task)
        except ValueError as exc:
            raise ValidationError('payload is not valid JSON: %s' % (exc))

        if not codec.is_object(task):
            raise ValidationError('payload must be a JSON object or array')

    return task


def _sched(queue, arguments):

    queue = request.schedule_task(queue, arguments.task, arguments.for_queue, arguments.timeout)
    return queue, 0


def main(argv=None):

    arguments = parser().parse_args(argv)
    setup_logging(arguments.verbose)
    log.debug("%s via %s:%d", arguments.command, arguments.host, arguments.port)

    try:
        if arguments.command == 'ask':
            handler = _ask
        else:
            handler = _sched
            arguments.task = _payload(arguments)

        queue = connection.get_message_queue(arguments.host, arguments.port, arguments.json)
        queue, status = handler(queue, arguments)
        queue = connection.close_message_queue(queue)
        connection.release(queue)
    except (TransportError, ValidationError) as exc:
        print('mqueue: ' + str(exc), file=sys.stderr)
        return 2

    return status


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
