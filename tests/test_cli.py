import json
import logging

import pytest

import mockserver
from mqueue import cli


@pytest.fixture(autouse=True)
def restore_logging():
    """ The command line installs a stderr handler bound to the captured
        stream of the current test; remove it again afterwards.
    """

    logger = logging.getLogger('mqueue')
    level = logger.level

    yield

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(level)


def arguments(server, *extra):
    return ['--host', server.host, '--port', str(server.port)] + list(extra)


def test_ask(server, capsys):

    server.responder = mockserver.always(b'WANT? from the command line')

    status = cli.main(arguments(server, 'ask'))

    assert status == 0
    assert capsys.readouterr().out == 'from the command line\n'
    assert server.wait_for(b'ASK \nEND\n')


def test_ask_accept(server, capsys):

    server.responder = mockserver.always(b'WANT? accept me')

    status = cli.main(arguments(server, 'ask', '--from', 'jobs', '--accept'))

    assert status == 0
    assert server.wait_for(b'ASK jobs\nACK\nEND\n')


def test_ask_nothing(server, capsys):

    server.responder = mockserver.always(b'NOPE')

    status = cli.main(arguments(server, 'ask'))

    assert status == 1
    assert capsys.readouterr().out == ''


def test_ask_json(server, capsys):

    server.responder = mockserver.always(b'WANT? {"job": 1}')

    status = cli.main(arguments(server, '--json', 'ask', '--delete'))

    assert status == 0
    assert json.loads(capsys.readouterr().out) == {'job': 1}
    assert server.wait_for(b'ASK \nDEL\nEND\n')


def test_sched(server):

    status = cli.main(arguments(server, 'sched', 'new task', '--for', 'jobs', '--timeout', '0.1'))

    assert status == 0
    assert server.wait_for(b'SCHED new task@jobs\nEND\n')


def test_sched_json(server):

    status = cli.main(arguments(server, '--json', 'sched', '{"job": 2}', '--timeout', '0.1'))

    assert status == 0
    assert server.wait_for(b'SCHED {"job":2}\nEND\n')


def test_sched_invalid_json(server, capsys):

    status = cli.main(arguments(server, '--json', 'sched', 'not json'))

    assert status == 2
    assert 'not valid JSON' in capsys.readouterr().err
    assert server.wait_for(b'', timeout=0.2)


def test_unreachable(capsys, fast):

    port = mockserver.unused_port()
    status = cli.main(['--host', '127.0.0.1', '--port', str(port), 'ask'])

    assert status == 2
    assert capsys.readouterr().err.startswith('mqueue: ')


def test_missing_command():

    with pytest.raises(SystemExit):
        cli.parser().parse_args([])


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
