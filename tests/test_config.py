import importlib

import pytest

from mqueue import config


def test_defaults():

    assert config.connect_timeout == 5.0
    assert config.ask_timeout == 5.0
    assert config.schedule_timeout == 1.0
    assert config.terminator == b'\n'


def test_environment(monkeypatch):

    monkeypatch.setenv('MQUEUE_HOST', 'queue.example.com')
    monkeypatch.setenv('MQUEUE_PORT', '9000')
    monkeypatch.setenv('MQUEUE_ASK_TIMEOUT', '2.5')
    monkeypatch.setenv('MQUEUE_TERMINATOR', '\\r\\n')

    try:
        importlib.reload(config)

        assert config.host == 'queue.example.com'
        assert config.port == 9000
        assert config.ask_timeout == 2.5
        assert config.schedule_timeout == 1.0
        assert config.terminator == b'\r\n'
    finally:
        monkeypatch.undo()
        importlib.reload(config)

    assert config.terminator == b'\n'


def test_terminator_disabled(monkeypatch):

    monkeypatch.setenv('MQUEUE_TERMINATOR', '')

    try:
        importlib.reload(config)
        assert config.terminator == b''
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_invalid(monkeypatch):

    monkeypatch.setenv('MQUEUE_CONNECT_TIMEOUT', 'soon')

    try:
        with pytest.raises(ValueError, match='MQUEUE_CONNECT_TIMEOUT'):
            importlib.reload(config)
    finally:
        monkeypatch.undo()
        importlib.reload(config)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
