""" Runtime settings for the message queue client. Every value has a default
    and can be overridden with an ``MQUEUE_*`` environment variable set
    before the first import of this module. The values are plain module
    attributes; the request and connection functions read them at call time,
    so a caller is free to assign new values after import.
"""

import codecs
import os


def _float(name, default):

    raw = os.environ.get(name)

    if raw is None or raw.strip() == '':
        return default

    try:
        return float(raw)
    except ValueError:
        raise ValueError("%s must be a number, not %s" % (name, repr(raw)))


def _int(name, default):

    raw = os.environ.get(name)

    if raw is None or raw.strip() == '':
        return default

    try:
        return int(raw)
    except ValueError:
        raise ValueError("%s must be an integer, not %s" % (name, repr(raw)))


def _terminator(name, default):
    """ The line terminator is given in its escaped form, so that CRLF
        line endings can be requested as ``MQUEUE_TERMINATOR='\\r\\n'`` from a shell.
        Setting the variable to the empty string disables the terminator.
    """

    raw = os.environ.get(name)

    if raw is None:
        return default

    raw = codecs.decode(raw, 'unicode_escape')
    return raw.encode('ascii')


host = os.environ.get('MQUEUE_HOST', 'localhost')
port = _int('MQUEUE_PORT', 8080)

# All timeouts are expressed in seconds.

connect_timeout = _float('MQUEUE_CONNECT_TIMEOUT', 5.0)
ask_timeout = _float('MQUEUE_ASK_TIMEOUT', 5.0)
schedule_timeout = _float('MQUEUE_SCHEDULE_TIMEOUT', 1.0)

# Every command is one line on the wire.

terminator = _terminator('MQUEUE_TERMINATOR', b'\n')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
