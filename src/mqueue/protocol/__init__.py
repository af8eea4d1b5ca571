"""
mqueue Protocol Layer
=====================

Command encoding and reply decoding for the queue server's line protocol.
Nothing in this package performs I/O or depends on a transport.

    Client                          Server
      ASK [queue]          ->
                           <-       WANT? <payload>   (or NOPE)
      ACK | DCL | DEL      ->
      SCHED <payload>[@queue] ->
      END                  ->

The protocol has no request identifiers and no confirmations for anything
other than ASK; correlation is purely positional.
"""

from . import fields
from . import codec
from .codec import ValidationError


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
