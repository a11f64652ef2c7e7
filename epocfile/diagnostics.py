"""
Graded diagnostics emitted while decoding.

There are four channels (progress, debug, warning and error) and each message
is attached to the nesting level of the structure being decoded and to the
offset in the buffer. The messages end up in the standard logging machinery,
how they are formatted or stored is up to the handlers the caller installs.
"""
import logging

from .enum import Verbosity


class Diagnostics(object):
    '''Bound to a configuration, it filters by its verbosity and forwards to
    the logger named by it.'''

    def __init__(self, config):
        self.config = config
        self.logger = logging.getLogger(config.logger_name)

    def _emit(self, verbosity, loglevel, lev, off, fmt, args, marker=None):
        if self.config.verbosity < verbosity:
            return

        if marker:
            prefix = '%08x %s> ' % (off, marker * lev)
        else:
            prefix = '%s (offset %08x): ' % (logging.getLevelName(loglevel), off)

        self.logger.log(loglevel, prefix + fmt, *args, extra={'offset': off, 'lev': lev})

    def progress(self, lev, off, fmt, *args):
        self._emit(Verbosity.PROGRESS, logging.DEBUG, lev, off, fmt, args, marker='=')

    def debug(self, lev, off, fmt, *args):
        self._emit(Verbosity.DEBUG, logging.DEBUG, lev, off, fmt, args, marker='-')

    def warning(self, lev, off, fmt, *args):
        self._emit(Verbosity.WARN, logging.WARNING, lev, off, fmt, args)

    def error(self, lev, off, fmt, *args):
        self._emit(Verbosity.ERROR, logging.ERROR, lev, off, fmt, args)
