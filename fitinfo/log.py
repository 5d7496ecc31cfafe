# SPDX-License-Identifier: BSD-3-Clause
# fitinfo: Flattened Image Tree inspection and verification

"""
Logging for fitinfo, layered atop of Python's own ``logging`` module.

The initial log level is taken from the ``FITINFO_LOG_LEVEL`` environment
variable. When it is not set, the ``'note'`` level is used.

Levels are listed below in order of decreasing verbosity, with the prefix
each message is given.

+----------------+-------------+------------------------------------------------------------------+
|   Level Name   | Msg. Prefix | Description                                                      |
+================+=============+==================================================================+
| debug          |   ``[#]``   | Property dumps and per-record details of a FIT build             |
+----------------+-------------+------------------------------------------------------------------+
| note           |   ``[*]``   | Progress of the build: images extracted, configurations resolved |
+----------------+-------------+------------------------------------------------------------------+
| info           |   ``[+]``   | High-level status, usually success                               |
+----------------+-------------+------------------------------------------------------------------+
| warning        |   ``[!]``   | Undesirable, but non-fatal, conditions                           |
+----------------+-------------+------------------------------------------------------------------+
| error          |   ``[X]``   | What failed and why                                              |
+----------------+-------------+------------------------------------------------------------------+
| silent         |     N/A     | No log output is written to stderr                               |
+----------------+-------------+------------------------------------------------------------------+

Progress bars (see :py:mod:`fitinfo.progress`) are only drawn at the
*note*, *info*, and *warning* levels.
"""

import os
import platform
import sys
import logging

DEBUG   = logging.DEBUG
NOTE    = logging.DEBUG + (logging.INFO - logging.DEBUG) // 2
INFO    = logging.INFO
WARNING = logging.WARN
ERROR   = logging.ERROR
SILENT  = logging.CRITICAL + (logging.CRITICAL - logging.ERROR)

_PREFIXES = (
    (DEBUG,   '[#] ', '\033[34m'),
    (NOTE,    '[*] ', '\033[36m'),
    (INFO,    '[+] ', '\033[32m'),
    (WARNING, '[!] ', '\033[33m'),
    (ERROR,   '[X] ', '\033[31m'),
)


class FitLog:
    """
    A prefixed view onto the shared fitinfo logger.

    Components create their own instance with a short *prefix* (e.g. ``'(image)'``)
    so that messages can be attributed to the stage of the build that emitted them.
    All instances write through the same underlying Python logger, named by *logger_name*.
    """

    _level_name_map = {
        'debug':    DEBUG,
        'note':     NOTE,
        'info':     INFO,
        'warn':     WARNING,
        'warning':  WARNING,
        'error':    ERROR,
        'fatal':    ERROR,
        'critical': ERROR,
        'silent':   SILENT
    }

    def __init__(self, prefix='', logger_name='fitinfo'):
        if prefix != '' and not prefix.endswith(' '):
            prefix += ' '

        # Colorize only when a TTY that can probably handle it is in use
        color = platform.system() in ('Linux', 'Darwin') and sys.stdout.isatty()

        self._prefix = {}
        for level, symbol, escape in _PREFIXES:
            if color:
                symbol = escape + symbol + '\033[0m'
            self._prefix[level] = symbol + prefix

        self.logger = logging.getLogger(logger_name)

    @classmethod
    def level_from_name(cls, name: str) -> int:
        """
        Convert a level name (e.g. ``'note'``) to its integer value.

        A :py:exc:`ValueError` is raised for unrecognized names.
        """
        try:
            return cls._level_name_map[name.lower()]
        except KeyError:
            raise ValueError('Invalid log level: ' + name)

    @property
    def level(self):
        """
        Current log level
        """
        return self.logger.level

    @level.setter
    def level(self, level):
        if isinstance(level, str):
            level = self.level_from_name(level)
        self.logger.setLevel(level)

    def _log(self, level, args, kwargs):
        self.logger.log(level, *((self._prefix[level] + args[0],) + args[1:]), **kwargs)

    def debug(self, *args, **kwargs):
        """
        Write a debug-level message: raw property contents, digests, and
        other details most users never need to see.
        """
        self._log(DEBUG, args, kwargs)

    def note(self, *args, **kwargs):
        """
        Write a note-level message describing the progress of a build.
        """
        self._log(NOTE, args, kwargs)

    def info(self, *args, **kwargs):
        """
        Write an info-level message. Used when a high-level operation completes.
        """
        self._log(INFO, args, kwargs)

    def warning(self, *args, **kwargs):
        """
        Write a warning-level message about something that did not cause
        a failure, but which a user should probably look at.
        """
        self._log(WARNING, args, kwargs)

    def error(self, *args, **kwargs):
        """
        Write an error-level message about a failed operation.
        """
        self._log(ERROR, args, kwargs)


_fitinfo_root = FitLog()  # pylint: disable=invalid-name
_fitinfo_root.logger.addHandler(logging.StreamHandler())
_fitinfo_root.level = os.getenv('FITINFO_LOG_LEVEL', NOTE)


def debug(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`FitLog.debug()` method
    """
    _fitinfo_root.debug(*args, **kwargs)


def note(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`FitLog.note()` method
    """
    _fitinfo_root.note(*args, **kwargs)


def info(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`FitLog.info()` method
    """
    _fitinfo_root.info(*args, **kwargs)


def warning(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`FitLog.warning()` method
    """
    _fitinfo_root.warning(*args, **kwargs)


def error(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`FitLog.error()` method
    """
    _fitinfo_root.error(*args, **kwargs)


def set_level(level):
    """
    Set the fitinfo logger to the specified level.

    This may be one of ``fitinfo.log.DEBUG``, ``NOTE``, ``INFO``, ``WARNING``,
    ``ERROR``, or ``SILENT``, or the corresponding lower-case level name.
    """
    _fitinfo_root.level = level


def get_level() -> int:
    """
    Get the current level of the fitinfo logger.
    """
    return _fitinfo_root.level
