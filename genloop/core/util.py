"""
Priority flags, the clock and the logging setup.
"""
__all__ = ['priority', 'getnow', 'configure_logging', 'LOG_LEVELS']

import datetime
import logging

import structlog

getnow = datetime.datetime.now

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class priority(object):
    """
    Flags that decide who runs first when an operation wakes coroutines up.

    ======== ===================================================================
    Flag     Meaning
    ======== ===================================================================
    DEFAULT  Take the scheduler's default_priority
    LAST     Everything goes to the back of the active queue
    CORO     The coroutine that yielded the operation is resumed right away
    OP       The coroutines the operation wakes up (signal waiters, a new
             coroutine) go to the front of the active queue
    FIRST    CORO and OP
    ======== ===================================================================
    """
    DEFAULT = -1
    LAST = NOPRIO = 0
    CORO = 1
    OP = 2
    FIRST = PRIO = CORO | OP


def configure_logging(level="info", fmt="console"):
    """
    Configures structlog for the scheduler and the echo server.

    * level - minimum level name, one of `LOG_LEVELS`
    * fmt - ``console`` for human readable output, ``json`` for one json
      object per line
    """
    if level.lower() not in LOG_LEVELS:
        raise ValueError("Unknown log level %r, expected one of: %s" % (
            level, ", ".join(LOG_LEVELS)))
    processors = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
