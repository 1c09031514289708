"""
A line echo server running in the trampoline scheduler.

Run it with::

    genloop-echo --port 1200

and talk to it with telnet: every line is sent back, ``exit`` ends the
session.
"""
import argparse
import socket

import structlog

from genloop.core import events, sockets
from genloop.core.coroutines import coroutine
from genloop.core.schedulers import Scheduler
from genloop.core.util import configure_logging, LOG_LEVELS

logger = structlog.get_logger()

WELCOME = b"WELCOME TO ECHO SERVER !\r\n"
GOODBYE = b"GOOD BYE"


@coroutine
def server(sched, address, backlog=64, on_listen=None):
    """Accept connections forever, each one gets a `handler` coroutine.

    `on_listen` is called with the bound address (useful with port 0)."""
    srv = sockets.Socket()
    srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    srv.bind(address)
    srv.listen(backlog)
    # the default timeout is for the clients, not for waiting on them
    srv.settimeout(-1)
    bound = srv.getsockname()
    logger.info("echo.listening", address=bound)
    if on_listen:
        on_listen(bound)
    try:
        while True:
            conn, addr = yield srv.accept()
            logger.info("echo.connection", peer=addr)
            sched.add(handler, args=(conn, addr))
    finally:
        srv.close()


@coroutine
def handler(sock, addr):
    fh = sock.makefile()
    try:
        yield fh.write(WELCOME)
        yield fh.flush()

        while True:
            line = yield fh.readline(1024)
            if not line:
                logger.info("echo.disconnected", peer=addr)
                return
            if line.strip() == b'exit':
                yield fh.write(GOODBYE)
                yield fh.flush()
                logger.info("echo.bye", peer=addr)
                return
            yield fh.write(line)
            yield fh.flush()
    except events.ConnectionClosed:
        logger.info("echo.disconnected", peer=addr)
    except events.OperationTimeout:
        logger.info("echo.timeout", peer=addr)
    finally:
        sock.close()


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="genloop-echo",
        description="Line echo server running in a genloop scheduler."
    )
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=1200)
    parser.add_argument("--backlog", type=int, default=64)
    parser.add_argument("--timeout", type=float, default=None,
                        help="seconds a client may stay silent")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="info")
    parser.add_argument("--log-format", choices=("console", "json"),
                        default="console")
    options = parser.parse_args(argv)

    configure_logging(options.log_level, options.log_format)
    sched = Scheduler(default_timeout=options.timeout)
    sched.add(server, args=(sched, (options.host, options.port), options.backlog))
    try:
        sched.run()
    except KeyboardInterrupt:
        logger.info("echo.stopped")
    finally:
        sched.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
