import errno
import sys
import time

from ..coroutines import CoroutineException
from ..events import SocketError, ConnectionClosed

NOT_READY = frozenset([
    errno.EAGAIN, errno.EWOULDBLOCK, errno.EINPROGRESS, errno.EALREADY
])
PEER_GONE = frozenset([errno.EPIPE, errno.ECONNRESET, errno.ECONNABORTED])


def attempt(op):
    """
    Make the operation's socket call. Returns the operation when it's done,
    a CoroutineException when it failed and None when the socket isn't
    ready yet.
    """
    try:
        if op.perform():
            return op
    except SocketError:
        return CoroutineException(*sys.exc_info())
    except OSError as exc:
        if exc.errno in NOT_READY:
            return None
        error = ConnectionClosed if exc.errno in PEER_GONE else SocketError
        return CoroutineException(error, error(exc.errno, exc.strerror))
    return None


class ProactorBase(object):
    """
    Keeps the socket operations that wait for their socket, with the
    suspended coroutines. A socket can have only one pending operation.

    Subclasses implement `register`, `unregister` and `wait`.
    """
    def __init__(self, scheduler, resolution):
        self.scheduler = scheduler
        self.resolution = resolution
        self.pending = {}

    def __len__(self):
        return len(self.pending)

    def __repr__(self):
        return "<%s pending:%s>" % (self.__class__.__name__, len(self.pending))

    def submit(self, op, coro):
        """Try the call right away, if the socket isn't ready suspend `coro`
        till it is. Returns the pair to resume now, or None."""
        result = attempt(op)
        if result is not None:
            return result, coro
        for other in self.pending:
            if other.sock is op.sock:
                raise SocketError("%s already has a pending operation: %r" % (
                    op.sock, other))
        self.register(op)
        self.pending[op] = coro

    def cancel(self, op):
        "Drop a pending operation, False if it isn't pending."
        if op not in self.pending:
            return False
        self.unregister(op)
        del self.pending[op]
        return True

    def poll(self, timeout):
        """Wait at most `timeout` seconds (the resolution if None) and queue
        the coroutines of the operations that completed."""
        if timeout is None:
            timeout = self.resolution
        if not self.pending:
            time.sleep(timeout)
            return
        for op in self.wait(timeout):
            coro = self.pending.get(op)
            if coro is None:
                continue
            result = attempt(op)
            if result is not None:
                self.cancel(op)
                self.scheduler.active.append((result, coro))

    def close(self):
        for op in list(self.pending):
            self.cancel(op)

    def register(self, op):
        raise NotImplementedError()

    def unregister(self, op):
        raise NotImplementedError()

    def wait(self, timeout):
        "Block till some sockets are ready, return their operations."
        raise NotImplementedError()
