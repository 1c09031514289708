"""
Non-blocking sockets for coroutines.

`Socket` looks like the stdlib socket, but the calls that would block return
operations, the coroutine yields them and gets the result:

.. sourcecode:: python

    sock = Socket()
    yield sock.connect(('localhost', 1200))
    yield sock.sendall(b'hello\\n')
    data = yield sock.recv(1024)
"""
__all__ = [
    'getdefaulttimeout', 'setdefaulttimeout', 'Socket', 'SocketFile',
    'SocketOperation', 'Recv', 'Send', 'SendAll', 'Accept', 'Connect',
    'RecvAll', 'SocketError', 'ConnectionClosed'
]
import errno
import os
import socket

from genloop.core import events
from genloop.core.events import SocketError, ConnectionClosed
from genloop.core.coroutines import coroutine

_default_timeout = None


def getdefaulttimeout():
    return _default_timeout


def setdefaulttimeout(timeout):
    """Timeout for the operations of the sockets created from now on. None
    leaves it to the scheduler's default_timeout, -1 means no timeout."""
    global _default_timeout
    _default_timeout = timeout


class Socket(object):
    """
    ``Socket(family, type, proto)`` like `socket.socket`, or
    ``Socket(_sock=existing)`` to wrap a socket. The wrapped socket is put in
    non-blocking mode.

    `recv`, `send`, `sendall`, `accept` and `connect` return operations. The
    calls that never block (bind, listen, setsockopt, ...) go straight to the
    socket.
    """
    __slots__ = ['_fd', '_timeout']

    _passthrough = frozenset([
        'bind', 'listen', 'fileno', 'getsockname', 'getpeername',
        'setsockopt', 'getsockopt', 'shutdown'
    ])

    def __init__(self, *args, **kwargs):
        sock = kwargs.pop('_sock', None)
        self._fd = socket.socket(*args, **kwargs) if sock is None else sock
        self._fd.setblocking(False)
        self._timeout = _default_timeout

    def __getattr__(self, name):
        if name in self._passthrough:
            return getattr(self._fd, name)
        raise AttributeError("%s has no attribute %r" % (self.__class__.__name__, name))

    def settimeout(self, timeout):
        "Seconds or a timedelta; None for the scheduler's default, -1 for none."
        self._timeout = timeout

    def gettimeout(self):
        return self._timeout

    def recv(self, bufsize, **kws):
        "Some data, at most `bufsize` bytes. Raises ConnectionClosed at EOF."
        return Recv(self, bufsize, timeout=self._timeout, **kws)

    def send(self, data, **kws):
        "Send some of `data`, the result is how many bytes were sent."
        return Send(self, data, timeout=self._timeout, **kws)

    def sendall(self, data, **kws):
        return SendAll(self, data, timeout=self._timeout, **kws)

    def accept(self, **kws):
        "The result is a ``(Socket, address)`` pair."
        return Accept(self, timeout=self._timeout, **kws)

    def connect(self, address, **kws):
        return Connect(self, address, timeout=self._timeout, **kws)

    def makefile(self, bufsize=None):
        return SocketFile(self, bufsize)

    def close(self):
        self._fd.close()

    def __repr__(self):
        return "<%s fd:%s>" % (self.__class__.__name__, self._fd.fileno())


class SocketOperation(events.TimedOperation):
    """
    A socket call that may have to wait for the socket. Subclasses implement
    `perform`: make the call, return True when done and False (or raise
    BlockingIOError) when the socket isn't ready. `readable` tells the
    proactor what to wait for.
    """
    __slots__ = ['sock']
    readable = True

    def __init__(self, sock, **kws):
        super(SocketOperation, self).__init__(**kws)
        self.sock = sock

    def fileno(self):
        return self.sock.fileno()

    def process(self, sched, coro):
        super(SocketOperation, self).process(sched, coro)
        return sched.proactor.submit(self, coro)

    def cleanup(self, sched, coro):
        return sched.proactor.cancel(self)

    def perform(self):
        raise NotImplementedError()

    def __repr__(self):
        return "<%s on %r deadline:%s>" % (
            self.__class__.__name__, self.sock, self.deadline)


class Recv(SocketOperation):
    __slots__ = ['bufsize', 'data']

    def __init__(self, sock, bufsize=4096, **kws):
        super(Recv, self).__init__(sock, **kws)
        self.bufsize = bufsize
        self.data = None

    def perform(self):
        self.data = self.sock._fd.recv(self.bufsize)
        if not self.data:
            raise ConnectionClosed("Connection closed by peer.")
        return True

    def finalize(self, sched):
        super(Recv, self).finalize(sched)
        return self.data


class Send(SocketOperation):
    __slots__ = ['data', 'sent']
    readable = False

    def __init__(self, sock, data, **kws):
        super(Send, self).__init__(sock, **kws)
        self.data = data
        self.sent = 0

    def perform(self):
        self.sent = self.sock._fd.send(self.data)
        return True

    def finalize(self, sched):
        super(Send, self).finalize(sched)
        return self.sent


class SendAll(Send):
    "Keeps sending till all the data is out. The result is its length."
    __slots__ = []

    def perform(self):
        self.sent += self.sock._fd.send(memoryview(self.data)[self.sent:])
        return self.sent >= len(self.data)


class Accept(SocketOperation):
    __slots__ = ['conn', 'addr']

    def __init__(self, sock, **kws):
        super(Accept, self).__init__(sock, **kws)
        self.conn = self.addr = None

    def perform(self):
        conn, self.addr = self.sock._fd.accept()
        self.conn = self.sock.__class__(_sock=conn)
        return True

    def finalize(self, sched):
        super(Accept, self).finalize(sched)
        return self.conn, self.addr


class Connect(SocketOperation):
    "The result is the socket."
    __slots__ = ['addr', 'started']
    readable = False

    def __init__(self, sock, addr, **kws):
        super(Connect, self).__init__(sock, **kws)
        self.addr = addr
        self.started = False

    def perform(self):
        fd = self.sock._fd
        if self.started:
            # writable: the outcome is in SO_ERROR
            err = fd.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
        else:
            self.started = True
            err = fd.connect_ex(self.addr)
        if err in (0, errno.EISCONN):
            return True
        if err in (errno.EINPROGRESS, errno.EALREADY, errno.EWOULDBLOCK):
            return False
        raise SocketError(err, os.strerror(err))

    def finalize(self, sched):
        super(Connect, self).finalize(sched)
        return self.sock


@coroutine
def RecvAll(sock, length, **kws):
    "Receive exactly `length` bytes. Raises ConnectionClosed at EOF."
    data = bytearray()
    while len(data) < length:
        data += yield Recv(sock, length - len(data), **kws)
    return bytes(data)


class SocketFile(object):
    """
    Buffered file-like access to a `Socket`, for bytes. The methods that
    touch the socket are coroutines:

    .. sourcecode:: python

        fh = sock.makefile()
        line = yield fh.readline()
        yield fh.write(line)
        yield fh.flush()

    The peer closing the connection reads as EOF (``b""``).
    """
    bufsize = 8192

    def __init__(self, sock, bufsize=None):
        self.sock = sock
        if bufsize:
            self.bufsize = bufsize
        self.rbuf = bytearray()
        self.wbuf = bytearray()
        self.eof = False

    @coroutine
    def fill(self):
        "Receive more data in the read buffer, False at EOF."
        if self.eof:
            return False
        try:
            self.rbuf += yield self.sock.recv(self.bufsize)
        except ConnectionClosed:
            self.eof = True
            return False
        return True

    def take(self, size):
        data = bytes(self.rbuf[:size])
        del self.rbuf[:size]
        return data

    @coroutine
    def read(self, size=-1):
        "Read `size` bytes (less at EOF), or everything till EOF."
        while size < 0 or len(self.rbuf) < size:
            if not (yield self.fill()):
                break
        return self.take(len(self.rbuf) if size < 0 else size)

    @coroutine
    def readline(self, size=-1):
        "Read till a newline (included), `size` bytes or EOF."
        while True:
            end = self.rbuf.find(b'\n') + 1
            if end or 0 <= size <= len(self.rbuf):
                break
            if not (yield self.fill()):
                break
        if not end:
            end = len(self.rbuf)
        if size >= 0:
            end = min(end, size)
        return self.take(end)

    @coroutine
    def readlines(self, sizehint=0):
        "Lines till EOF, or till `sizehint` bytes were read."
        lines = []
        total = 0
        while not sizehint or total < sizehint:
            line = yield self.readline()
            if not line:
                break
            lines.append(line)
            total += len(line)
        return lines

    @coroutine
    def write(self, data):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("write() argument must be bytes, not %s" %
                            type(data).__name__)
        self.wbuf += data
        if len(self.wbuf) >= self.bufsize:
            yield self.flush()

    @coroutine
    def writelines(self, lines):
        for line in lines:
            yield self.write(line)

    @coroutine
    def flush(self):
        if self.wbuf:
            data, self.wbuf = bytes(self.wbuf), bytearray()
            yield self.sock.sendall(data)

    @coroutine
    def close(self):
        "Flush, the socket stays open."
        yield self.flush()
