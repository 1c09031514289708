"""
Opens a bunch of clients against the echo server (``genloop-echo``), each
sends a few lines and reads them back.

    python echoc.py [port] [clients]
"""
import socket
import sys

from genloop.common import *
from genloop.core.util import configure_logging

configure_logging()
m = Scheduler(proactor_resolution=.5, proactor=proactors.SelectProactor)
port = len(sys.argv) > 1 and int(sys.argv[1]) or 1200
clients = len(sys.argv) > 2 and int(sys.argv[2]) or 10
errors = 0
recvs = 0

@coroutine
def client(num):
    global errors, recvs
    sock = sockets.Socket()
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        try:
            yield sock.connect(("127.0.0.1", port))
        except sockets.SocketError as e:
            errors += 1
            print('Error in:', num, errors, e)
            return
        fh = sock.makefile()
        print(num, (yield fh.readline(8192)))
        for i in range(3):
            yield fh.write(b"client %d line %d\r\n" % (num, i))
            yield fh.flush()
            line = yield fh.readline(8192)
            recvs += 1
            print(num, recvs, ": ", line)
        yield fh.write(b"exit\r\n")
        yield fh.flush()
        print(num, (yield fh.read()))
    finally:
        sock.close()

for i in range(clients):
    m.add(client, args=(i,))

try:
    m.run()
finally:
    m.close()
