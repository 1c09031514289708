'''
The trampoline: coroutines are generators
(`PEP 342 <https://www.python.org/dev/peps/pep-0342/>`_) that yield
operations to a scheduler and get the operation's result back at the yield:

.. sourcecode:: python

    @coroutine
    def fetch(address):
        sock = sockets.Socket()
        yield sock.connect(address)
        data = yield sock.recv(1024)
        return data

    @coroutine
    def main():
        data = yield fetch(('localhost', 1200))

* :mod:`~genloop.core.events` - signals, sleeping, joining and spawning
* :mod:`~genloop.core.sockets` - socket calls that suspend the coroutine
  instead of blocking the process
* :mod:`~genloop.core.pipe` - a producer coroutine feeding a consumer

Yielding a coroutine instance calls it: the caller gets the return value or
the exception. A bare ``yield`` gives the other coroutines a turn.
'''
