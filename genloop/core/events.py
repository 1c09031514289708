"""
The operations a coroutine can yield to the scheduler, and the exceptions
they raise in it.

An operation is asked to `process` the coroutine that yielded it: it either
hands back a ``(op, coro)`` pair to resume right away or parks the coroutine
somewhere (a signal's wait list, a joined coroutine, the timeouts heap) and
returns None. When the coroutine is resumed, the value of its yield is
whatever `finalize` returns.
"""
__all__ = [
    'SocketError', 'ConnectionClosed', 'OperationTimeout',
    'Operation', 'TimedOperation', 'WaitForSignal', 'Signal', 'Call',
    'AddCoro', 'Join', 'Sleep', 'deadline'
]
import collections
import datetime

from genloop.core.util import priority, getnow


class SocketError(Exception):
    "A socket call failed."


class ConnectionClosed(SocketError):
    "The other end went away."


class OperationTimeout(Exception):
    "The operation (the exception's argument) didn't complete in time."


def deadline(timeout):
    """
    The moment a `timeout` expires: `timeout` is a number of seconds, a
    timedelta or a datetime. None and -1 mean it never does.
    """
    if timeout is None or timeout == -1:
        return None
    if isinstance(timeout, datetime.datetime):
        return timeout
    if not isinstance(timeout, datetime.timedelta):
        timeout = datetime.timedelta(seconds=timeout)
    return getnow() + timeout


class Operation(object):
    """Base for everything a coroutine can yield.

    * prio - one of the `priority` flags, DEFAULT takes the scheduler's
    """
    __slots__ = ['prio']

    def __init__(self, prio=priority.DEFAULT):
        self.prio = prio

    def process(self, sched, coro):
        if self.prio == priority.DEFAULT:
            self.prio = sched.default_priority

    def finalize(self, sched):
        return self


class TimedOperation(Operation):
    """An operation that raises `OperationTimeout` in the coroutine if it
    isn't done in `timeout` (seconds, timedelta or datetime; -1 disables it,
    None takes the scheduler's default_timeout).

    While armed, `coro` is the suspended coroutine. `finalize` disarms it.
    """
    __slots__ = ['timeout', 'deadline', 'coro']

    def __init__(self, timeout=None, **kws):
        super(TimedOperation, self).__init__(**kws)
        self.timeout = timeout
        self.deadline = None
        self.coro = None

    def process(self, sched, coro):
        super(TimedOperation, self).process(sched, coro)
        timeout = self.timeout
        if timeout is None:
            timeout = sched.default_timeout
        self.arm(sched, coro, timeout)

    def arm(self, sched, coro, timeout):
        self.coro = coro
        self.deadline = deadline(timeout)
        if self.deadline is not None:
            sched.add_timeout(self)

    def finalize(self, sched):
        self.coro = None
        return super(TimedOperation, self).finalize(sched)

    def cleanup(self, sched, coro):
        """Withdraw the operation, its deadline passed. A false result means
        the coroutine is already on its way back and gets no timeout."""
        return True


class WaitForSignal(TimedOperation):
    """
    Suspend till someone signals `name` (any hashable):

    .. sourcecode:: python

        value = yield events.WaitForSignal(name, timeout=None)
    """
    __slots__ = ['name', 'result']

    def __init__(self, name, **kws):
        super(WaitForSignal, self).__init__(**kws)
        self.name = name
        self.result = None

    def process(self, sched, coro):
        super(WaitForSignal, self).process(sched, coro)
        waiters = sched.sigwait.setdefault(self.name, collections.deque())
        waiters.append((self, coro))

        parked = sched.signals.get(self.name)
        if parked and len(waiters) >= parked[0][0].recipients:
            signal, signaller = parked.popleft()
            if not parked:
                del sched.signals[self.name]
            return signal.fire(sched, signaller)

    def finalize(self, sched):
        super(WaitForSignal, self).finalize(sched)
        return self.result

    def cleanup(self, sched, coro):
        waiters = sched.sigwait.get(self.name)
        if not waiters or (self, coro) not in waiters:
            # already woken up by a signal
            return False
        waiters.remove((self, coro))
        if not waiters:
            del sched.sigwait[self.name]
        return True

    def __repr__(self):
        return "<%s %r deadline:%s>" % (
            self.__class__.__name__, self.name, self.deadline)


class Signal(Operation):
    """
    Wake up everyone waiting on `name`, they all get `value`:

    .. sourcecode:: python

        count = yield events.Signal(name, value, recipients=0)

    The result is the number of coroutines woken up. With `recipients` the
    signaller is parked till at least that many coroutines wait on `name`.
    Parked signals on the same name are released first come, first served.
    """
    __slots__ = ['name', 'value', 'recipients', 'result']

    def __init__(self, name, value=None, recipients=0, **kws):
        super(Signal, self).__init__(**kws)
        self.name = name
        self.value = value
        self.recipients = recipients
        self.result = None

    def process(self, sched, coro):
        super(Signal, self).process(sched, coro)
        if len(sched.sigwait.get(self.name, ())) < self.recipients:
            sched.signals.setdefault(self.name, collections.deque()).append(
                (self, coro))
            return
        return self.fire(sched, coro)

    def fire(self, sched, coro):
        waiters = sched.sigwait.pop(self.name, ())
        self.result = len(waiters)
        for op, _ in waiters:
            op.result = self.value
        sched.wake(waiters, first=self.prio & priority.OP)
        if self.prio & priority.CORO:
            return self, coro
        sched.active.append((self, coro))

    def finalize(self, sched):
        super(Signal, self).finalize(sched)
        return self.result

    def __repr__(self):
        return "<%s %r value:%r>" % (self.__class__.__name__, self.name, self.value)


def Call(coro, args=(), kwargs=None):
    """
    Same thing as yielding the coroutine instance:

    .. sourcecode:: python

        result = yield events.Call(mycoro, args=(1, 2))
        result = yield mycoro(1, 2)

    The caller gets the return value, or the exception, of the callee.
    """
    return coro(*args, **(kwargs or {}))


class AddCoro(Operation):
    """
    Start `coro` in the scheduler without waiting for it:

    .. sourcecode:: python

        instance = yield events.AddCoro(mycoro, args=(), kwargs={})
    """
    __slots__ = ['coro', 'args', 'kwargs', 'result']

    def __init__(self, coro, args=(), kwargs=None, **kws):
        super(AddCoro, self).__init__(**kws)
        self.coro = coro
        self.args = args
        self.kwargs = kwargs or {}
        self.result = None

    def process(self, sched, coro):
        super(AddCoro, self).process(sched, coro)
        self.result = sched.add(self.coro, self.args, self.kwargs,
                                first=self.prio & priority.OP)
        if self.prio & priority.CORO:
            return self, coro
        sched.active.append((self, coro))

    def finalize(self, sched):
        super(AddCoro, self).finalize(sched)
        return self.result


class Join(TimedOperation):
    """
    Wait for a coroutine instance to finish and get its result (None if it
    failed):

    .. sourcecode:: python

        ref = sched.add(worker)
        result = yield events.Join(ref)
    """
    __slots__ = ['target']

    def __init__(self, target, **kws):
        super(Join, self).__init__(**kws)
        self.target = target

    def process(self, sched, coro):
        super(Join, self).process(sched, coro)
        if not self.target.running:
            return self, coro
        self.target.add_waiter(coro, self)

    def finalize(self, sched):
        super(Join, self).finalize(sched)
        return self.target.result

    def cleanup(self, sched, coro):
        return self.target.remove_waiter(coro, self)

    def __repr__(self):
        return "<%s %r>" % (self.__class__.__name__, self.target)


class Sleep(TimedOperation):
    """
    Suspend for a while:

    .. sourcecode:: python

        yield events.Sleep(0.5)

    The argument is seconds, a timedelta or the datetime to wake up at. A
    zero sleep just lets the other coroutines run.
    """
    __slots__ = []

    def process(self, sched, coro):
        Operation.process(self, sched, coro)
        self.arm(sched, coro, self.timeout or 0)
        if self.deadline is None:
            sched.active.append((self, coro))

    def cleanup(self, sched, coro):
        # waking up is the point
        sched.active.append((self, coro))
        return False
