"""
The trampoline.

Coroutines are kept in a deque of ``(op, coro)`` pairs: `op` is what the
coroutine gets back at its yield (an operation, a `CoroutineException` or
None). Each turn of the loop takes one pair from the front, runs that
coroutine till it yields again and lets the yielded operation decide where
the coroutine goes next. Between turns the proactor is polled for socket
operations that became ready and the expired timeouts are raised.

All the state lives in the scheduler and its proactor, several schedulers
can run in the same process.
"""
__all__ = ['Scheduler']
import collections
import heapq
import itertools
import sys
import time

from genloop.core import events
from genloop.core.coroutines import CoroutineInstance, CoroutineException
from genloop.core.proactors import DefaultProactor
from genloop.core.util import priority, getnow


class Scheduler(object):
    """
    Usage:

    .. sourcecode:: python

        sched = Scheduler()
        sched.add(mycoro, args=(1, 2))
        sched.run()

    * proactor - the proactor class, see :mod:`genloop.core.proactors`
    * default_priority - used by operations created with priority.DEFAULT
    * default_timeout - seconds (or timedelta) for timed operations created
      without a timeout, None for no timeout
    * proactor_resolution - seconds to block in the proactor when there's
      nothing else to wait for
    """
    def __init__(self, proactor=DefaultProactor, default_priority=priority.LAST,
                 default_timeout=None, proactor_resolution=.01):
        self.active = collections.deque()
        self.timeouts = []
        self.sigwait = {}
        self.signals = {}
        self.default_priority = default_priority
        self.default_timeout = default_timeout
        self.proactor = proactor(self, proactor_resolution)
        self.running = False
        self._ticket = itertools.count()

    def __repr__(self):
        return "<%s active:%s timeouts:%s proactor:%r>" % (
            self.__class__.__name__,
            len(self.active),
            len(self.timeouts),
            self.proactor
        )

    def add(self, coro, args=(), kwargs={}, first=False):
        """Start `coro` (a decorated coroutine, a generator function or a
        generator) with `args` and `kwargs`. Returns the instance."""
        instance = coro(*args, **kwargs) if callable(coro) else coro
        if not isinstance(instance, CoroutineInstance):
            instance = CoroutineInstance(instance)
        if first:
            self.active.appendleft((None, instance))
        else:
            self.active.append((None, instance))
        return instance

    def wake(self, pairs, first=False):
        "Queue the ``(op, coro)`` pairs, in order, at the front or the back."
        if first:
            self.active.extendleft(reversed(pairs))
        else:
            self.active.extend(pairs)

    def add_timeout(self, op):
        heapq.heappush(self.timeouts, (op.deadline, next(self._ticket), op))

    def expire_timeouts(self):
        """Raise OperationTimeout in the coroutines whose operation is past
        its deadline, unless the operation's cleanup says otherwise."""
        now = getnow()
        while self.timeouts and self.timeouts[0][0] <= now:
            expired, _, op = heapq.heappop(self.timeouts)
            coro = op.coro
            if coro is None or op.deadline is not expired or not coro.running:
                # finalized or armed again since
                continue
            if op.cleanup(self, coro):
                op.coro = None
                self.active.append((
                    CoroutineException(
                        events.OperationTimeout, events.OperationTimeout(op)),
                    coro
                ))

    def live_timeouts(self):
        "Drop the disarmed entries from the top of the heap, True if any is left."
        while self.timeouts:
            expires, _, op = self.timeouts[0]
            if op.coro is not None and op.deadline is expires and op.coro.running:
                return True
            heapq.heappop(self.timeouts)
        return False

    def next_delay(self):
        "Seconds till the next deadline, 0 if there's work, None if nothing."
        if self.active:
            return 0
        if self.timeouts:
            return max((self.timeouts[0][0] - getnow()).total_seconds(), 0)
        return None

    def dispatch(self, yielded, coro):
        "Let the operation `coro` yielded decide what runs next."
        if yielded is None:
            self.active.append((None, coro))
            return None, None
        if not hasattr(yielded, 'process'):
            error = TypeError("%r yielded %r, expected an operation" % (coro, yielded))
            return CoroutineException(TypeError, error), coro
        try:
            return yielded.process(self, coro) or (None, None)
        except Exception:
            if isinstance(yielded, events.TimedOperation):
                yielded.coro = None
            return CoroutineException(*sys.exc_info()), coro

    def run_pair(self, op, coro):
        while coro is not None:
            op, coro = self.dispatch(coro.resume(op, self), coro)

    def iter_run(self):
        """
        The main loop as a generator, one turn per iteration. Useful to
        interleave it with some other main loop.
        """
        self.running = True
        try:
            while self.running and (self.active or self.proactor or self.live_timeouts()):
                if self.active:
                    self.run_pair(*self.active.popleft())
                if self.proactor:
                    self.proactor.poll(self.next_delay())
                elif not self.active and self.live_timeouts():
                    time.sleep(self.next_delay())
                if self.timeouts:
                    self.expire_timeouts()
                yield
        finally:
            self.running = False

    def run(self):
        """Run till there's nothing left to do: no active coroutines, no
        pending socket operations, no timeouts. Or till `stop` is called."""
        for _ in self.iter_run():
            pass

    def stop(self):
        self.running = False

    def close(self):
        "Release the proactor (its selector and pending operations)."
        self.proactor.close()
