"""
Coroutine instances: a generator (or a plain function) driven by the
scheduler, one yield at a time.
"""
__all__ = [
    'coro', 'coroutine', 'Coroutine', 'CoroutineInstance',
    'CoroutineException', 'debug_coroutine'
]

import functools
import inspect
import sys
import traceback

import structlog

from genloop.core import events
from genloop.core.util import priority

logger = structlog.get_logger()

NEW, STARTED, COMPLETED, FAILED = range(4)
STATE_NAMES = "NEW", "STARTED", "COMPLETED", "FAILED"


class CoroutineException(Exception):
    """An exception on its way to the coroutine that has to raise it, as
    ``(type, value[, traceback])``."""

    @property
    def value(self):
        return self.args[1]

    def __str__(self):
        return "".join(traceback.format_exception_only(*self.args[:2])).strip()


def is_generator(obj):
    return inspect.isgenerator(obj) or \
        hasattr(obj, 'send') and hasattr(obj, 'throw')


class CoroutineInstance(events.Operation):
    """
    A coroutine as the scheduler sees it.

    It's also an operation: yielding an instance that hasn't started yet
    calls it, the caller gets its return value or its exception. When it
    finishes the instance resumes its caller and the coroutines that
    `events.Join` it.
    """
    __slots__ = [
        'name', 'target', 'gen', 'state', 'caller', 'waiters', 'result',
        'exception', 'debug', '__weakref__'
    ]

    def __init__(self, func, *args, **kwargs):
        super(CoroutineInstance, self).__init__(prio=priority.FIRST)
        if is_generator(func):
            self.gen, self.target, self.state = func, None, STARTED
        elif callable(func):
            self.gen, self.target, self.state = None, (func, args, kwargs), NEW
        else:
            raise ValueError("Bad generator: %r" % (func,))
        self.name = getattr(func, '__name__', func.__class__.__name__)
        self.caller = None
        self.waiters = []
        self.result = None
        self.exception = None
        self.debug = False

    @property
    def running(self):
        return self.state in (NEW, STARTED)

    def add_waiter(self, coro, op):
        assert self.running
        assert not any(waiter is coro for _, waiter in self.waiters), \
            "%r already waits on %r" % (coro, self)
        self.waiters.append((op, coro))

    def remove_waiter(self, coro, op):
        if (op, coro) in self.waiters:
            self.waiters.remove((op, coro))
            return True
        return False

    def process(self, sched, coro):
        if coro is self:
            assert not self.running, "%r yielded itself" % self
            return self.complete(sched)
        if self.state != NEW:
            raise RuntimeError(
                "%r is already running, use events.Join to wait for it" % self)
        self.caller = coro
        self.debug = self.debug or coro.debug
        return None, self

    def complete(self, sched):
        """The coroutine finished: hand the outcome to the caller, or to the
        first joiner when nobody called it. Returns the pair to run next."""
        waiters, self.waiters = self.waiters, []
        caller, self.caller = self.caller, None
        if caller is not None:
            if self.exception:
                resume = CoroutineException(*self.exception), caller
            else:
                resume = self, caller
        elif waiters:
            resume = waiters.pop(0)
        else:
            resume = None
        sched.wake(waiters)
        return resume

    def finalize(self, sched):
        return self.result

    def resume(self, op, sched):
        """
        Run till the next yield.

        `op` is the operation the coroutine was suspended on (what its
        `finalize` returns is sent in), a `CoroutineException` (raised at the
        yield) or None. Returns what the coroutine yielded, or the instance
        itself once it's done.
        """
        assert self.running, "%r resumed with %r" % (self, op)
        if self.debug:
            logger.debug("coroutine.step", coroutine=repr(self), op=repr(op))
        try:
            if self.state == NEW:
                func, args, kwargs = self.target
                self.target = None
                result = func(*args, **kwargs)
                if not is_generator(result):
                    self.state = COMPLETED
                    self.result = result
                    return self
                self.gen = result
                self.state = STARTED
                yielded = self.gen.send(None)
            elif isinstance(op, CoroutineException):
                yielded = self.gen.throw(op.value)
            else:
                yielded = self.gen.send(
                    None if op is None else op.finalize(sched))
        except StopIteration as exc:
            self.state = COMPLETED
            self.result = exc.value
            return self
        except (KeyboardInterrupt, SystemExit, GeneratorExit):
            raise
        except Exception:
            self.state = FAILED
            self.exception = sys.exc_info()
            if self.caller is None:
                self.handle_error(op)
            return self
        if self.debug:
            logger.debug("coroutine.yields", coroutine=repr(self), op=repr(yielded))
        return yielded

    def handle_error(self, op):
        "Nobody will see the exception, log it."
        logger.error(
            "coroutine.killed",
            coroutine=repr(self),
            last_op=repr(op),
            exc_info=self.exception,
        )

    def __repr__(self):
        return "<%s %s at 0x%X %s>" % (
            self.__class__.__name__, self.name, id(self), STATE_NAMES[self.state])


class Coroutine(object):
    """
    Decorator for generator functions (plain functions work too):

    .. sourcecode:: python

        @coroutine
        def worker(x):
            result = yield events.Sleep(1)
            return x

    Calling the decorated function gives a `CoroutineInstance`, ready to be
    added in a scheduler or yielded from another coroutine.
    """
    def __init__(self, func, factory=CoroutineInstance):
        self.wrapped_func = func
        self.factory = factory
        functools.update_wrapper(self, func)

    def __get__(self, instance, owner):
        # methods: bind the function, keep the factory
        if instance is None:
            return self
        return self.__class__(self.wrapped_func.__get__(instance, owner), self.factory)

    def __call__(self, *args, **kwargs):
        return self.factory(self.wrapped_func, *args, **kwargs)

    def __repr__(self):
        return "<%s %r>" % (self.__class__.__name__, self.wrapped_func)

coro = coroutine = Coroutine


def _debug_instance(func, *args, **kwargs):
    instance = CoroutineInstance(func, *args, **kwargs)
    instance.debug = True
    return instance


def debug_coroutine(func):
    "Like `coroutine`, but every step is logged at debug level."
    return Coroutine(func, _debug_instance)
