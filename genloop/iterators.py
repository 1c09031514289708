"""
Plain generator tools: no scheduler involved.

* iterator protocol classes: `CountDown`, `SequenceIterator`
* generators: `fibonacci`, `follow_lines`, `pipeline`
* primed coroutines (send/throw/close): `consumer`, `running_average`,
  `broadcast`, `sink`, `drive`

Pull style - each stage is a generator consuming the previous one:

.. sourcecode:: python

    lines = pipeline(open('log'), strip_lines, lambda it: follow_lines(it, 'ERROR'))
    for line in lines:
        ...

Push style - each stage is a primed coroutine sending to the next one:

.. sourcecode:: python

    errors, warnings = [], []
    drive(open('log'), broadcast([sink(errors), sink(warnings)]))
"""
__all__ = [
    'CountDown', 'SequenceIterator', 'fibonacci', 'generator_state',
    'consumer', 'ResetAverage', 'running_average', 'pipeline',
    'follow_lines', 'broadcast', 'sink', 'drive'
]
import functools
import inspect
import re


class CountDown(object):
    """Counts down from `start` to 1. An iterator is its own iterable and
    once exhausted it stays exhausted."""

    def __init__(self, start):
        self.current = start

    def __iter__(self):
        return self

    def __next__(self):
        if self.current <= 0:
            raise StopIteration
        value = self.current
        self.current -= 1
        return value

    def __repr__(self):
        return "<%s at %s>" % (self.__class__.__name__, self.current)


class SequenceIterator(object):
    """What `iter()` does for a sequence: walk the indexes till IndexError."""

    def __init__(self, seq):
        self.seq = seq
        self.index = 0

    def __iter__(self):
        return self

    def __next__(self):
        if self.seq is None:
            raise StopIteration
        try:
            value = self.seq[self.index]
        except IndexError:
            self.seq = None
            raise StopIteration
        self.index += 1
        return value


def fibonacci(limit=None):
    """Yields 0, 1, 1, 2, 3, 5, ... forever, or while the values are not
    greater than `limit`."""
    a, b = 0, 1
    while limit is None or a <= limit:
        yield a
        a, b = b, a + b


def generator_state(gen):
    "One of GEN_CREATED, GEN_RUNNING, GEN_SUSPENDED, GEN_CLOSED."
    return inspect.getgeneratorstate(gen)


def consumer(func):
    """Decorator for generator functions that are used as coroutines: the
    returned generator is already advanced to its first `yield`, ready for
    `send`."""
    @functools.wraps(func)
    def start(*args, **kwargs):
        gen = func(*args, **kwargs)
        next(gen)
        return gen
    return start


class ResetAverage(Exception):
    "Thrown in `running_average` to start over."


@consumer
def running_average():
    """
    >>> avg = running_average()
    >>> avg.send(10)
    10.0
    >>> avg.send(20)
    15.0
    >>> avg.throw(ResetAverage)
    >>> avg.send(5)
    5.0
    >>> avg.close()
    """
    total = 0.0
    count = 0
    average = None
    while True:
        try:
            value = yield average
        except ResetAverage:
            total = 0.0
            count = 0
            average = None
            continue
        total += value
        count += 1
        average = total / count


def pipeline(source, *stages):
    """Chain generator stages: each stage is a callable that takes an
    iterable and returns an iterable. Nothing runs till the result is
    iterated."""
    stream = iter(source)
    for stage in stages:
        stream = stage(stream)
    return stream


def follow_lines(lines, pattern):
    "Only the lines matching the `pattern` regular expression (a grep)."
    regex = re.compile(pattern)
    return (line for line in lines if regex.search(line))


@consumer
def broadcast(targets):
    "Send everything received to all the `targets` coroutines."
    targets = list(targets)
    try:
        while True:
            item = yield
            for target in targets:
                target.send(item)
    finally:
        for target in targets:
            target.close()


@consumer
def sink(collected):
    "A coroutine that appends everything it receives to `collected`."
    while True:
        collected.append((yield))


def drive(source, target):
    """Push all the items from `source` in the primed coroutine `target`,
    close it and return how many items were sent."""
    sent = 0
    try:
        for item in source:
            target.send(item)
            sent += 1
    finally:
        target.close()
    return sent
