"""A producer coroutine feeding a consumer coroutine, one value at a time,
both running in the scheduler.

.. sourcecode:: python

    @coroutine
    def consumer():
        it = yield Iterate(producer)
        while True:
            value = yield it
            if value is sentinel:
                break
            ...

    @coroutine
    def producer():
        for i in range(100):
            yield chunk(i)

The producer runs only when the consumer asks for the next value and is
suspended on each `chunk` till the next request. ``yield it.stop()`` gives up
early: `IterationStopped` is raised in the producer at the `chunk` it's
suspended on. If the producer fails, the consumer gets the exception.
"""
__all__ = ['IterationStopped', 'Iterate', 'chunk', 'sentinel']

from genloop.core import events, coroutines


class IterationStopped(Exception):
    "Raised in a producer when its consumer stops iterating."


class EndOfIteration(object):
    def __repr__(self):
        return "<end of iteration>"

sentinel = EndOfIteration()


class Producer(coroutines.CoroutineInstance):
    "The producer's instance, knows its pipe."
    __slots__ = ['pipe']

    def handle_error(self, op):
        if self.pipe.consumer is not None:
            # the consumer gets it
            return
        if issubclass(self.exception[0], IterationStopped):
            return
        super(Producer, self).handle_error(op)

    def complete(self, sched):
        pipe = self.pipe
        pipe.ended = True
        if self.exception and issubclass(self.exception[0], IterationStopped):
            self.state = coroutines.COMPLETED
            self.exception = None
        consumer, pipe.consumer = pipe.consumer, None
        if consumer is None:
            return super(Producer, self).complete(sched)
        if self.exception:
            return coroutines.CoroutineException(*self.exception), consumer
        return pipe, consumer


class Pipe(events.Operation):
    """What the consumer yields to get the next value. The value of the
    yield is the next chunk, or the sentinel once the producer is done."""
    __slots__ = ['producer', 'sentinel', 'consumer', 'data', 'parked',
                 'ended', 'stopping']

    def __init__(self, producer, sentinel):
        super(Pipe, self).__init__()
        self.producer = producer
        producer.pipe = self
        self.sentinel = sentinel
        self.consumer = None
        self.data = None
        self.parked = False
        self.ended = False
        self.stopping = False

    def stop(self):
        "``yield it.stop()`` ends the iteration, the result is the sentinel."
        self.stopping = True
        return self

    def process(self, sched, coro):
        if self.ended:
            return self, coro
        if self.stopping:
            self.ended = True
            if self.parked:
                self.parked = False
                sched.active.appendleft((
                    coroutines.CoroutineException(IterationStopped, IterationStopped()),
                    self.producer
                ))
            return self, coro
        self.consumer = coro
        self.parked = False
        return None, self.producer

    def deliver(self, value):
        "The producer yielded a chunk, returns the consumer to resume."
        self.data = value
        self.parked = True
        consumer, self.consumer = self.consumer, None
        return consumer

    def finalize(self, sched):
        if self.ended:
            return self.sentinel
        data, self.data = self.data, None
        return data

    def __repr__(self):
        return "<%s from %r ended:%s>" % (
            self.__class__.__name__, self.producer, self.ended)


class chunk(events.Operation):
    "Yielded by a producer: hand `value` to the consumer."
    __slots__ = ['value']

    def __init__(self, value):
        super(chunk, self).__init__()
        self.value = value

    def process(self, sched, coro):
        pipe = getattr(coro, 'pipe', None)
        if pipe is None:
            raise TypeError("%r yielded a chunk but it isn't iterated" % coro)
        return pipe, pipe.deliver(self.value)

    def finalize(self, sched):
        return None

    def __repr__(self):
        return "chunk(%r)" % (self.value,)


class Iterate(events.Operation):
    """
    Iterate over `coro` (a coroutine, or a plain generator function, that
    yields `chunk` instances):

    .. sourcecode:: python

        it = yield Iterate(producer, args=(), kwargs={})

    The result is the `Pipe` to yield for each value.
    """
    __slots__ = ['producer', 'args', 'kwargs', 'sentinel', 'pipe']

    def __init__(self, coro, args=(), kwargs=None, sentinel=sentinel, **kws):
        super(Iterate, self).__init__(**kws)
        self.producer = coro
        self.args = args
        self.kwargs = kwargs or {}
        self.sentinel = sentinel
        self.pipe = None

    def process(self, sched, coro):
        super(Iterate, self).process(sched, coro)
        func = getattr(self.producer, 'wrapped_func', self.producer)
        self.pipe = Pipe(Producer(func, *self.args, **self.kwargs), self.sentinel)
        return self, coro

    def finalize(self, sched):
        return self.pipe
