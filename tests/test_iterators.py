__doc_all__ = []

import doctest
import itertools
import sys
import unittest

from genloop import iterators
from genloop.iterators import *


class IteratorProtocolTest(unittest.TestCase):
    def test_countdown(self):
        it = CountDown(3)
        self.assertIs(iter(it), it)
        self.assertEqual(list(it), [3, 2, 1])
        # exhausted for good
        self.assertEqual(list(it), [])
        self.assertRaises(StopIteration, next, it)

    def test_countdown_empty(self):
        self.assertEqual(list(CountDown(0)), [])
        self.assertEqual(list(CountDown(-5)), [])

    def test_sequence_iterator(self):
        self.assertEqual(list(SequenceIterator('abc')), ['a', 'b', 'c'])
        self.assertEqual(list(SequenceIterator([])), [])
        it = SequenceIterator([1])
        self.assertEqual(next(it), 1)
        self.assertRaises(StopIteration, next, it)
        self.assertRaises(StopIteration, next, it)

    def test_for_loop_protocol(self):
        seen = []
        for value in CountDown(2):
            seen.append(value)
        self.assertEqual(seen, [2, 1])


class GeneratorTest(unittest.TestCase):
    def test_fibonacci(self):
        self.assertEqual(list(itertools.islice(fibonacci(), 10)),
                         [0, 1, 1, 2, 3, 5, 8, 13, 21, 34])

    def test_fibonacci_limit(self):
        self.assertEqual(list(fibonacci(10)), [0, 1, 1, 2, 3, 5, 8])
        self.assertEqual(list(fibonacci(0)), [0])
        self.assertEqual(list(fibonacci(-1)), [])

    def test_generator_is_lazy(self):
        trace = []
        def numbers():
            trace.append('started')
            yield 1
            trace.append('resumed')
            yield 2
            trace.append('done')
        gen = numbers()
        self.assertEqual(generator_state(gen), 'GEN_CREATED')
        self.assertEqual(trace, [])
        self.assertEqual(next(gen), 1)
        self.assertEqual(generator_state(gen), 'GEN_SUSPENDED')
        self.assertEqual(trace, ['started'])
        self.assertEqual(list(gen), [2])
        self.assertEqual(trace, ['started', 'resumed', 'done'])
        self.assertEqual(generator_state(gen), 'GEN_CLOSED')

    def test_return_value(self):
        def gen():
            yield 1
            return 'result'
        g = gen()
        next(g)
        with self.assertRaises(StopIteration) as ctx:
            next(g)
        self.assertEqual(ctx.exception.value, 'result')

    def test_pipeline(self):
        lines = ["ok 1\n", "ERROR disk\n", "ok 2\n", "ERROR net\n"]
        def strip_lines(it):
            return (line.rstrip('\n') for line in it)
        result = pipeline(lines, strip_lines, lambda it: follow_lines(it, '^ERROR'))
        self.assertEqual(list(result), ['ERROR disk', 'ERROR net'])

    def test_pipeline_is_lazy(self):
        pulled = []
        def source():
            for i in range(100):
                pulled.append(i)
                yield i
        doubled = pipeline(source(), lambda it: (i * 2 for i in it))
        self.assertEqual(list(itertools.islice(doubled, 3)), [0, 2, 4])
        self.assertEqual(pulled, [0, 1, 2])

    def test_pipeline_without_stages(self):
        self.assertEqual(list(pipeline([1, 2])), [1, 2])


class CoroutineTest(unittest.TestCase):
    def test_consumer_primes(self):
        @consumer
        def echo():
            received = None
            while True:
                received = yield received
        gen = echo()
        self.assertEqual(generator_state(gen), 'GEN_SUSPENDED')
        self.assertEqual(gen.send('x'), 'x')
        self.assertEqual(echo.__name__, 'echo')

    def test_send_to_unstarted(self):
        def gen():
            yield
        self.assertRaises(TypeError, gen().send, 1)

    def test_running_average(self):
        avg = running_average()
        self.assertEqual(avg.send(10), 10.0)
        self.assertEqual(avg.send(20), 15.0)
        self.assertEqual(avg.send(30), 20.0)

    def test_running_average_reset(self):
        avg = running_average()
        avg.send(100)
        self.assertIsNone(avg.throw(ResetAverage))
        self.assertEqual(avg.send(4), 4.0)

    def test_throw_unhandled(self):
        avg = running_average()
        self.assertRaises(KeyError, avg.throw, KeyError('boom'))
        self.assertEqual(generator_state(avg), 'GEN_CLOSED')

    def test_close(self):
        avg = running_average()
        avg.close()
        self.assertEqual(generator_state(avg), 'GEN_CLOSED')
        self.assertRaises(StopIteration, avg.send, 1)
        # closing again is fine
        avg.close()

    def test_close_runs_finally(self):
        trace = []
        @consumer
        def guarded():
            try:
                while True:
                    yield
            finally:
                trace.append('cleanup')
        gen = guarded()
        gen.close()
        self.assertEqual(trace, ['cleanup'])

    def test_yield_in_finally_on_close(self):
        @consumer
        def stubborn():
            try:
                yield
            finally:
                yield
        self.assertRaises(RuntimeError, stubborn().close)

    def test_broadcast(self):
        evens, all_items = [], []
        @consumer
        def only_even(target):
            try:
                while True:
                    item = yield
                    if item % 2 == 0:
                        target.send(item)
            finally:
                target.close()
        count = drive(range(5), broadcast([only_even(sink(evens)), sink(all_items)]))
        self.assertEqual(count, 5)
        self.assertEqual(evens, [0, 2, 4])
        self.assertEqual(all_items, [0, 1, 2, 3, 4])

    def test_drive_closes_target(self):
        collected = []
        target = sink(collected)
        drive('ab', target)
        self.assertEqual(collected, ['a', 'b'])
        self.assertEqual(generator_state(target), 'GEN_CLOSED')

    def test_drive_closes_on_error(self):
        target = sink([])
        def bad_source():
            yield 1
            raise ValueError('bad')
        self.assertRaises(ValueError, drive, bad_source(), target)
        self.assertEqual(generator_state(target), 'GEN_CLOSED')


class DocTest(unittest.TestCase):
    def test_doctests(self):
        failures, tests = doctest.testmod(iterators)
        self.assertTrue(tests)
        self.assertEqual(failures, 0)


if __name__ == "__main__":
    sys.argv.insert(1, '-v')
    unittest.main()
