__doc_all__ = []

import doctest
import itertools
import sys
import unittest

from genloop import recipes
from genloop.recipes import *


class SliceTest(unittest.TestCase):
    def test_take(self):
        self.assertEqual(take(3, itertools.count()), [0, 1, 2])
        self.assertEqual(take(5, 'ab'), ['a', 'b'])
        self.assertEqual(take(0, 'ab'), [])
        self.assertRaises(ValueError, take, -1, 'ab')

    def test_take_consumes(self):
        it = iter(range(10))
        take(3, it)
        self.assertEqual(next(it), 3)

    def test_nth(self):
        self.assertEqual(nth('abcd', 2), 'c')
        self.assertEqual(nth('abcd', 10), None)
        self.assertEqual(nth('abcd', 10, 'missing'), 'missing')
        self.assertEqual(nth(itertools.count(), 1000), 1000)

    def test_islice_args(self):
        self.assertEqual(list(itertools.islice('abcdefg', 2, None)), list('cdefg'))
        self.assertEqual(list(itertools.islice('abcdefg', 0, None, 2)), list('aceg'))
        self.assertRaises(ValueError, itertools.islice, 'abc', -1)


class TeeTest(unittest.TestCase):
    def test_window(self):
        self.assertEqual(list(window('abcd', 3)),
                         [('a', 'b', 'c'), ('b', 'c', 'd')])
        self.assertEqual(list(window('abc', 1)), [('a',), ('b',), ('c',)])

    def test_window_short_input(self):
        self.assertEqual(list(window('ab', 3)), [])
        self.assertEqual(list(window('', 2)), [])

    def test_window_bad_size(self):
        self.assertRaises(ValueError, window, 'abc', 0)

    def test_window_is_lazy(self):
        windows = window(itertools.count(), 2)
        self.assertEqual(next(windows), (0, 1))
        self.assertEqual(next(windows), (1, 2))

    def test_pairwise(self):
        self.assertEqual(list(pairwise([1, 2, 3])), [(1, 2), (2, 3)])
        self.assertEqual(list(pairwise([1])), [])

    def test_tee_independent(self):
        a, b = itertools.tee(iter([1, 2, 3]))
        self.assertEqual(list(a), [1, 2, 3])
        self.assertEqual(list(b), [1, 2, 3])


class RunLengthTest(unittest.TestCase):
    def test_compress(self):
        self.assertEqual(compress('aaabccdddd'),
                         [(3, 'a'), (1, 'b'), (2, 'c'), (4, 'd')])
        self.assertEqual(compress(''), [])
        self.assertEqual(compress([1, 1, 2, 1]), [(2, 1), (1, 2), (1, 1)])

    def test_decompress(self):
        self.assertEqual(''.join(decompress([(3, 'a'), (1, 'b')])), 'aaab')
        self.assertEqual(list(decompress([])), [])

    def test_decompress_is_lazy(self):
        expanded = decompress(itertools.repeat((2, 'x')))
        self.assertEqual(take(5, expanded), ['x'] * 5)

    def test_decompress_bad_pairs(self):
        for bad in ([(0, 'a')], [(-1, 'a')], [('3', 'a')], [(True, 'a')],
                    [(1.5, 'a')], [(1, 'a', 'b')], [5]):
            self.assertRaises(RunLengthError, list, decompress(bad))

    def test_compress_text(self):
        self.assertEqual(compress_text('aaabccdddd'), '3a1b2c4d')
        self.assertEqual(compress_text(''), '')
        self.assertEqual(compress_text('a' * 12), '12a')
        self.assertEqual(compress_text('  \n'), '2 1\n')

    def test_compress_text_errors(self):
        self.assertRaises(RunLengthError, compress_text, 'a1')
        self.assertRaises(TypeError, compress_text, b'aa')
        self.assertTrue(issubclass(RunLengthError, ValueError))

    def test_decompress_text(self):
        self.assertEqual(decompress_text('3a1b2c4d'), 'aaabccdddd')
        self.assertEqual(decompress_text('12a'), 'a' * 12)
        self.assertEqual(decompress_text(''), '')
        self.assertEqual(decompress_text('2 1\n'), '  \n')

    def test_decompress_text_errors(self):
        for bad in ('a', '3', '3a4', 'x3a', '0a', '3ab'):
            self.assertRaises(RunLengthError, decompress_text, bad)
        self.assertRaises(TypeError, decompress_text, None)

    def test_text_inverse(self):
        for text in ('abc', 'aaaaaaaaaaaaaaabbbbbbbbbc', 'mississippi'):
            self.assertEqual(decompress_text(compress_text(text)), text)


class DocTest(unittest.TestCase):
    def test_doctests(self):
        failures, tests = doctest.testmod(recipes)
        self.assertTrue(tests)
        self.assertEqual(failures, 0)


if __name__ == "__main__":
    sys.argv.insert(1, '-v')
    unittest.main()
