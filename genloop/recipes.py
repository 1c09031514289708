"""
itertools recipes.

Slicing an iterator (`take`, `nth`), splitting one with `tee` (`window`,
`pairwise`) and run-length encoding with `groupby` (`compress`,
`decompress` and the textual `compress_text`, `decompress_text`).
"""
__all__ = [
    'RunLengthError', 'take', 'nth', 'window', 'pairwise',
    'compress', 'decompress', 'compress_text', 'decompress_text'
]
import itertools
import re

_TEXT_RUN = re.compile(r'(\d+)(\D)', re.S)


class RunLengthError(ValueError):
    "Raised for malformed run-length encoded data."


def take(n, iterable):
    "The first `n` items as a list."
    if n < 0:
        raise ValueError("take() needs a non negative count, got %r" % (n,))
    return list(itertools.islice(iterable, n))


def nth(iterable, n, default=None):
    "The `n`-th item (counting from 0) or `default`."
    return next(itertools.islice(iterable, n, None), default)


def window(iterable, size=2):
    """
    Sliding windows of `size` items as tuples:

    >>> list(window('abcd', 3))
    [('a', 'b', 'c'), ('b', 'c', 'd')]
    """
    if size < 1:
        raise ValueError("window() needs a size of at least 1, got %r" % (size,))
    iterators = itertools.tee(iterable, size)
    for skip, iterator in enumerate(iterators):
        # advance each copy by its position, a short input empties them
        next(itertools.islice(iterator, skip, skip), None)
    return zip(*iterators)


def pairwise(iterable):
    "s -> (s0, s1), (s1, s2), (s2, s3), ..."
    return window(iterable, 2)


def compress(data):
    """
    Run-length encode `data` in a list of (count, item) pairs:

    >>> compress('aaabccdddd')
    [(3, 'a'), (1, 'b'), (2, 'c'), (4, 'd')]

    Works for any iterable of items comparable with ``==``.
    """
    return [(sum(1 for _ in group), item) for item, group in itertools.groupby(data)]


def _expand(pairs):
    for pair in pairs:
        try:
            count, item = pair
        except (TypeError, ValueError):
            raise RunLengthError("Expected a (count, item) pair, got %r" % (pair,))
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise RunLengthError("Bad run length %r for %r" % (count, item))
        yield itertools.repeat(item, count)


def decompress(pairs):
    """
    The reverse of `compress`, lazily:

    >>> ''.join(decompress([(3, 'a'), (1, 'b')]))
    'aaab'
    """
    return itertools.chain.from_iterable(_expand(pairs))


def compress_text(text):
    """
    Textual form of `compress`:

    >>> compress_text('aaabccdddd')
    '3a1b2c4d'

    Digits in the text can't be told apart from the counts so they are
    refused.
    """
    if not isinstance(text, str):
        raise TypeError("compress_text() needs a str, got %s" % type(text).__name__)
    if any(char.isdigit() for char in text):
        raise RunLengthError("Can't run-length encode text with digits: %r" % text)
    return ''.join('%d%s' % pair for pair in compress(text))


def decompress_text(encoded):
    """
    The reverse of `compress_text`:

    >>> decompress_text('3a1b2c4d')
    'aaabccdddd'
    """
    if not isinstance(encoded, str):
        raise TypeError("decompress_text() needs a str, got %s" % type(encoded).__name__)
    pairs = []
    position = 0
    for match in _TEXT_RUN.finditer(encoded):
        if match.start() != position:
            break
        pairs.append((int(match.group(1)), match.group(2)))
        position = match.end()
    if position != len(encoded):
        raise RunLengthError("Malformed run-length text at %s: %r" % (
            position, encoded[position:position + 10]))
    return ''.join(decompress(pairs))
