'''
Generators, from the iterator protocol up to coroutines run by a trampoline.

* :mod:`genloop.iterators` - iterator classes, generator pipelines and
  primed coroutines (`send`/`throw`/`close`)
* :mod:`genloop.recipes` - itertools recipes
* :mod:`genloop.core` - the trampoline scheduler: coroutines yield
  operations and get their result back at the yield

::

    coroutine                  scheduler                    operation
    ---------                  ---------                    ---------
    op = ...
    yield op  ---------------> op.process(sched, coro) ---> ready now?
                                  |                          |    |
                                  |    (op, coro) <----- yes-+    |
                                  |                               no
                                  |                               |
                                  |              parked: signal, join,
                                  |              timeout or proactor
                                  |                               |
                                  |  active queue <-- later ------+
                                  v
    result <------------------ op.finalize(sched)
'''

__license__ = '''
Copyright (c) 2007, Mărieş Ionel Cristian

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
'''

__version__ = '0.3.0'

from genloop import core
from genloop import common
from genloop import iterators
from genloop import recipes
