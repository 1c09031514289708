from genloop.core.coroutines import coroutine
from genloop.core.schedulers import Scheduler

@coroutine
def foo():
    print('foo')
    result = yield bar("ham")
    print(result)

@coroutine
def bar(what):
    print('bar')
    yield
    return "spam, %s and eggs" % what

sched = Scheduler()
sched.add(foo)
sched.run()
