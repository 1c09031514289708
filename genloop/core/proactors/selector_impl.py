import selectors

from .base import ProactorBase


class SelectorProactor(ProactorBase):
    def __init__(self, scheduler, resolution):
        super(SelectorProactor, self).__init__(scheduler, resolution)
        self.selector = selectors.DefaultSelector()

    def register(self, op):
        events = selectors.EVENT_READ if op.readable else selectors.EVENT_WRITE
        self.selector.register(op.sock, events, op)

    def unregister(self, op):
        self.selector.unregister(op.sock)

    def wait(self, timeout):
        return [key.data for key, _ in self.selector.select(timeout)]

    def close(self):
        super(SelectorProactor, self).close()
        self.selector.close()
