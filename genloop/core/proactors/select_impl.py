import select

from .base import ProactorBase


class SelectProactor(ProactorBase):
    "Works anywhere, fine for a handful of sockets."

    def register(self, op):
        pass

    def unregister(self, op):
        pass

    def wait(self, timeout):
        readers = [op for op in self.pending if op.readable]
        writers = [op for op in self.pending if not op.readable]
        ready_to_read, ready_to_write, _ = select.select(readers, writers, [], timeout)
        return ready_to_read + ready_to_write
