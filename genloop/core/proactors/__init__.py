"""
Proactors wait for sockets to become ready and complete the socket
operations suspended on them.

* `SelectorProactor` - the stdlib `selectors` module: epoll, kqueue, devpoll,
  poll or select, whichever is best on the platform
* `SelectProactor` - plain `select.select`
"""
from .selector_impl import SelectorProactor
from .select_impl import SelectProactor

available = [SelectorProactor, SelectProactor]

DefaultProactor = SelectorProactor
