__doc_all__ = []

from genloop.common import *


class PrioMixIn:
    prio = priority.FIRST

class NoPrioMixIn:
    prio = priority.LAST


proactors_available = list(proactors.available)
