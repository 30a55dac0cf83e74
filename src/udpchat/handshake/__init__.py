"""Transaction bookkeeping and the handshake state machines."""

from . import transaction
from . import registry
from . import coordinator
from . import submit

from .transaction import Direction, InboundPhase, OutboundPhase, Outcome, Result, Transaction
from .registry import Registry
from .coordinator import Coordinator
