""" Python implementation of a digest-confirmed request/acknowledgment
    handshake over UDP. This includes the wire codec, the transaction
    bookkeeping for both directions of the handshake, and a client that
    ties the pieces together.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Utility components.

from . import config
from . import json

# Submodules used by multiple other components.

from . import protocol
from . import transport
from . import session
from . import handshake

# Primary public-facing interfaces.

from . import listener
from . import processor
from .client import Client
from .handshake.transaction import Outcome, Result

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
