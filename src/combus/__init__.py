""" Python implementation of the DAS monitor control bus messages. This
    includes the typed messages themselves, the hierarchical document they
    are encoded into, and a publish/subscribe transport to move them.
"""

# Utility components.

from . import json
from . import weakref
from . import config
from . import document

# Submodules used by multiple other components.

from . import protocol
from . import transport

# Primary public-facing interfaces.

from .document import Document, DocumentPathError
from .protocol import Bus, Message, MessageType
from .protocol.catalogue import lookup

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
