""" Python client for the Battlefield Portal WebPlay service. This includes
    the gRPC-Web transport used to fetch and update play elements, a
    copy-on-write editor for the fetched documents, and the translation of
    declarative experience configurations into those edits.
"""

# Utility components.

from . import json
from . import errors
from . import clone
from . import document

# Submodules used by multiple other components. The transport goes first,
# the protocol layer imports its error classes.

from . import config
from . import transport
from . import protocol
home = config.directory

# Primary public-facing interfaces.

from . import categories
from . import experience
from . import loader
from . import log
from . import mutators
from . import report
from . import rotation

from .errors import PlayWebError
from .document import (
    AttachmentType,
    BalancingMethod,
    CapacityType,
    ProcessingStatus,
    PublishState,
    RotationBehavior,
)
from .modifier import PlayElementModifier
from .mutators import Mutators, MutatorCategories, mutator, sparse_mutator
from .rotation import MapRotationBuilder, create_teams
from .transport.client import WebPlayClient

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
