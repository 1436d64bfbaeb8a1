"""Transport layer: gRPC-Web framing and the HTTP client."""

from .base import (
    TransportError,
    FramingError,
    RpcError,
    TransportHTTPError,
    SchemaError,
    ReconciliationError,
)

from . import framing
from . import client
from .client import WebPlayClient


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
