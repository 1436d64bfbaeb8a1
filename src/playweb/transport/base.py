"""Transport error hierarchy.

This lives outside :mod:`playweb.protocol` so the protocol layer remains
independent of how bytes reach the service.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..errors import PlayWebError


# Transport agnostic exceptions

class TransportError(PlayWebError):
    """Base class for all transport-layer errors."""


class FramingError(TransportError):
    """A response body is not a well-formed gRPC-Web frame sequence."""


class RpcError(TransportError):
    """The service answered with a non-zero gRPC status."""

    def __init__(self, code: str, message: Optional[str] = None):
        self.code = str(code)
        self.message = message or "Unknown error"
        super().__init__(f"gRPC error {self.code}: {self.message}")


class TransportHTTPError(TransportError):
    """The HTTP exchange itself failed with a non-2xx status."""

    def __init__(self, status: int, reason: str = "", body: str = ""):
        self.status = status
        self.reason = reason
        self.body = body
        super().__init__(f"gRPC-Web request failed: {status} {reason}".rstrip())


class SchemaError(TransportError):
    """A message could not be located in, or validated against, the schema."""


class ReconciliationError(TransportError):
    """Deleting stale attachments failed; the update was not submitted."""

    def __init__(self, design_id: str, attachment_ids: Sequence[str]):
        self.design_id = design_id
        self.attachment_ids = list(attachment_ids)
        super().__init__(
            f"failed to delete {len(self.attachment_ids)} attachment(s) "
            f"from design {design_id}; update not submitted"
        )


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
