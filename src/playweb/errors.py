""" Exceptions raised by the document editing layer. Transport-level failures
    live in :mod:`playweb.transport.base`; both share :class:`PlayWebError`
    as a common base so callers can catch everything from this package in
    one place.
"""


class PlayWebError(Exception):
    """Base class for all playweb errors."""


class PreconditionError(PlayWebError):
    """ An edit could not be applied to the working document. These are always
        raised before any network traffic, and are never retried.
    """


class MissingSubstructureError(PreconditionError):
    """The document lacks its play element or its design."""


class AttachmentNotFoundError(PreconditionError, LookupError):
    """No attachment of the requested kind exists in the design."""


class InvalidPayloadError(PreconditionError, ValueError):
    """Attachment content failed validation, e.g. unparseable JSON."""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
