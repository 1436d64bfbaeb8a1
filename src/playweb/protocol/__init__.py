from . import fields
from . import schema
from . import wire


"""
playweb Protocol Layer
======================

This package defines how play element documents become protobuf messages
and back. It knows message names and field encodings; it does not know how
the bytes reach the service.

The protocol layer MUST NOT depend on any transport implementation
(httpx, gRPC-Web framing, headers).

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

Document Editing (modifier.py, experience.py)
    Plain dictionaries keyed by schema field name

    │
    ▼
Schema Catalog (schema.py)
    Descriptor-driven conversion
    - lookup()
    - verify() / encode() / decode() / to_plain()
    Loaded once per process, shared by every caller

    │
    ▼
Minimal Encoder (wire.py)
    Hand-rolled fetch request, no catalog required

    │
    ▼
Field Vocabulary (fields.py)
    Canonical method, message and header names
    Prevents string drift across system

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Framing Layer
    Maps serialized messages <-> gRPC-Web frames

Transport Layer
    Moves bytes
    - httpx

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
