"""Hand-rolled protobuf encoding for GetPlayElementRequest.

The fetch request is the one message encoded without the schema catalog, so
that a document can be retrieved before (or without) a descriptor set being
available. Only the two wire types the request needs are implemented:

    wire type 0  varint
    wire type 2  length-delimited

Fields holding their zero value are omitted entirely, matching the proto3
convention the schema engine follows for every other message.
"""

from __future__ import annotations


VARINT = 0
LENGTH_DELIMITED = 2


def varint(value: int) -> bytes:
    """Encode a non-negative integer as a base-128 varint."""

    if value < 0:
        raise ValueError(f"varint cannot encode negative value {value}")

    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def tag(field_number: int, wire_type: int) -> bytes:
    return varint((field_number << 3) | wire_type)


def string_field(field_number: int, value: str) -> bytes:
    encoded = value.encode("utf-8")
    return tag(field_number, LENGTH_DELIMITED) + varint(len(encoded)) + encoded


def bool_field(field_number: int, value: bool) -> bytes:
    return tag(field_number, VARINT) + (b"\x01" if value else b"\x00")


def encode_get_request(id: str, include_denied: bool = False) -> bytes:
    """Encode ``GetPlayElementRequest {1: id, 2: include_denied}``."""

    out = bytearray()

    if id:
        out += string_field(1, id)

    # A false bool is never written, not even as a zero byte.
    if include_denied:
        out += bool_field(2, True)

    return bytes(out)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
