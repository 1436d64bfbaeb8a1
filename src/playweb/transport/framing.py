"""gRPC-Web framing for a single unary message.

Request body
    flag (0x00), length (u32 big-endian), message

Response body
    flag (0x00), length (u32 big-endian), message
    [flag (0x80), length (u32 big-endian), trailer text]

The trailer text is a sequence of ``key: value`` lines carrying the gRPC
status. A response with no body at all is legal when the status arrives out
of band, as HTTP headers.
"""

from __future__ import annotations

import re
import struct
from typing import Dict, Mapping, Optional

from .base import FramingError, RpcError


HEADER_LENGTH = 5
DATA_FLAG = 0x00
TRAILER_FLAG = 0x80
COMPRESSED_FLAG = 0x01

_LENGTH = struct.Struct(">I")
_STATUS_LINE = re.compile(r"grpc-status:\s*(\d+)")
_MESSAGE_LINE = re.compile(r"grpc-message:\s*([^\r\n]+)")


def encode(payload: bytes) -> bytes:
    """Wrap one serialized message in an uncompressed data frame."""

    payload = bytes(payload)
    return bytes((DATA_FLAG,)) + _LENGTH.pack(len(payload)) + payload


def decode(data: bytes, status: Optional[Mapping[str, str]] = None) -> bytes:
    """Return the message carried by a response body.

    *status* is the HTTP header mapping of the response, consulted only for
    an empty body, where the gRPC status travels as ``grpc-status`` and
    ``grpc-message`` headers instead of a trailer frame.
    """

    data = bytes(data)
    total = len(data)

    if total < HEADER_LENGTH:
        if total == 0:
            return _empty(status)
        raise FramingError(
            f"Invalid gRPC-Web response: too short (got {total} bytes, need at least {HEADER_LENGTH})"
        )

    if data[0] == TRAILER_FLAG:
        # Trailers-only response: the status with no message before it.
        _check(_trailers(data, 0))
        return b""

    if data[0] & COMPRESSED_FLAG:
        raise FramingError("Compressed gRPC-Web payloads are not supported")
    if data[0] != DATA_FLAG:
        raise FramingError(f"Invalid gRPC-Web response: unexpected frame flag 0x{data[0]:02x}")

    (length,) = _LENGTH.unpack_from(data, 1)
    end = HEADER_LENGTH + length
    if end > total:
        raise FramingError(
            f"Invalid gRPC-Web response: message length exceeds payload ({length} bytes declared, {total - HEADER_LENGTH} available)"
        )

    message = data[HEADER_LENGTH:end]

    if end < total:
        if data[end] != TRAILER_FLAG:
            raise FramingError(
                f"Invalid gRPC-Web response: unexpected frame flag 0x{data[end]:02x} after the message"
            )
        _check(_trailers(data, end))

    return message


def parse_trailers(text: str) -> Dict[str, str]:
    """Parse ``key: value`` trailer lines into a dictionary with lowercase keys."""

    trailers = dict()
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        trailers[key.strip().lower()] = value.strip()
    return trailers


def _trailers(data: bytes, start: int) -> Dict[str, str]:
    total = len(data)
    if total < start + HEADER_LENGTH:
        raise FramingError(
            f"Invalid gRPC-Web response: truncated trailer frame ({total - start} bytes at offset {start})"
        )

    (length,) = _LENGTH.unpack_from(data, start + 1)
    end = start + HEADER_LENGTH + length
    if end > total:
        raise FramingError(
            f"Invalid gRPC-Web response: incomplete trailers ({length} bytes declared, {total - start - HEADER_LENGTH} available)"
        )

    text = data[start + HEADER_LENGTH:end].decode("utf-8", errors="replace")
    trailers = parse_trailers(text)

    # Some gateways emit the status inline without line breaks.
    if "grpc-status" not in trailers:
        match = _STATUS_LINE.search(text)
        if match:
            trailers["grpc-status"] = match.group(1)
            match = _MESSAGE_LINE.search(text)
            if match:
                trailers["grpc-message"] = match.group(1)

    return trailers


def _check(trailers: Mapping[str, str]) -> None:
    code = trailers.get("grpc-status")
    if code is not None and code != "0":
        raise RpcError(code, trailers.get("grpc-message"))


def _header(headers: Optional[Mapping[str, str]], name: str) -> Optional[str]:
    if headers is None:
        return None

    value = headers.get(name)
    if value is not None:
        return value

    # Plain dictionaries are not case-insensitive the way httpx.Headers is.
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _empty(headers: Optional[Mapping[str, str]]) -> bytes:
    code = _header(headers, "grpc-status")
    if code is None:
        raise FramingError(
            "Invalid gRPC-Web response: empty response (0 bytes). This usually "
            "indicates an authentication failure - check your session ID."
        )

    code = code.strip()
    if code != "0":
        raise RpcError(code, _header(headers, "grpc-message"))

    return b""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
