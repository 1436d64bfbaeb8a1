"""Schema catalog: descriptor-driven conversion between documents and messages.

The message definitions are not part of this package. They are read at
runtime from a compiled descriptor set, as produced by::

    protoc --include_imports --descriptor_set_out=battlefield_portal.desc \\
        battlefield_portal.proto

Documents on this side of the catalog are plain dictionaries keyed by the
schema's field names. The conversion rules mirror what the service's own web
client does:

- enumerations are integers (names are accepted on the way in)
- 64-bit integers are strings (integers are accepted on the way in)
- bytes fields are :class:`bytes`
- ``google.protobuf`` wrapper messages collapse to their value
- unset message fields are omitted, unset oneof members are omitted

The catalog is loaded at most once per process; see :func:`load`.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool
from google.protobuf import message_factory
from google.protobuf.descriptor import FieldDescriptor
from google.protobuf.message import DecodeError

from . import fields
from ..transport.base import SchemaError


logger = logging.getLogger(__name__)

_WRAPPERS = frozenset((
    "google.protobuf.DoubleValue",
    "google.protobuf.FloatValue",
    "google.protobuf.Int64Value",
    "google.protobuf.UInt64Value",
    "google.protobuf.Int32Value",
    "google.protobuf.UInt32Value",
    "google.protobuf.BoolValue",
    "google.protobuf.StringValue",
    "google.protobuf.BytesValue",
))

_LONGS = frozenset((
    FieldDescriptor.TYPE_INT64,
    FieldDescriptor.TYPE_UINT64,
    FieldDescriptor.TYPE_SINT64,
    FieldDescriptor.TYPE_FIXED64,
    FieldDescriptor.TYPE_SFIXED64,
))

_INTEGERS = frozenset((
    FieldDescriptor.TYPE_INT32,
    FieldDescriptor.TYPE_UINT32,
    FieldDescriptor.TYPE_SINT32,
    FieldDescriptor.TYPE_FIXED32,
    FieldDescriptor.TYPE_SFIXED32,
)) | _LONGS

_FLOATS = frozenset((
    FieldDescriptor.TYPE_DOUBLE,
    FieldDescriptor.TYPE_FLOAT,
))


class MessageType(ABC):
    """ One message type in a :class:`SchemaCatalog`. Implementations convert
        between plain documents and the serialized form.
    """

    name: str

    @abstractmethod
    def verify(self, obj: Mapping[str, Any]) -> Optional[str]:
        """Return a description of the first problem with *obj*, or None."""

    @abstractmethod
    def encode(self, obj: Mapping[str, Any]) -> bytes:
        """Serialize *obj*; raise :class:`SchemaError` if it does not conform."""

    @abstractmethod
    def decode(self, data: bytes) -> Any:
        """Parse *data* into a message object."""

    @abstractmethod
    def to_plain(self, message: Any, options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Convert a decoded message into a plain document."""


class SchemaCatalog(ABC):

    @abstractmethod
    def lookup(self, name: str) -> MessageType:
        """Return the message type with the fully-qualified *name*."""


class ProtobufMessageType(MessageType):

    def __init__(self, descriptor):
        self.descriptor = descriptor
        self.name = descriptor.full_name
        self.cls = message_factory.GetMessageClass(descriptor)


    def create(self, obj):
        message = self.cls()
        _fill(message, obj, self.descriptor.name)
        return message


    def verify(self, obj):
        try:
            self.create(obj)
        except SchemaError as e:
            return str(e)
        return None


    def encode(self, obj):
        return self.create(obj).SerializeToString()


    def decode(self, data):
        try:
            return self.cls.FromString(bytes(data))
        except DecodeError as e:
            raise SchemaError(f"cannot decode {self.name}: {e}") from e


    def to_plain(self, message, options=None):
        if options is None:
            options = fields.DECODE_OPTIONS
        return _to_plain(message, options)

# end of class ProtobufMessageType



class ProtobufCatalog(SchemaCatalog):
    """ :class:`SchemaCatalog` backed by the protobuf runtime. *descriptors* is
        a :class:`descriptor_pb2.FileDescriptorSet`, or its serialized bytes.
        Files must appear after their dependencies, which is the order
        ``protoc --include_imports`` writes them in.
    """

    def __init__(self, descriptors):
        if isinstance(descriptors, (bytes, bytearray, memoryview)):
            parsed = descriptor_pb2.FileDescriptorSet()
            try:
                parsed.ParseFromString(bytes(descriptors))
            except DecodeError as e:
                raise SchemaError(f"not a FileDescriptorSet: {e}") from e
            descriptors = parsed

        self.pool = descriptor_pool.DescriptorPool()
        for file in descriptors.file:
            self.pool.AddSerializedFile(file.SerializeToString())

        self.types = dict()


    @classmethod
    def from_file(cls, path):
        with open(path, "rb") as file:
            contents = file.read()

        logger.debug("Read %d byte descriptor set from %s", len(contents), path)
        return cls(contents)


    def lookup(self, name):
        try:
            return self.types[name]
        except KeyError:
            pass

        try:
            descriptor = self.pool.FindMessageTypeByName(name)
        except KeyError:
            raise SchemaError(f"no such message type: {name}")

        message_type = ProtobufMessageType(descriptor)
        self.types[name] = message_type
        return message_type

# end of class ProtobufCatalog



_task = None

async def load(path=None) -> SchemaCatalog:
    """ Return the process-wide :class:`ProtobufCatalog`, reading it from
        *path* (default :func:`playweb.config.schema`) on first use.
        Concurrent first callers share a single read and receive the same
        catalog; *path* is ignored once a load is under way or complete. A
        failed load is forgotten so that a later call can try again.
    """

    global _task

    if _task is None:
        if path is None:
            from .. import config
            path = config.schema()

        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(None, ProtobufCatalog.from_file, path)
        _task = asyncio.ensure_future(future)

    task = _task

    try:
        # Cancelling one caller leaves the shared load running.
        return await asyncio.shield(task)
    except Exception:
        if _task is task:
            _task = None
        raise



def reset():
    """Forget the memoized catalog; the next :func:`load` reads it again."""

    global _task
    _task = None



def _repeated(field):
    try:
        return field.is_repeated
    except AttributeError:
        # Releases before 5.29 only have the label.
        return field.label == FieldDescriptor.LABEL_REPEATED


def _is_map(field):
    return field.message_type is not None and field.message_type.GetOptions().map_entry


def _wrapped(descriptor):
    """ True for message types that carry a single field named ``value``,
        which a plain value may stand in for on the way in.
    """

    if descriptor.full_name in _WRAPPERS:
        return True
    return len(descriptor.fields) == 1 and descriptor.fields[0].name == "value"


def _to_plain(message, options):
    plain = dict()
    defaults = options.get("defaults", False)

    if defaults:
        present = message.DESCRIPTOR.fields
    else:
        present = [field for field, value in message.ListFields()]

    for field in present:
        if _repeated(field):
            value = getattr(message, field.name)
            if _is_map(field):
                value_field = field.message_type.fields_by_name["value"]
                plain[field.name] = {key: _value_to_plain(value_field, item, options) for key,item in value.items()}
            else:
                plain[field.name] = [_value_to_plain(field, item, options) for item in value]
            continue

        if field.message_type is not None or field.containing_oneof is not None:
            if not message.HasField(field.name):
                continue

        plain[field.name] = _value_to_plain(field, getattr(message, field.name), options)

    return plain


def _value_to_plain(field, value, options):
    if field.type == FieldDescriptor.TYPE_MESSAGE:
        if field.message_type.full_name in _WRAPPERS:
            inner = field.message_type.fields_by_name["value"]
            return _value_to_plain(inner, value.value, options)
        return _to_plain(value, options)

    if field.type == FieldDescriptor.TYPE_ENUM:
        if options.get("enums") is str:
            enum_value = field.enum_type.values_by_number.get(value)
            if enum_value is not None:
                return enum_value.name
        return int(value)

    if field.type in _LONGS:
        if options.get("longs") is str:
            return str(value)
        return int(value)

    if field.type == FieldDescriptor.TYPE_BYTES:
        return bytes(value)

    return value


def _field(descriptor, key):
    field = descriptor.fields_by_name.get(key)
    if field is not None:
        return field

    # Accept lowerCamelCase keys as well.
    for field in descriptor.fields:
        if field.json_name == key:
            return field
    return None


def _fill(message, plain, path):
    if not isinstance(plain, Mapping):
        raise SchemaError(f"{path}: object expected")

    descriptor = message.DESCRIPTOR

    for key,value in plain.items():
        field = _field(descriptor, key)
        if field is None:
            logger.debug("Ignoring unknown field %s.%s", path, key)
            continue

        if value is None:
            continue

        where = f"{path}.{field.name}"

        if _is_map(field):
            if not isinstance(value, Mapping):
                raise SchemaError(f"{where}: object expected")
            container = getattr(message, field.name)
            value_field = field.message_type.fields_by_name["value"]
            for map_key,item in value.items():
                if value_field.message_type is not None:
                    _fill_message(container[map_key], value_field, item, f"{where}[{map_key}]")
                else:
                    _assign(container.__setitem__, map_key, value_field, item, f"{where}[{map_key}]")
        elif _repeated(field):
            if isinstance(value, (str, bytes, bytearray, memoryview, Mapping)):
                raise SchemaError(f"{where}: array expected")
            container = getattr(message, field.name)
            for index,item in enumerate(value):
                if item is None:
                    continue
                if field.message_type is not None:
                    _fill_message(container.add(), field, item, f"{where}[{index}]")
                else:
                    try:
                        container.append(_scalar(field, item, f"{where}[{index}]"))
                    except (TypeError, ValueError) as e:
                        raise SchemaError(f"{where}[{index}]: {e}") from e
        elif field.message_type is not None:
            _fill_message(getattr(message, field.name), field, value, where)
        else:
            _assign(functools.partial(setattr, message), field.name, field, value, where)


def _fill_message(message, field, value, path):
    if not isinstance(value, Mapping) and _wrapped(field.message_type):
        value = {"value": value}

    _fill(message, value, path)
    message.SetInParent()


def _assign(setter, key, field, value, path):
    converted = _scalar(field, value, path)
    try:
        setter(key, converted)
    except (TypeError, ValueError) as e:
        raise SchemaError(f"{path}: {e}") from e


def _scalar(field, value, path):
    kind = field.type

    if kind == FieldDescriptor.TYPE_ENUM:
        if isinstance(value, str):
            enum_value = field.enum_type.values_by_name.get(value)
            if enum_value is None:
                raise SchemaError(f"{path}: enum value expected, got {value!r}")
            return enum_value.number
        if isinstance(value, bool) or not isinstance(value, int):
            raise SchemaError(f"{path}: enum value expected")
        return int(value)

    if kind in _INTEGERS:
        if isinstance(value, str) and kind in _LONGS:
            try:
                return int(value)
            except ValueError:
                raise SchemaError(f"{path}: integer|Long expected, got {value!r}")
        if isinstance(value, bool) or not isinstance(value, int):
            raise SchemaError(f"{path}: integer expected")
        return value

    if kind in _FLOATS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SchemaError(f"{path}: number expected")
        return float(value)

    if kind == FieldDescriptor.TYPE_BOOL:
        if not isinstance(value, bool):
            raise SchemaError(f"{path}: boolean expected")
        return value

    if kind == FieldDescriptor.TYPE_STRING:
        if not isinstance(value, str):
            raise SchemaError(f"{path}: string expected")
        return value

    if kind == FieldDescriptor.TYPE_BYTES:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise SchemaError(f"{path}: buffer expected")
        return bytes(value)

    raise SchemaError(f"{path}: unsupported field type {kind}")


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
