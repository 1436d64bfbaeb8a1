""" Structural copies of decoded documents. A fetched document is a tree of
    dictionaries and lists with binary payloads (attachment contents, compiled
    mod rules) embedded at the leaves; the editing layer must never alias the
    caller's copy, and must never degrade the binary leaves into something
    else along the way.
"""

import datetime


_temporal = (datetime.datetime, datetime.date, datetime.time)


def clone(thing):
    """ Return an independent copy of *thing*. Binary values come back as a
        distinct buffer of the same type with the same contents; dates and
        times come back as a new instance representing the same instant.
        Lists, tuples and dictionaries are cloned element by element. Any
        other value, including None, is returned as-is.
    """

    if isinstance(thing, bytes):
        # bytes(thing) would hand back the very same object.
        return bytes(bytearray(thing))

    if isinstance(thing, bytearray):
        return bytearray(thing)

    if isinstance(thing, memoryview):
        copied = memoryview(bytearray(thing.tobytes()))
        if thing.format != 'B' or thing.ndim != 1:
            copied = copied.cast(thing.format, thing.shape)
        return copied

    if isinstance(thing, _temporal):
        return thing.replace()

    if isinstance(thing, list):
        return [clone(element) for element in thing]

    if isinstance(thing, tuple):
        return tuple(clone(element) for element in thing)

    if isinstance(thing, dict):
        copied = dict()
        for key,value in thing.items():
            copied[key] = clone(value)
        return copied

    return thing



def canonical(thing):
    """ Return *thing* with every binary-like value converted to immutable
        :class:`bytes`, which is the only binary representation the schema
        serializer accepts. Containers are rebuilt; the input is not modified.
    """

    if isinstance(thing, bytes):
        return thing

    if isinstance(thing, (bytearray, memoryview)):
        return bytes(thing)

    if isinstance(thing, list):
        return [canonical(element) for element in thing]

    if isinstance(thing, tuple):
        return tuple(canonical(element) for element in thing)

    if isinstance(thing, dict):
        converted = dict()
        for key,value in thing.items():
            converted[key] = canonical(value)
        return converted

    return thing


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
