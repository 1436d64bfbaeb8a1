''' Wrapper module to select the most performant available library to handle
    the equivalent of :func:`json.loads` and :func:`json.dumps`. Experience
    configurations, localization strings and spatial data all pass through
    here.
'''

# The business about conditionally importing the libraries is intended to
# avoid importing less efficient libraries if they are not available.

msgspec = None
orjson = None
json = None

try:
    import msgspec
except ImportError:
    pass

if msgspec is None:
    try:
        import orjson
    except ImportError:
        pass

if msgspec is None and orjson is None:
    import json


# The msgspec 'encode' operation returns bytes, as does orjson.dumps. To
# maintain alignment all 'dumps' methods need to do so as well.

def json_dumps(*args, **kwargs):
    return json.dumps(*args, **kwargs).encode()

if msgspec is not None:
    encoder = msgspec.json.Encoder()
    decoder = msgspec.json.Decoder()
    dumps = encoder.encode
    loads = decoder.decode
    DecodeError = (msgspec.DecodeError, ValueError)
elif orjson is not None:
    dumps = orjson.dumps
    loads = orjson.loads
    DecodeError = (orjson.JSONDecodeError,)
else:
    dumps = json_dumps
    loads = json.loads
    DecodeError = (json.JSONDecodeError,)


def dumps_text(thing):
    """ Same as :func:`dumps`, but return a string instead of bytes; the
        attachment payloads are stored as UTF-8 text on the server side.
    """

    return dumps(thing).decode('utf-8')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
