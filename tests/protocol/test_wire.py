import pytest

from playweb.protocol import wire


def test_varint():

    assert wire.varint(0) == b'\x00'
    assert wire.varint(1) == b'\x01'
    assert wire.varint(127) == b'\x7f'
    assert wire.varint(128) == b'\x80\x01'
    assert wire.varint(300) == b'\xac\x02'

    with pytest.raises(ValueError):
        wire.varint(-1)


def test_get_request():

    encoded = wire.encode_get_request('abc')
    assert encoded == b'\x0a\x03abc'

    encoded = wire.encode_get_request('abc', include_denied=True)
    assert encoded == b'\x0a\x03abc\x10\x01'


def test_false_is_omitted():
    """ A false include_denied is not written at all; the request is strictly
        shorter than the true one, and carries no field 2 tag.
    """

    short = wire.encode_get_request('play-element-id', False)
    long = wire.encode_get_request('play-element-id', True)

    assert len(short) < len(long)
    assert b'\x10' not in short
    assert long.startswith(short)


def test_multibyte_identifier():

    identifier = 'é' * 70
    encoded = wire.encode_get_request(identifier)

    # 140 bytes of UTF-8 needs a two byte length.
    assert encoded[:3] == b'\x0a\x8c\x01'
    assert encoded[3:].decode('utf-8') == identifier


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
