import array
import datetime

from playweb.clone import canonical, clone


def test_containers_are_independent():

    original = {
        'list': [1, 2, {'nested': ['a', 'b']}],
        'tuple': (1, [2, 3]),
        'none': None,
        'text': 'string',
    }

    copied = clone(original)
    assert copied == original
    assert copied is not original
    assert copied['list'] is not original['list']
    assert copied['list'][2] is not original['list'][2]

    copied['list'][2]['nested'].append('c')
    copied['tuple'][1].append(4)

    assert original['list'][2]['nested'] == ['a', 'b']
    assert original['tuple'][1] == [2, 3]


def test_binary_leaves():

    original = {
        'bytes': b'\x00\x01\x02\x03',
        'bytearray': bytearray(b'\xff\xfe\xfd'),
        'memoryview': memoryview(bytearray(b'view')),
    }

    copied = clone(original)

    assert isinstance(copied['bytes'], bytes)
    assert copied['bytes'] == original['bytes']
    assert copied['bytes'] is not original['bytes']

    assert isinstance(copied['bytearray'], bytearray)
    assert copied['bytearray'] == original['bytearray']

    assert isinstance(copied['memoryview'], memoryview)
    assert copied['memoryview'].tobytes() == b'view'

    copied['bytearray'][0] = 0
    copied['memoryview'][0] = ord('x')

    assert original['bytearray'] == bytearray(b'\xff\xfe\xfd')
    assert original['memoryview'].tobytes() == b'view'


def test_typed_memoryview():

    original = memoryview(array.array('i', [1, 2]))

    copied = clone(original)
    assert copied.format == 'i'
    assert copied.shape == (2,)
    assert len(copied) == 2
    assert copied.tolist() == [1, 2]

    copied[0] = 7
    assert original.tolist() == [1, 2]

    grid = memoryview(bytearray(range(6))).cast('B', (2, 3))
    copied = clone(grid)
    assert copied.shape == (2, 3)
    assert copied.tolist() == [[0, 1, 2], [3, 4, 5]]


def test_temporal_leaves():

    when = datetime.datetime(2024, 5, 17, 12, 30, tzinfo=datetime.timezone.utc)
    original = {'created': when, 'day': when.date()}

    copied = clone(original)
    assert copied['created'] == when
    assert copied['created'].tzinfo == datetime.timezone.utc
    assert copied['day'] == datetime.date(2024, 5, 17)


def test_canonical():

    original = {
        'data': [bytearray(b'abc'), memoryview(b'def'), b'ghi'],
        'other': ('x', bytearray(b'y')),
    }

    converted = canonical(original)

    assert converted['data'] == [b'abc', b'def', b'ghi']
    for value in converted['data']:
        assert type(value) is bytes

    assert converted['other'] == ('x', b'y')
    assert type(original['data'][0]) is bytearray


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
