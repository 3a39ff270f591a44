import struct

import pytest

from matstream.enum import ByteOrder
from matstream.exceptions import UnpackException
from matstream.fields import StructField, StringField, ArrayField
from matstream.readers import get_readers
from matstream.streams import Stream


LE = get_readers(ByteOrder.LITTLE_ENDIAN)
BE = get_readers(ByteOrder.BIG_ENDIAN)


def test_structfield_byte_order_from_stream():
    field = StructField('I')

    assert field.size == 4
    assert field.value == 0

    field.unpack(Stream(b'\x01\x02\x03\x04', readers=LE))

    assert field.value == 0x04030201
    assert field.offset == 0

    field.unpack(Stream(b'\x01\x02\x03\x04', readers=BE))

    assert field.value == 0x01020304


def test_structfield_without_byte_order():
    field = StructField('H')

    with pytest.raises(UnpackException):
        field.unpack(Stream(b'\x01\x02'))


def test_stringfield():
    field = StringField(0x10)

    assert len(field) == 0x10
    assert field.value == b'\x00' * 0x10

    data = bytes(range(0x10))
    stream = Stream(data + b'extra')
    field.unpack(stream)

    assert field.value == data
    assert field.offset == 0
    assert stream.tell() == 0x10


def test_arrayfield():
    array = ArrayField(StructField('i'), n=3)

    array.unpack(Stream(struct.pack('<3i', 2, -1, 7), readers=LE))

    assert len(array) == 3
    assert array.values == [2, -1, 7]

    # check that the elements are not duplicated
    assert array.value[0] is not array.value[1]
    assert array.value[0].father is array

    # check the offsets make sense
    assert [_.offset for _ in array.value] == [0, 4, 8]


def test_arrayfield_error_chain():
    array = ArrayField(StructField('I'), n=3)

    with pytest.raises(UnpackException) as excinfo:
        array.unpack(Stream(b'\x00' * 10, readers=LE))

    assert excinfo.value.chain == ['[2]']
    assert excinfo.value.offset == 8
