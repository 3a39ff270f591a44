import struct

import pytest

import builders
from matstream.enum import ArrayFlags, ByteOrder, MatrixClass, TypeCode
from matstream.exceptions import InvalidTypeCode, ShapeMismatch, UnpackException, UnsupportedDataType
from matstream.matrix import ArrayFlagsData, create_matrix, get_indices, read_matrix
from matstream.readers import get_readers
from matstream.streams import Stream
from matstream.tags import read_tag


def decode_matrix(data, order='<'):
    byte_order = ByteOrder.LITTLE_ENDIAN if order == '<' else ByteOrder.BIG_ENDIAN
    stream = Stream(data, readers=get_readers(byte_order))
    tag = read_tag(stream)

    matrix = read_matrix(stream, tag)

    # never past the element
    assert stream.tell() <= tag.payload_offset + tag.length

    return matrix, stream


def test_create_matrix():
    assert create_matrix([2, 3]) == [[None, None, None], [None, None, None]]
    assert create_matrix([0, 3]) == []


def test_get_indices():
    assert get_indices([2, 3], 0) == [0, 0]
    assert get_indices([2, 3], 1) == [1, 0]
    assert get_indices([2, 3], 2) == [0, 1]
    assert get_indices([2, 3], 5) == [1, 2]
    assert get_indices([2, 3, 4], 23) == [1, 2, 3]


def test_array_flags_bits():
    readers = get_readers(ByteOrder.LITTLE_ENDIAN)

    array_flags = ArrayFlagsData(Stream(struct.pack('<II', 0x0806, 0), readers=readers))

    assert array_flags.array_flags == ArrayFlags.COMPLEX
    assert array_flags.class_value == MatrixClass.DOUBLE.value

    # undefined bits are ignored
    array_flags = ArrayFlagsData(Stream(struct.pack('<II', 0xffffff09, 0), readers=readers))

    assert array_flags.array_flags == ArrayFlags.COMPLEX | ArrayFlags.GLOBAL | ArrayFlags.LOGICAL
    assert array_flags.class_value == MatrixClass.UINT8.value


def test_matrix_2x3():
    flat = [1, 2, 3, 4, 5, 6]

    matrix, _ = decode_matrix(builders.matrix(b'x', [2, 3], flat))

    assert matrix.name == 'x'
    assert matrix.dims == [2, 3]
    assert matrix.shape == (2, 3)
    assert matrix.offset == 0
    assert matrix.descriptor.matrix_class == MatrixClass.DOUBLE
    assert matrix.descriptor.flags == ArrayFlags.NONE
    assert matrix.value == [[1.0, 3.0, 5.0], [2.0, 4.0, 6.0]]

    for i in range(2):
        for j in range(3):
            assert matrix.value[i][j] == flat[i + 2 * j]


def test_matrix_three_dimensions():
    dims = [2, 3, 4]
    flat = [float(_) for _ in range(24)]

    matrix, _ = decode_matrix(builders.matrix(b'cube', dims, flat))

    assert len(matrix.value) == 2
    assert len(matrix.value[0]) == 3
    assert len(matrix.value[0][0]) == 4
    assert matrix.value[1][2][3] == flat[1 + 2 * 2 + 6 * 3]
    # reconstructing is a bijection
    assert matrix.flatten() == flat


def test_matrix_uint8():
    matrix, _ = decode_matrix(builders.matrix(
        b'bytes', [1, 5], [1, 2, 3, 4, 255], type=TypeCode.UINT8, matrix_class=MatrixClass.UINT8))

    assert matrix.descriptor.matrix_class == MatrixClass.UINT8
    assert matrix.value == [[1, 2, 3, 4, 255]]


@pytest.mark.parametrize('type', [
    TypeCode.INT8,
    TypeCode.INT16,
    TypeCode.UINT16,
    TypeCode.INT32,
    TypeCode.UINT32,
    TypeCode.SINGLE,
    TypeCode.INT64,
    TypeCode.UINT64,
])
def test_matrix_numeric_types(type):
    matrix, _ = decode_matrix(builders.matrix(b'n', [3, 1], [1, 2, 3], type=type))

    assert matrix.value == [[1], [2], [3]]


def test_matrix_big_endian():
    matrix, _ = decode_matrix(builders.matrix(b'x', [2, 3], [1, 2, 3, 4, 5, 6], order='>'), order='>')

    assert matrix.name == 'x'
    assert matrix.value == [[1.0, 3.0, 5.0], [2.0, 4.0, 6.0]]


def test_matrix_compact_name():
    matrix, _ = decode_matrix(builders.matrix(b'ab', [1, 1], [42], compact_name=True))

    assert matrix.name == 'ab'
    assert matrix.value == [[42.0]]


def test_matrix_flags():
    matrix, _ = decode_matrix(builders.matrix(
        b'mask', [1, 2], [1, 0],
        type=TypeCode.UINT8,
        matrix_class=MatrixClass.UINT8,
        flags=ArrayFlags.GLOBAL | ArrayFlags.LOGICAL))

    assert matrix.descriptor.is_global
    assert matrix.descriptor.is_logical
    assert not matrix.descriptor.is_complex


def test_matrix_complex_skips_imaginary():
    data = builders.matrix(b'z', [1, 2], [1.0, 2.0], flags=ArrayFlags.COMPLEX, imaginary=[3.0, 4.0])

    matrix, stream = decode_matrix(data)

    assert matrix.descriptor.is_complex
    assert matrix.value == [[1.0, 2.0]]
    # the imaginary part has been skipped entirely
    assert stream.tell() == 8 + struct.unpack('<I', data[4:8])[0]


def test_matrix_empty():
    matrix, _ = decode_matrix(builders.matrix(b'e', [0, 0], []))

    assert matrix.value == []
    assert matrix.flatten() == []


def test_shape_mismatch():
    with pytest.raises(ShapeMismatch) as excinfo:
        decode_matrix(builders.matrix(b'x', [2, 2], [1, 2, 3]))

    # tag (8) + array flags (16) + dimensions (16) + name (12)
    assert excinfo.value.offset == 52


def test_shape_mismatch_partial_value():
    data = builders.element(TypeCode.MATRIX, (
        builders.array_flags() +
        builders.dimensions([1, 2]) +
        builders.name(b'x') +
        builders.element(TypeCode.DOUBLE, b'\x00' * 12)
    ))

    with pytest.raises(ShapeMismatch):
        decode_matrix(data)


def test_unsupported_data_type():
    data = builders.element(TypeCode.MATRIX, (
        builders.array_flags(MatrixClass.CHAR) +
        builders.dimensions([1, 4]) +
        builders.name(b's') +
        builders.element(TypeCode.UTF8, b'abcd')
    ))

    with pytest.raises(UnsupportedDataType) as excinfo:
        decode_matrix(data)

    assert not isinstance(excinfo.value, InvalidTypeCode)
    assert excinfo.value.offset == 52


@pytest.mark.parametrize('matrix_class', [
    MatrixClass.CELL,
    MatrixClass.STRUCT,
    MatrixClass.OBJECT,
    MatrixClass.SPARSE,
])
def test_unsupported_class(matrix_class):
    with pytest.raises(UnsupportedDataType) as excinfo:
        decode_matrix(builders.matrix(b'x', [1, 1], [1.0], matrix_class=matrix_class))

    # the flags word is after the tags of the matrix and of the array flags
    assert excinfo.value.offset == 16


def test_invalid_type_in_subelement():
    data = builders.element(TypeCode.MATRIX, (
        builders.array_flags() +
        builders.tag(99, 8) + b'\x00' * 8
    ))

    with pytest.raises(InvalidTypeCode) as excinfo:
        decode_matrix(data)

    assert excinfo.value.offset == 24


def test_array_flags_wrong_length():
    data = builders.element(TypeCode.MATRIX, builders.element(TypeCode.UINT32, b'\x00' * 4) + b'\x00' * 16)

    with pytest.raises(UnpackException) as excinfo:
        decode_matrix(data)

    assert excinfo.value.offset == 8


def test_subelement_past_boundary():
    payload = builders.matrix_payload(b'x', [1, 1], [1.0])
    data = builders.tag(TypeCode.MATRIX, 16) + payload

    with pytest.raises(UnpackException) as excinfo:
        decode_matrix(data)

    # the dimensions do not fit in the 16 bytes declared
    assert excinfo.value.offset == 24
