'''
# Numeric arrays

A matrix data element contains a sequence of sub-elements

 1. array flags: complex/global/logical flags and the class of the array
 2. dimensions: one signed 32-bit value for each dimension
 3. array name
 4. real part: the values in column-major order
 5. imaginary part (only for complex arrays)

The values are rebuilt as nested lists where the first dimension is the
outermost one, so that the element (i, j, k, ...) is at flat index
i + d0*j + d0*d1*k + ...
'''
import logging
from typing import List

from bitstring import Bits

from .core import Chunk
from . import fields
from .enum import ArrayFlags, MatrixClass
from .exceptions import UnpackException, UnsupportedDataType, ShapeMismatch
from .readers import product
from .tags import read_tag


logger = logging.getLogger(__name__)

UNSUPPORTED_CLASSES = (
    MatrixClass.CELL,
    MatrixClass.STRUCT,
    MatrixClass.OBJECT,
    MatrixClass.SPARSE,
)


class ArrayFlagsData(Chunk):
    '''The flags word is composed of (from the most significant byte)

        | undefined (2) | flags (1) | class (1) |
    '''
    flags    = fields.StructField('I')
    reserved = fields.StructField('I')

    def _split(self):
        _, flags, class_value = Bits(uint=self.flags.value, length=32).unpack('uint:16, uint:8, uint:8')
        return flags, class_value

    @property
    def array_flags(self) -> ArrayFlags:
        flags, _ = self._split()
        mask = ArrayFlags.COMPLEX | ArrayFlags.GLOBAL | ArrayFlags.LOGICAL

        return ArrayFlags(flags & mask.value)

    @property
    def class_value(self) -> int:
        _, class_value = self._split()
        return class_value


class MatrixDescriptor(object):

    def __init__(self, flags=ArrayFlags.NONE, matrix_class=None, dims=None, name=b''):
        self.flags = flags
        self.matrix_class = matrix_class
        self.dims = dims if dims is not None else []
        self.name = name

    def __repr__(self):
        return '<%s(name=%r, class=%s, dims=%r, flags=%s)>' % (
            self.__class__.__name__,
            self.name,
            self.matrix_class.name if self.matrix_class else None,
            self.dims,
            self.flags,
        )

    @property
    def is_complex(self) -> bool:
        return bool(self.flags & ArrayFlags.COMPLEX)

    @property
    def is_global(self) -> bool:
        return bool(self.flags & ArrayFlags.GLOBAL)

    @property
    def is_logical(self) -> bool:
        return bool(self.flags & ArrayFlags.LOGICAL)


class Matrix(object):
    '''A variable decoded from the stream.'''

    def __init__(self, descriptor: MatrixDescriptor, value, offset=None):
        self.descriptor = descriptor
        self.value = value
        self.offset = offset

    def __repr__(self):
        return '<%s(%s, %s)>' % (self.__class__.__name__, self.name, 'x'.join(str(_) for _ in self.dims))

    @property
    def name(self) -> str:
        return self.descriptor.name.decode('ascii', errors='replace')

    @property
    def dims(self) -> List[int]:
        return self.descriptor.dims

    @property
    def shape(self):
        return tuple(self.descriptor.dims)

    def flatten(self) -> list:
        '''Returns the values in the same column-major order of the stream.'''
        return [get_item(self.value, get_indices(self.dims, idx)) for idx in range(product(self.dims))]


def create_matrix(dims):
    if not dims:
        return None

    dim, *rest = dims

    return [create_matrix(rest) for _ in range(dim)]


def get_indices(dims, idx):
    '''Decompose the flat index in one subscript for each dimension.'''
    radix = 1
    result = []
    for dim in dims:
        result.append((idx // radix) % dim)
        radix *= dim

    return result


def assign(matrix, subs, value):
    element = matrix
    for sub in subs[:-1]:
        element = element[sub]

    element[subs[-1]] = value


def get_item(matrix, subs):
    element = matrix
    for sub in subs:
        element = element[sub]

    return element


def _read_subelement_tag(stream, end):
    tag = read_tag(stream)

    if tag.payload_offset + tag.length > end:
        raise UnpackException(tag.offset, 'sub-element of %d bytes exceeds the matrix boundary at 0x%x' % (tag.length, end))

    return tag


def read_array_flags(stream, end) -> ArrayFlagsData:
    tag = _read_subelement_tag(stream, end)
    if tag.length != 8:
        raise UnpackException(tag.offset, 'array flags must be 8 bytes long, not %d' % tag.length)

    array_flags = ArrayFlagsData(stream)

    try:
        matrix_class = MatrixClass(array_flags.class_value)
    except ValueError:
        raise UnsupportedDataType(array_flags.offset, 'unknown array class %d' % array_flags.class_value) from None

    if matrix_class in UNSUPPORTED_CLASSES:
        raise UnsupportedDataType(array_flags.offset, 'arrays of class %s are not yet implemented' % matrix_class.name)

    return array_flags


def read_dimensions(stream, end) -> List[int]:
    tag = _read_subelement_tag(stream, end)
    if not tag.length or tag.length % 4:
        raise UnpackException(tag.offset, 'dimensions must be a non-empty list of 32-bit values, found %d bytes' % tag.length)

    dims = fields.ArrayField(fields.StructField('i'), n=tag.length // 4)
    dims.unpack(stream)

    # the block of the dimensions is always padded to 8 bytes
    if tag.compact:
        stream.skip(tag.padding)
    elif len(dims) % 2:
        stream.skip(4)

    if any(_ < 0 for _ in dims.values):
        raise ShapeMismatch(dims.offset, 'negative dimension in %r' % dims.values)

    return dims.values


def read_name(stream, end) -> bytes:
    tag = _read_subelement_tag(stream, end)

    name = fields.StringField(tag.length)
    name.unpack(stream)
    stream.skip(tag.padding)

    return name.value


def read_matrix(stream, tag) -> Matrix:
    '''Decode the data element of type MATRIX whose tag has been already read,
    the payload must be completely available in the stream.'''
    readers = stream.readers
    end = tag.payload_offset + tag.length

    array_flags = read_array_flags(stream, end)
    descriptor = MatrixDescriptor(
        flags=array_flags.array_flags,
        matrix_class=MatrixClass(array_flags.class_value),
    )
    descriptor.dims = read_dimensions(stream, end)
    descriptor.name = read_name(stream, end)

    # actual type and length of the data
    data_tag = _read_subelement_tag(stream, end)
    if not readers.is_numeric(data_tag.type):
        raise UnsupportedDataType(data_tag.offset, 'datatype %s is not yet implemented' % data_tag.type.name)

    size = readers.element_size(data_tag.type)
    count = product(descriptor.dims)
    if data_tag.length % size or data_tag.length // size != count:
        raise ShapeMismatch(
            data_tag.offset,
            '%d bytes of %s do not fill dimensions %r' % (data_tag.length, data_tag.type.name, descriptor.dims))

    logger.debug('reading %d values of type %s for %r', count, data_tag.type.name, descriptor)

    value = create_matrix(descriptor.dims)
    for idx, element in enumerate(readers.read_many(stream, data_tag.type, count)):
        assign(value, get_indices(descriptor.dims, idx), element)

    # only the real part is kept
    if descriptor.is_complex:
        stream.skip(data_tag.length + 8)

    if stream.tell() > end:
        raise UnpackException(stream.tell(), 'matrix decoding went past its boundary at 0x%x' % end)

    return Matrix(descriptor, value, offset=tag.offset)
