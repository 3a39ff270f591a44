'''
Readers for the fixed-width numeric types of the format.

The byte order is known only after the header has been parsed, so the
readers are built at that point, once for each byte order, and then
reused by every data element (nested streams included).
'''
import struct
from functools import lru_cache, reduce
import operator

from .enum import ByteOrder, TypeCode


# format character of the struct module for each numeric type
TYPE2FORMAT = {
    TypeCode.INT8:   'b',
    TypeCode.UINT8:  'B',
    TypeCode.INT16:  'h',
    TypeCode.UINT16: 'H',
    TypeCode.INT32:  'i',
    TypeCode.UINT32: 'I',
    TypeCode.SINGLE: 'f',
    TypeCode.DOUBLE: 'd',
    TypeCode.INT64:  'q',
    TypeCode.UINT64: 'Q',
}


def product(values):
    return reduce(operator.mul, values, 1)


class PrimitiveReaders(object):

    def __init__(self, byte_order: ByteOrder):
        self.byte_order = byte_order
        self._structs = {
            type_code: struct.Struct(byte_order.prefix + fmt) for type_code, fmt in TYPE2FORMAT.items()
        }

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.byte_order.name)

    def is_numeric(self, type_code: TypeCode) -> bool:
        return type_code in self._structs

    def element_size(self, type_code: TypeCode) -> int:
        '''raises KeyError for the types that are not numeric'''
        return self._structs[type_code].size

    def read(self, stream, type_code: TypeCode):
        _struct = self._structs[type_code]
        return _struct.unpack(stream.read_exactly(_struct.size))[0]

    def read_many(self, stream, type_code: TypeCode, count: int) -> list:
        fmt = '%s%d%s' % (self.byte_order.prefix, count, TYPE2FORMAT[type_code])
        return list(struct.unpack(fmt, stream.read_exactly(count * self.element_size(type_code))))


@lru_cache(maxsize=None)
def get_readers(byte_order: ByteOrder) -> PrimitiveReaders:
    return PrimitiveReaders(byte_order)
