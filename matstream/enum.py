'''
Constant values used throughout the MAT-file Level 5 format.

Note: use Enum for value that cannot ORed together, Flag for the others.
'''
from enum import Enum, Flag, auto


class ByteOrder(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()

    @property
    def prefix(self):
        '''the byte order character used by the struct module'''
        return '<' if self == ByteOrder.LITTLE_ENDIAN else '>'


class TypeCode(Enum):
    '''Data types that can appear in the tag of a data element.'''
    INT8       = 1
    UINT8      = 2
    INT16      = 3
    UINT16     = 4
    INT32      = 5
    UINT32     = 6
    SINGLE     = 7
    DOUBLE     = 9
    INT64      = 12
    UINT64     = 13
    MATRIX     = 14
    COMPRESSED = 15
    UTF8       = 16
    UTF16      = 17
    UTF32      = 18


class MatrixClass(Enum):
    '''The class byte stored in the array flags sub-element.'''
    CELL   = 1
    STRUCT = 2
    OBJECT = 3
    CHAR   = 4
    SPARSE = 5
    DOUBLE = 6
    SINGLE = 7
    INT8   = 8
    UINT8  = 9
    INT16  = 10
    UINT16 = 11
    INT32  = 12
    UINT32 = 13
    INT64  = 14
    UINT64 = 15


class ArrayFlags(Flag):
    '''Bits of the flag byte of the array flags sub-element.'''
    NONE    = 0
    LOGICAL = 1 << 1
    GLOBAL  = 1 << 2
    COMPLEX = 1 << 3


class DecoderState(Enum):
    AWAITING_HEADER   = auto()
    AWAITING_ELEMENT  = auto()
    BUFFERING_ELEMENT = auto()
    DONE              = auto()
    ERROR             = auto()
