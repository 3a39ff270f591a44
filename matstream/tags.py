'''
Each data element starts with a tag that indicates its type and the number
of bytes of the payload. There are two forms

 1. long: two 32-bit words, the type and the length
 2. compact: a single 32-bit word, with the length in the upper 16 bits
    and the type in the lower ones; the payload (at most 4 bytes) fills
    the following word

    long form                          compact form
  .-----------------------.          .-----------------------.
  | type (4)  | length (4)|          | len (2)| type (2)| data|
  |-----------------------|          '-----------------------'
  | data ...              |
  '-----------------------'

The payload is padded so that the next tag is aligned to 8 bytes when the
length is greater than 4, to 4 bytes otherwise. The compressed elements
are the exception: they have no padding at all.
'''
import logging

from .enum import TypeCode
from .exceptions import InvalidTypeCode, UnpackException


logger = logging.getLogger(__name__)

LONG_TAG_SIZE = 8
COMPACT_TAG_SIZE = 4


def padding(length: int) -> int:
    size = 8 if length > 4 else 4
    mod = length % size

    return size - mod if mod else 0


class Tag(object):

    def __init__(self, type: TypeCode, length: int, compact: bool = False, offset: int = 0):
        self.type = type
        self.length = length
        self.compact = compact
        self.offset = offset

    def __repr__(self):
        return '<%s(%s, length=%d%s, offset=0x%x)>' % (
            self.__class__.__name__,
            self.type.name,
            self.length,
            ', compact' if self.compact else '',
            self.offset,
        )

    @property
    def payload_offset(self) -> int:
        return self.offset + (COMPACT_TAG_SIZE if self.compact else LONG_TAG_SIZE)

    @property
    def padding(self) -> int:
        # the compact form takes always two words
        if self.compact:
            return COMPACT_TAG_SIZE - self.length

        # the zlib stream is written as it is, the next element follows immediately
        if self.type == TypeCode.COMPRESSED:
            return 0

        return padding(self.length)

    @property
    def end(self) -> int:
        '''offset of the next tag'''
        return self.payload_offset + self.length + self.padding


def read_tag(stream) -> Tag:
    readers = stream.readers
    offset = stream.tell()
    value = readers.read(stream, TypeCode.UINT32)

    compact = bool(value >> 16)
    if compact:
        type_value = value & 0xff
        length = (value >> 16) & 0xff
    else:
        type_value = value

    try:
        type = TypeCode(type_value)
    except ValueError:
        raise InvalidTypeCode(offset, 'invalid type %d' % type_value) from None

    if not compact:
        length = readers.read(stream, TypeCode.UINT32)
    elif length > COMPACT_TAG_SIZE:
        raise UnpackException(offset, 'compact tag with length %d' % length)

    tag = Tag(type, length, compact=compact, offset=offset)

    logger.debug('read %r', tag)

    return tag
