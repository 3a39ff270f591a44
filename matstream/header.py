'''
# MAT-file Level 5 header

The first 128 bytes of the file

  .-----------------------------------------------.
  | descriptive text (116 bytes)                  |
  | subsystem data offset (8 bytes)               |
  | version (2 bytes) | endian indicator (2 bytes)|
  '-----------------------------------------------'

The endian indicator is the characters 'M' and 'I' written as a 16-bit
value by the program that created the file: reading back 'IM' means that
the file is little-endian, 'MI' that it's big-endian.
'''
import logging
import struct

from .core import Chunk
from . import fields
from .enum import ByteOrder
from .exceptions import MalformedHeader
from .readers import get_readers


logger = logging.getLogger(__name__)

HEADER_SIZE = 128

ENDIAN_INDICATORS = {
    b'IM': ByteOrder.LITTLE_ENDIAN,
    b'MI': ByteOrder.BIG_ENDIAN,
}


class MatHeader(Chunk):
    text    = fields.StringField(116)
    subsys  = fields.StringField(8)
    version = fields.StringField(2)
    endian  = fields.StringField(2)

    def validate(self):
        if self.endian.value not in ENDIAN_INDICATORS:
            b1, b2 = self.endian.value
            raise MalformedHeader(self.endian.offset, 'error parsing endian indicator: 0x%02x, 0x%02x' % (b1, b2))

    @property
    def description(self) -> str:
        return self.text.value.decode('latin1').strip(' \x00')

    @property
    def has_subsystem_offset(self) -> bool:
        return any(_ not in (0x00, 0x20) for _ in self.subsys.value)

    @property
    def byte_order(self) -> ByteOrder:
        return ENDIAN_INDICATORS[self.endian.value]

    @property
    def version_number(self) -> int:
        return struct.unpack(self.byte_order.prefix + 'H', self.version.value)[0]

    @property
    def readers(self):
        return get_readers(self.byte_order)

    def __str__(self):
        return '%s (version 0x%04x, %s-endian, %s subsys info)' % (
            self.description,
            self.version_number,
            'little' if self.byte_order == ByteOrder.LITTLE_ENDIAN else 'big',
            'with' if self.has_subsystem_offset else 'no',
        )


def parse_header(stream) -> MatHeader:
    '''Unpack the header from the stream and set up the readers for the data
    elements that follow; the stream is left at offset 128.'''
    header = MatHeader(stream)
    stream.readers = header.readers

    logger.debug('header parsed: %s', header)

    return header
