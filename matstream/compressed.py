'''
# Compressed data elements

Since version 7 the variables are usually stored as data elements of type
COMPRESSED: the payload is a zlib stream that, once inflated, contains
other data elements (usually a single MATRIX) that are parsed as an
independent stream with the byte order of the file.
'''
import logging
import zlib

from .exceptions import CorruptCompressedData, MatStreamException


logger = logging.getLogger(__name__)


def read_compressed(stream, tag, decode_nested) -> list:
    '''Inflate the payload and decode it with the callable passed as argument,
    that must consume all the inflated data before returning the list of
    the items found.'''
    offset = stream.tell()
    payload = stream.read_exactly(tag.length)

    try:
        raw = zlib.decompress(payload)
    except zlib.error as e:
        raise CorruptCompressedData(offset, 'unable to inflate %d bytes: %s' % (tag.length, e)) from e

    logger.debug('inflated %d bytes at offset 0x%x into %d bytes', tag.length, offset, len(raw))

    try:
        items = decode_nested(raw)
    except MatStreamException as e:
        e.chain.insert(0, 'compressed@0x%x' % tag.offset)
        raise

    logger.debug('nested stream at offset 0x%x completed with %d items', tag.offset, len(items))

    return items
