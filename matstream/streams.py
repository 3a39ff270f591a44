import io
import logging

from .exceptions import UnpackException


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around the bytes received so far: the data can
    grow at the end while it arrives and can be discarded at the start once
    it's been consumed, but the offsets stay the ones of the whole stream.

    After the header of the file has been parsed the stream carries also the
    readers for the primitive types of the format.'''
    def __init__(self, obj=b'', base=0, readers=None):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.obj = obj
        self.base = base  # offset of the first byte still buffered
        self.readers = readers

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name)

        init_method()

    def __repr__(self):
        return '<%s(offset=0x%x, end=0x%x)>' % (self.__class__.__name__, self.tell(), self.end)

    def init_bytes(self):
        '''We think these are raw bytes'''
        self._size = len(self.obj)
        self.obj = io.BytesIO(self.obj)

    def init_bytearray(self):
        self.init_bytes()

    @property
    def byte_order(self):
        return self.readers.byte_order if self.readers else None

    @property
    def end(self):
        '''offset just after the last byte received'''
        return self.base + self._size

    def tell(self):
        return self.base + self.obj.tell()

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        if offset < self.base:
            raise ValueError('offset 0x%x has been already discarded (buffer starts at 0x%x)' % (offset, self.base))

        self.obj.seek(offset - self.base)

    def remaining(self):
        return self.end - self.tell()

    def read_exactly(self, size):
        offset = self.tell()
        data = self.obj.read(size)

        if len(data) != size:
            raise UnpackException(offset, 'expected %d bytes, only %d available' % (size, len(data)))

        return data

    def skip(self, size):
        if size > self.remaining():
            raise UnpackException(self.tell(), 'cannot skip %d bytes, only %d available' % (size, self.remaining()))

        self.obj.seek(size, io.SEEK_CUR)

    def extend(self, data):
        '''Append data at the end without moving the cursor'''
        position = self.obj.tell()
        self.obj.seek(0, io.SEEK_END)
        self.obj.write(data)
        self.obj.seek(position)
        self._size += len(data)

    def discard(self):
        '''Drop the data before the cursor, it's not possible to seek back there anymore.'''
        position = self.obj.tell()
        if not position:
            return

        logger.debug('discarding %d bytes before offset 0x%x', position, self.tell())

        data = self.obj.getvalue()[position:]
        self.base += position
        self._size = len(data)
        self.obj = io.BytesIO(data)
