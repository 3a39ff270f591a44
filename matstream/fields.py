"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from the stream without sub-components.

The byte order used by the fields is the one of the stream, that is, the
byte order declared by the header of the file.
"""
import logging
import struct
from typing import List

from .meta import FieldBase
from .exceptions import UnpackException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers from bytes.
    """

    def __init__(self, format, default=0, **kw):
        self.format = format
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value) if isinstance(self.value, int) else self.value)

    def get_format(self, stream):
        byte_order = stream.byte_order

        if byte_order is None:
            raise UnpackException(stream.tell(), f'byte order for field \'{self.name}\' is not known yet')

        return '%s%s' % (byte_order.prefix, self.format)

    def _get_size(self):
        return struct.calcsize('<%s' % self.format)

    def unpack(self, stream):
        self.offset = stream.tell()
        self.value = struct.unpack(self.get_format(stream), stream.read_exactly(self.size))[0]


class StringField(Field):
    """Represent a contiguous chunk of bytes."""

    def __init__(self, n, **kw):
        self.length = n

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return self.length

    def value_from_default(self):
        return b'\x00' * self.length if not self.default else self.default

    def unpack(self, stream):
        self.offset = stream.tell()
        self.value = stream.read_exactly(self.length)


class ArrayField(Field):
    '''Unpack a given number of elements all of the same kind.'''

    def __init__(self, field, n=0, **kw):
        self.field = field
        self.n = n
        kw.setdefault('default', [])
        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __len__(self):
        return len(self.value)

    def value_from_default(self):
        return list(self.default)

    @property
    def values(self) -> List:
        return [_.value for _ in self.value]

    def instance_element(self):
        return self.field.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack(self, stream):
        self.offset = stream.tell()
        self.value = []

        for idx in range(self.n):
            element = self.instance_element()
            try:
                element.unpack(stream)
            except UnpackException as e:
                e.chain.insert(0, '[%d]' % idx)
                raise
            self.value.append(element)
