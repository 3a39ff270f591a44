"""
Core module for the declaration of the fixed-layout structures of the format.

"""
from typing import Tuple, List

from .fields import Field
from .meta import MetaChunk
from .exceptions import UnpackException


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format.

    The order of declaration of the fields is the order of the data into
    the stream. A subclass can define validate() that is called once all
    the fields have been unpacked and that raises if the data is wrong.
    """

    def __init__(self, stream=None, **kwargs):
        super().__init__(**kwargs)

        if stream is not None:
            self.logger.debug('unpacking \'%s\' from %r', self.__class__.__name__, stream)
            self.unpack(stream)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def unpack(self, stream):
        '''Read the fields one after the other starting from the actual
        offset of the stream.

        If a field fails its name is prepended to the chain of the exception
        so that it's possible to know where exactly the data is wrong.
        '''
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s at offset 0x%x', self.__class__.__name__, field_name, stream.tell())

            try:
                field.unpack(stream)
            except UnpackException as e:
                e.chain.insert(0, field_name)
                raise

        if hasattr(self, 'validate'):
            self.validate()
