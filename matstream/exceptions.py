class MatStreamException(Exception):
    '''Base class to extend in order to throw exception in matstream.

    It takes the absolute offset into the stream where the problem has been
    detected and, optionally, the chain of the layers that caused the exception.
    '''

    def __init__(self, offset, message='', chain=None):
        self.offset = offset
        self.message = message
        self.chain = chain if chain is not None else []
        super().__init__(offset, message)

    def __str__(self):
        where = '/'.join(self.chain)
        location = f'{where} ' if where else ''
        return f'{location}at offset 0x{self.offset:x}: {self.message}'


class UnpackException(MatStreamException):
    pass


class MagicException(UnpackException):
    pass


class MalformedHeader(MagicException):
    pass


class InvalidTypeCode(UnpackException):
    '''The tag contains a value that is not a data type of the format.'''
    pass


class UnsupportedDataType(UnpackException):
    '''The data type is known but its decoding is not implemented.'''
    pass


class ShapeMismatch(UnpackException):
    pass


class CorruptCompressedData(UnpackException):
    pass


class TruncatedStream(MatStreamException):
    pass


class UnrecoverableException(MatStreamException):
    '''This is raised when a decoder is used after a fatal error, it's not possible
    to resume parsing from an unknown position.'''
    pass
