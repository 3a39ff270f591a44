'''
# Incremental decoder

The data arrives in chunks of any size (from a file, a socket, ...) that
have nothing to do with the boundaries of the data elements, so the
decoder is a state machine that is fed with the chunks and that emits an
item each time a data element is complete

    AWAITING_HEADER --> AWAITING_ELEMENT <--> BUFFERING_ELEMENT
                              |
                              v
                             DONE

A typical usage is

    decoder = Decoder()
    for chunk in chunks:
        decoder.feed(chunk)
        for item in decoder.events():
            ...
    for item in decoder.close():
        ...

The first item is the header of the file, the following ones are the
variables (instances of Matrix) in the order they are found.
'''
import asyncio
import logging
from functools import partial
from typing import Dict, Iterable, Iterator, Optional, Tuple

from .enum import DecoderState, TypeCode
from .exceptions import (
    MatStreamException,
    TruncatedStream,
    UnpackException,
    UnsupportedDataType,
    UnrecoverableException,
)
from .header import HEADER_SIZE, MatHeader, parse_header
from .matrix import Matrix, read_matrix
from .compressed import read_compressed
from .streams import Stream
from .tags import LONG_TAG_SIZE, read_tag


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class PendingElement(object):
    '''A data element whose tag has been read but whose payload is still arriving.'''

    def __init__(self, tag):
        self.tag = tag

    def __repr__(self):
        return '<%s(%r, needed=0x%x)>' % (self.__class__.__name__, self.tag, self.needed)

    @property
    def needed(self) -> int:
        '''the stream must reach this offset to have the element completely'''
        return self.tag.end

    def is_complete(self, stream) -> bool:
        return stream.end >= self.needed


class Decoder(object):
    '''Passing the readers means that the header is not expected, this is the
    case for the nested streams of the compressed data elements.'''

    def __init__(self, readers=None):
        self.logger = logging.getLogger(f'{self.__module__}.{self.__class__.__name__}')
        self.stream = Stream(b'', readers=readers)
        self.state = DecoderState.AWAITING_HEADER if readers is None else DecoderState.AWAITING_ELEMENT
        self.header = None
        self.pending = None
        self.error = None

    def __repr__(self):
        return '<%s(%s, %r)>' % (self.__class__.__name__, self.state.name, self.stream)

    def _check_usable(self):
        if self.state == DecoderState.ERROR:
            raise UnrecoverableException(self.error.offset, 'decoder already failed: %s' % self.error) from self.error

    def _fail(self, error):
        self.logger.debug('failing in state %s: %s', self.state.name, error)
        self.state = DecoderState.ERROR
        self.error = error
        self.pending = None

    def feed(self, data):
        self._check_usable()

        if not data:
            return

        self.stream.discard()
        self.stream.extend(data)
        self.logger.debug('received %d bytes, buffered up to 0x%x', len(data), self.stream.end)

        if self.state == DecoderState.DONE:
            self.state = DecoderState.AWAITING_ELEMENT

    def step(self) -> Optional[list]:
        '''Try to go on with the decoding: it returns the list of items
        generated by one data element (possibly empty) or None if more data
        is needed.'''
        self._check_usable()

        try:
            self.pending, items = self._step(self.pending)
        except MatStreamException as e:
            self._fail(e)
            raise

        return items

    def _step(self, pending):
        if self.state == DecoderState.AWAITING_HEADER:
            if self.stream.remaining() < HEADER_SIZE:
                return None, None

            self.header = parse_header(self.stream)
            self.state = DecoderState.AWAITING_ELEMENT

            return None, [self.header]

        if self.state == DecoderState.DONE:
            return None, None

        if self.state == DecoderState.AWAITING_ELEMENT:
            remaining = self.stream.remaining()
            if not remaining:
                self.state = DecoderState.DONE
                return None, None
            if remaining < LONG_TAG_SIZE:
                return None, None

            pending = PendingElement(read_tag(self.stream))
            self.state = DecoderState.BUFFERING_ELEMENT

        if not pending.is_complete(self.stream):
            self.logger.debug('%r: %d bytes buffered, waiting for more', pending, self.stream.end - pending.tag.offset)
            return pending, None

        items = self._dispatch(pending.tag)
        self.state = DecoderState.AWAITING_ELEMENT

        return None, items

    def _dispatch(self, tag) -> list:
        stream = self.stream

        if tag.type == TypeCode.MATRIX:
            if tag.length:
                items = [read_matrix(stream, tag)]
            else:
                self.logger.warning('skipping empty matrix element at offset 0x%x', tag.offset)
                items = []
        elif tag.type == TypeCode.COMPRESSED:
            items = read_compressed(stream, tag, self._decode_nested)
        else:
            raise UnsupportedDataType(tag.offset, 'support for type %s is not yet implemented' % tag.type.name)

        if stream.tell() > tag.payload_offset + tag.length:
            raise UnpackException(stream.tell(), 'data element at 0x%x read past its boundary' % tag.offset)

        stream.seek(tag.end)

        return items

    def _decode_nested(self, raw) -> list:
        nested = Decoder(readers=self.stream.readers)
        nested.feed(raw)

        return nested.close()

    def events(self) -> Iterator:
        '''Generate the items decodable with the data received so far, each
        data element is a point where the control goes back to the caller.'''
        while (items := self.step()) is not None:
            yield from items

    def close(self) -> list:
        '''The input is finished: the items still decodable from the data
        buffered are returned, then it's an error if something is left not
        completely decoded.'''
        self._check_usable()

        items = list(self.events())

        if self.state == DecoderState.DONE:
            return items

        error = TruncatedStream(self.stream.end, 'stream ended in state %s with %d bytes not decoded' % (
            self.state.name, self.stream.end - (self.pending.tag.offset if self.pending else self.stream.tell())))
        self._fail(error)

        raise error

    def abort(self, exc):
        '''The source of the data failed.

        Since it's not possible to know if more elements were coming, the
        decoding is truncated in any state, DONE included.'''
        self._check_usable()

        error = TruncatedStream(self.stream.end, 'input failed in state %s: %s' % (self.state.name, exc))
        self._fail(error)

        raise error from exc


def decode(chunks: Iterable[bytes]) -> Iterator:
    '''Generate the header and the variables from an iterable of chunks of bytes.'''
    decoder = Decoder()

    try:
        for chunk in chunks:
            decoder.feed(chunk)
            yield from decoder.events()
    except OSError as e:
        decoder.abort(e)

    yield from decoder.close()


async def adecode(chunks):
    '''Like decode() but from an asynchronous iterable, the event loop gets
    back the control after each item.'''
    decoder = Decoder()

    try:
        async for chunk in chunks:
            decoder.feed(chunk)
            for item in decoder.events():
                yield item
                await asyncio.sleep(0)
    except OSError as e:
        decoder.abort(e)

    for item in decoder.close():
        yield item


def load(path, chunk_size=DEFAULT_CHUNK_SIZE) -> Tuple[MatHeader, Dict[str, Matrix]]:
    header = None
    variables = {}

    with open(path, 'rb') as f:
        for item in decode(iter(partial(f.read, chunk_size), b'')):
            if isinstance(item, MatHeader):
                header = item
            else:
                variables[item.name] = item

    logger.debug('loaded %d variables from \'%s\'', len(variables), path)

    return header, variables
