#!/usr/bin/env python3
import sys
import os
import logging
from functools import partial

from matstream.decoder import DEFAULT_CHUNK_SIZE, decode
from matstream.exceptions import MatStreamException
from matstream.header import MatHeader

if 'DEBUG' in os.environ:
    logging.basicConfig()
    logger = logging.getLogger('matstream')
    logger.setLevel(logging.DEBUG)


def usage(progname):
    print('usage: %s <mat file> [chunk size]' % progname)
    sys.exit(1)


def dump_header(hdr):
    print(f'''MAT-file Header:
  Text:                              {hdr.description}
  Version:                           0x{hdr.version_number:04x}
  Byte order:                        {hdr.byte_order.name}
  Subsystem offset:                  {"yes" if hdr.has_subsystem_offset else "no"}''')


def dump_matrix(matrix):
    descriptor = matrix.descriptor
    flags = ','.join(_ for _, enabled in (
        ('complex', descriptor.is_complex),
        ('global', descriptor.is_global),
        ('logical', descriptor.is_logical),
    ) if enabled)
    dims = 'x'.join(str(_) for _ in matrix.dims)
    print(f'''{matrix.name:<20} {descriptor.matrix_class.name:<8} {dims:<12} {flags}''')
    print(f'''  {matrix.value}''')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]
    chunk_size = int(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_CHUNK_SIZE

    with open(path, 'rb') as f:
        try:
            for item in decode(iter(partial(f.read, chunk_size), b'')):
                if isinstance(item, MatHeader):
                    dump_header(item)
                    print('\nVariables:')
                else:
                    dump_matrix(item)
        except MatStreamException as e:
            print(f'error: {e}', file=sys.stderr)
            sys.exit(1)
