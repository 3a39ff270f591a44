"""
# Incremental reader for MAT-files.

A MAT-file (Level 5) is composed of a 128 bytes header followed by a
sequence of data elements, each one of them is a tag (type and length)
followed by the payload and by some padding to keep the alignment.

The data elements that contain variables are of two kinds

 1. MATRIX: a numeric array with its dimensions, name and values
 2. COMPRESSED: a zlib stream that once inflated contains other data
    elements, decoded as an independent stream

The main entry point is the Decoder in matstream.decoder: it accepts the
bytes in chunks of any size and emits the header and the variables as soon
as they are completely available. A Decoder can be in one of the following states

 1. AWAITING_HEADER
 2. AWAITING_ELEMENT
 3. BUFFERING_ELEMENT
 4. DONE
 5. ERROR

"""
