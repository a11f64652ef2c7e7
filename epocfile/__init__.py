"""
# EPOC file formats for humans.

Decoder for the documents of the Psion Series 5 office suite: Word, Sheet,
Sketch, TextEd, multi bitmap (mbm) and clipart files.

Every structure of a document is a Chunk, a sequence of Fields, with a single
operation

    length = chunk.unpack(config, buf, lev, off)

that reads it from an immutable Buffer at the given offset, following the
Configuration (character set, verbosity, strictness) and reporting what it
is doing through the logging module; lev is the nesting level used to indent
the diagnostics.

The whole document is decoded by parse():

    from epocfile import Configuration, Buffer, parse

    result = parse(Configuration.default(), Buffer('letter.wrd'))
    for paragraph in result.file.paragraphs:
        print(paragraph.text)

A decoding that fails raises a subclass of EpocException, after having
released everything decoded so far; a document of unknown kind is not an
error, the result has type FileType.UNKNOWN and an empty payload.
"""
from .configuration import Configuration
from .charset import Charset
from .driver import ParsedFile, file_type, parse, parse_file
from .enum import Compliant, FileType, Verbosity
from .streams import Buffer
