"""
Entry points: guess the kind of a document from its header and decode it
with the matching assembler.
"""
import logging

from .configuration import Configuration
from .enum import FileType
from .exceptions import EpocException
from .files import ASSEMBLERS, UnknownFile
from .sections.common import HeaderSection
from .streams import Buffer


logger = logging.getLogger(__name__)


class ParsedFile(object):
    '''The result of parse(): the kind of the document and its payload, an
    UnknownFile when the document could not be decoded further.'''

    def __init__(self, type, file):
        self.type = type
        self.file = file

    def __repr__(self):
        return '<%s(%s, %r)>' % (self.__class__.__name__, self.type.name, self.file)

    def release(self):
        self.file.release()


def file_type(config, buf):
    '''Returns the triple (kind, length of the header, header); a header that
    can't be decoded means an unknown kind.'''
    header = HeaderSection()
    try:
        length = header.unpack(config, buf, 0, 0)
    except EpocException as e:
        logger.debug('header not recognized: %s', e)
        return FileType.UNKNOWN, 0, None

    return header.file, length, header


def parse(config, buf, assemblers=None, decoders=None):
    assemblers = ASSEMBLERS if assemblers is None else assemblers

    kind, length, header = file_type(config, buf)

    assembler = assemblers.get(kind)
    if assembler is None:
        config.diagnostics.warning(1, 0, 'Unknown file type: can\'t parse!')
        if kind != FileType.UNKNOWN:
            config.diagnostics.debug(1, 0, 'No assembler for %s', kind.name)
        return ParsedFile(FileType.UNKNOWN, UnknownFile())

    return ParsedFile(kind, assembler(config, buf, 0, length, decoders=decoders))


def parse_file(source, config=None, **kwargs):
    '''Convenience wrapper accepting raw bytes or a path'''
    config = config or Configuration.default()
    buf = source if isinstance(source, Buffer) else Buffer(source)

    return parse(config, buf, **kwargs)
