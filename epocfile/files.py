"""
Assemblers: one per kind of document.

Each of them locates the sections of the document through the section table
(or the jump table), checks the application id, delegates the decoding of
the bodies to the section decoders and collects the results into the
payload of the document. When something goes wrong every section decoded so
far is released, in reverse order, before the exception propagates: the
caller receives a complete payload or nothing.
"""
import contextlib

from . import fields
from .decoders import DEFAULT_DECODERS
from .enum import FileType
from .exceptions import (
    AllocationException,
    EncryptedUnsupportedException,
    RequiredSectionMissingException,
    UnexpectedApplicationException,
)
from .ids import ApplicationUid, SectionId


class DocumentFile(object):
    '''Base class for the payloads: "sections" lists the attributes owned by
    the document in the order they are decoded.'''
    type = FileType.UNKNOWN
    sections = ()

    def __init__(self, **kwargs):
        for name in self.sections:
            setattr(self, name, kwargs.pop(name, None))

        if kwargs:
            raise TypeError('unexpected sections for %s: %s' % (self.__class__.__name__, ', '.join(kwargs)))

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, ', '.join(
            '%s=%r' % (_, getattr(self, _)) for _ in self.sections))

    def release(self):
        for name in reversed(self.sections):
            section = getattr(self, name)
            if section is None:
                continue
            if isinstance(section, list):
                for _ in reversed(section):
                    _.release()
            else:
                section.release()


class UnknownFile(DocumentFile):
    '''Nothing was decoded: the kind of document is unknown or unsupported.'''
    pass


class WordFile(DocumentFile):
    type = FileType.WORD
    sections = ('application_id', 'status', 'page', 'styles', 'text', 'layout')

    @property
    def paragraphs(self):
        return self.text.paragraphs


class SheetFile(DocumentFile):
    type = FileType.SHEET
    sections = ('application_id', 'status', 'page', 'workbook')


class TextEdFile(DocumentFile):
    type = FileType.TEXTED
    sections = ('application_id', 'page', 'texted')

    @property
    def paragraphs(self):
        return self.texted.paragraphs


class SketchFile(DocumentFile):
    type = FileType.SKETCH
    sections = ('application_id', 'sketch')


class MbmFile(DocumentFile):
    type = FileType.MBM
    sections = ('pictures', )


class ClipartFile(DocumentFile):
    type = FileType.CLIPART
    sections = ('cliparts', )


class Assembly(object):
    '''Context manager tracking the sections decoded while assembling a
    document.

    Sections obtained with decode() are owned by the document, the ones
    obtained with decode_temporary() (the tables) only live during the
    assembly. If the block fails all of them are released in reverse order
    of acquisition.
    '''

    def __init__(self, config, buf, lev, off, decoders, description):
        self.config = config
        self.buf = buf
        self.lev = lev
        self.off = off
        self.decoders = decoders or DEFAULT_DECODERS
        self.description = description
        self._stack = contextlib.ExitStack()
        self._temporary = []

    def __enter__(self):
        self.config.diagnostics.progress(self.lev + 1, self.off, 'Going to read a %s', self.description)
        self._stack.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb):
        log = self.config.diagnostics

        if exc_type is None:
            self._stack.pop_all()
            for section in reversed(self._temporary):
                section.release()
            log.progress(self.lev + 1, self.off, 'End of %s', self.description)
            return False

        self._stack.__exit__(exc_type, exc, tb)
        log.error(self.lev + 1, self.off, 'Reading of %s failed', self.description)

        if issubclass(exc_type, MemoryError):
            raise AllocationException('out of memory reading %s' % self.description, offset=self.off) from exc

        return False

    def decode(self, name, off, **context):
        decoder = getattr(self.decoders, name)
        section, _ = decoder(self.config, self.buf, self.lev + 2, off, **context)
        self._stack.callback(section.release)

        return section

    def decode_temporary(self, name, off, **context):
        section = self.decode(name, off, **context)
        self._temporary.append(section)

        return section

    def read_long(self, off):
        value, _ = fields.StructField.read(self.config, self.buf, self.lev + 2, off, 'I')
        return value

    def read_section_table(self):
        '''The document starts with the offset of the section table'''
        table_offset = self.read_long(self.off)
        self.config.diagnostics.debug(self.lev + 2, self.off, 'Offset: %08x', table_offset)

        return self.decode_temporary('section_table', table_offset)

    def classify(self, table, known):
        '''Assign each entry of the section table to its slot; when an
        identifier repeats the last entry wins.'''
        log = self.config.diagnostics
        lev = self.lev + 2
        slots = {}

        for identifier, offset in table:
            if identifier == SectionId.PASSWORD:
                log.error(lev, self.off, 'Password section found. Can\'t read encrypted data')
                raise EncryptedUnsupportedException('encrypted documents are not supported', offset=offset)

            slot = known.get(identifier)
            if slot is None:
                log.warning(lev, self.off, 'Found unknown section in the Section Table (ignoring)')
                log.debug(lev, self.off, 'Section ID %08x at offset %08x', identifier, offset)
                continue

            log.debug(lev, self.off, 'Found %s section at %08x', slot, offset)
            slots[slot] = offset

        return slots

    def require(self, slots, *names):
        for name in names:
            if not slots.get(name):
                self.config.diagnostics.error(self.lev + 2, self.off, '%s section not found in the section table', name)
                raise RequiredSectionMissingException(name, offset=self.off)

    def check_application_id(self, applid, uid, name):
        log = self.config.diagnostics
        lev = self.lev + 2

        if applid.matches(uid, name):
            return

        log.warning(lev, applid.offset, 'Application ID section contains unexpected data: expected %08x `%s\', found %08x `%s\'',
                    uid, name, applid.uid.value, applid.app_name.value)
        log.debug(lev, applid.offset, 'ID: %08x expected, %08x found', uid, applid.uid.value)
        log.debug(lev, applid.offset, 'Name: `%s\' expected, `%s\' found', name, applid.app_name.value)

        raise UnexpectedApplicationException(
            'expected application %s, found %s' % (name, applid.app_name.value), offset=applid.offset)


WORD_SECTIONS = {
    SectionId.APPL_ID: 'application id',
    SectionId.PAGE_LAYOUT: 'page layout',
    SectionId.TEXT: 'text',
    SectionId.WORD_STATUS: 'word status',
    SectionId.WORD_STYLES: 'word styles',
    SectionId.LAYOUT: 'layout',
}


def parse_word_file(config, buf, lev, off, decoders=None):
    with Assembly(config, buf, lev, off, decoders, 'word file') as assembly:
        slots = assembly.classify(assembly.read_section_table(), WORD_SECTIONS)
        assembly.require(slots, 'word status', 'application id', 'page layout', 'word styles', 'text')

        applid = assembly.decode('application_id', slots['application id'])
        assembly.check_application_id(applid, ApplicationUid.WORD, 'word.app')

        status = assembly.decode('word_status', slots['word status'])
        page = assembly.decode('page_layout', slots['page layout'])
        styles = assembly.decode('word_styles', slots['word styles'])
        text = assembly.decode('text', slots['text'])

        layout = None
        if slots.get('layout'):
            layout = assembly.decode('styled_layout', slots['layout'], text=text, styles=styles)
        else:
            config.diagnostics.debug(lev + 2, off, 'No layout section today')

        return WordFile(application_id=applid, status=status, page=page, styles=styles, text=text, layout=layout)


SHEET_SECTIONS = {
    SectionId.APPL_ID: 'application id',
    SectionId.PAGE_LAYOUT: 'page layout',
    SectionId.SHEET_STATUS: 'sheet status',
    SectionId.SHEET_WORKBOOK: 'sheet workbook',
}


def parse_sheet_file(config, buf, lev, off, decoders=None):
    with Assembly(config, buf, lev, off, decoders, 'sheet file') as assembly:
        slots = assembly.classify(assembly.read_section_table(), SHEET_SECTIONS)
        assembly.require(slots, 'sheet status', 'application id', 'page layout', 'sheet workbook')

        applid = assembly.decode('application_id', slots['application id'])
        assembly.check_application_id(applid, ApplicationUid.SHEET, 'sheet.app')

        status = assembly.decode('sheet_status', slots['sheet status'])
        page = assembly.decode('page_layout', slots['page layout'])
        workbook = assembly.decode('workbook', slots['sheet workbook'])

        return SheetFile(application_id=applid, status=status, page=page, workbook=workbook)


TEXTED_SECTIONS = {
    SectionId.APPL_ID: 'application id',
    SectionId.PAGE_LAYOUT: 'page layout',
    SectionId.TEXTED: 'texted',
}


def parse_texted_file(config, buf, lev, off, decoders=None):
    with Assembly(config, buf, lev, off, decoders, 'texted file') as assembly:
        slots = assembly.classify(assembly.read_section_table(), TEXTED_SECTIONS)
        assembly.require(slots, 'application id', 'page layout', 'texted')

        applid = assembly.decode('application_id', slots['application id'])
        assembly.check_application_id(applid, ApplicationUid.TEXTED, 'texted.app')

        page = assembly.decode('page_layout', slots['page layout'])
        texted = assembly.decode('texted', slots['texted'])

        return TextEdFile(application_id=applid, page=page, texted=texted)


SKETCH_SECTIONS = {
    SectionId.APPL_ID: 'application id',
    SectionId.SKETCH: 'sketch',
}


def parse_sketch_file(config, buf, lev, off, decoders=None):
    with Assembly(config, buf, lev, off, decoders, 'sketch file') as assembly:
        slots = assembly.classify(assembly.read_section_table(), SKETCH_SECTIONS)
        assembly.require(slots, 'application id')

        applid = assembly.decode('application_id', slots['application id'])
        assembly.check_application_id(applid, ApplicationUid.SKETCH, 'paint.app')

        sketch = None
        if slots.get('sketch'):
            sketch = assembly.decode('sketch', slots['sketch'])
        else:
            config.diagnostics.warning(lev + 2, off, 'Sketch section not found in the section table')

        return SketchFile(application_id=applid, sketch=sketch)


def parse_mbm_file(config, buf, lev, off, decoders=None):
    '''The pictures are in the order of the jump table'''
    with Assembly(config, buf, lev, off, decoders, 'mbm file') as assembly:
        table_offset = assembly.read_long(off)
        config.diagnostics.debug(lev + 2, off, 'Offset: %08x', table_offset)

        table = assembly.decode_temporary('jump_table', table_offset)

        pictures = []
        for index, offset in enumerate(table):
            config.diagnostics.progress(lev + 2, offset, 'Going to read picture %d', index)
            pictures.append(assembly.decode('paint_data', offset))

        return MbmFile(pictures=pictures)


def parse_clipart_file(config, buf, lev, off, decoders=None):
    '''The jump table comes right after the header'''
    with Assembly(config, buf, lev, off, decoders, 'clipart file') as assembly:
        table = assembly.decode_temporary('jump_table', off)

        cliparts = []
        for index, offset in enumerate(table):
            config.diagnostics.progress(lev + 2, offset, 'Going to read clipart %d', index)
            cliparts.append(assembly.decode('clipart', offset))

        return ClipartFile(cliparts=cliparts)


ASSEMBLERS = {
    FileType.WORD: parse_word_file,
    FileType.TEXTED: parse_texted_file,
    FileType.SKETCH: parse_sketch_file,
    FileType.MBM: parse_mbm_file,
    FileType.CLIPART: parse_clipart_file,
    FileType.SHEET: parse_sheet_file,
}
