'''
Text of the word processor and of the text editor.

The text is a single run of characters where the code 0x06 closes a
paragraph; the layout of the paragraphs is stored into separate sections.
'''
from epocfile.charset import read_char, make_printable
from epocfile.core import Chunk
from epocfile import fields
from epocfile.exceptions import MalformedStringException, UnpackException
from epocfile.ids import BodyId


PARAGRAPH_END = 0x06


class Paragraph(object):

    def __init__(self, text, base_style=0):
        self.text = text
        self.base_style = base_style
        # filled by the layout decoders
        self.in_lines = []
        self.replacements = []

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.text)

    def __str__(self):
        return self.text


class TextSection(Chunk):
    text_length = fields.XIndicatorField()

    def init(self):
        super().init()
        self.paragraphs = []

    def __iter__(self):
        return iter(self.paragraphs)

    def __len__(self):
        return len(self.paragraphs)

    def unpack_fields(self, config, buf, lev, off):
        log = config.diagnostics

        length = self.unpack_field('text_length', config, buf, lev, off)
        text_len = self.text_length.value
        log.debug(lev, off, 'Length: %08x', text_len)

        self.paragraphs = []
        line = []
        i = 0
        while i < text_len:
            code, leng = read_char(config, buf, lev, off + length + i)
            if i + leng > text_len:
                log.error(lev, off + length + i, 'Malformed text section')
                raise MalformedStringException('character overshooting the text', offset=off + length + i)

            # the last character closes the paragraph whatever it is
            if code == PARAGRAPH_END or i + leng == text_len:
                paragraph = Paragraph(''.join(line))
                log.debug(lev, off + length + i, 'Line %d: `%s\'',
                          len(self.paragraphs), make_printable(paragraph.text))
                self.paragraphs.append(paragraph)
                line = []
            else:
                line.append(chr(code))

            i += leng

        return length + text_len


class TextEdSection(Chunk):
    '''The body starts with a small table of (id, offset) couples terminated by
    the id of the text: the offsets point to the layout and the replacements
    sections of the text.'''
    description = 'texted section'
    body_id = fields.StructField('I', default=BodyId.TEXTED_BODY)
    text    = TextSection()

    def init(self):
        super().init()
        self.layout_offset = 0
        self.replacement_offset = 0
        self.unknown_offset = 0

    @property
    def paragraphs(self):
        return self.text.paragraphs

    def _read_jumptable(self, config, buf, lev, off):
        log = config.diagnostics
        length = 0

        while True:
            section_id, _ = fields.StructField.read(config, buf, lev + 1, off + length, 'I')
            if section_id == BodyId.TEXTED_TEXT:
                break

            length += 4
            offset, _ = fields.StructField.read(config, buf, lev + 1, off + length, 'I')

            if section_id == BodyId.TEXTED_LAYOUT:
                self.layout_offset = offset
                log.debug(lev + 1, off + length, 'Found Layout section at %08x', offset)
            elif section_id == BodyId.TEXTED_REPLACEMENT:
                self.replacement_offset = offset
                log.debug(lev + 1, off + length, 'Found Replacement section at %08x', offset)
            elif section_id == BodyId.TEXTED_UNKNOWN:
                self.unknown_offset = offset
                if offset:
                    log.warning(lev + 1, off + length, 'Unknown section in TextEd jumptable has real offset (ignoring)')
                log.debug(lev + 1, off + length, 'Found Unknown section at %08x', offset)
            else:
                log.warning(lev + 1, off + length, 'Unknown section in TextEd jumptable (ignoring)')
                log.debug(lev + 1, off + length, 'Section ID %08x at offset %08x', section_id, offset)

            length += 4

        # skip the id of the text itself
        return length + 4

    def unpack_fields(self, config, buf, lev, off):
        log = config.diagnostics

        length = self.unpack_field('body_id', config, buf, lev, off)
        if self.body_id.value != BodyId.TEXTED_BODY:
            log.error(lev, off, 'Page header section body id not found')
            log.debug(lev, off, 'Page body id: read %08x, expected %08x', self.body_id.value, BodyId.TEXTED_BODY)
            raise UnpackException('texted body id not found', offset=off)

        log.progress(lev, off + length, 'Going to read the section jumptable')
        length += self._read_jumptable(config, buf, lev, off + length)

        length += self.unpack_field('text', config, buf, lev, off + length)

        return length
