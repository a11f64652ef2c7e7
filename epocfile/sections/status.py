'''
Status sections: how the application was showing the document when it was
saved (cursor, toolbars, zoom and so on).
'''
from enum import Enum, Flag

from epocfile.core import Chunk
from epocfile import fields


class WordDisplayFlags(Flag):
    TABS          = 0x01
    SPACES        = 0x02
    PARAGRAPH_ENDS = 0x04
    LINE_BREAKS   = 0x08
    HARD_MINUS    = 0x20
    HARD_SPACE    = 0x40


class WordPictureFlags(Flag):
    FULL_PICTURES = 0x01
    FULL_GRAPHS   = 0x02


class WordOperationalFlags(Flag):
    FIT_LINES_TO_SCREEN = 0x08


class WordStatusSection(Chunk):
    initial           = fields.StructField('B', default=0x02, is_magic=True)
    display_flags     = fields.StructField('B', enum=WordDisplayFlags)
    picture_flags     = fields.StructField('B', enum=WordPictureFlags)
    show_top_toolbar  = fields.BoolField()
    show_side_toolbar = fields.BoolField()
    operational_flags = fields.StructField('B', enum=WordOperationalFlags)
    cursor_position   = fields.StructField('I')
    display_size      = fields.StructField('I')

    def _display(self, flag):
        return bool(self.display_flags.value & flag)

    @property
    def show_tabs(self):
        return self._display(WordDisplayFlags.TABS)

    @property
    def show_spaces(self):
        return self._display(WordDisplayFlags.SPACES)

    @property
    def show_paragraph_ends(self):
        return self._display(WordDisplayFlags.PARAGRAPH_ENDS)

    @property
    def show_line_breaks(self):
        return self._display(WordDisplayFlags.LINE_BREAKS)

    @property
    def show_hard_minus(self):
        return self._display(WordDisplayFlags.HARD_MINUS)

    @property
    def show_hard_space(self):
        return self._display(WordDisplayFlags.HARD_SPACE)

    @property
    def show_full_pictures(self):
        return bool(self.picture_flags.value & WordPictureFlags.FULL_PICTURES)

    @property
    def show_full_graphs(self):
        return bool(self.picture_flags.value & WordPictureFlags.FULL_GRAPHS)

    @property
    def fit_lines_to_screen(self):
        return bool(self.operational_flags.value & WordOperationalFlags.FIT_LINES_TO_SCREEN)


class SheetToolbarFlags(Flag):
    SIDE_SHEET = 0x01
    TOP_SHEET  = 0x02
    SIDE_GRAPH = 0x04
    TOP_GRAPH  = 0x08


class Triple(Enum):
    OFF  = 0
    ON   = 1
    AUTO = 2


class ScrollbarField(fields.StructField):
    '''Two bits for the horizontal scrollbar and two for the vertical one;
    the value is the couple (horizontal, vertical).'''

    def __init__(self, **kw):
        super().__init__('B', **kw)

    def _convert(self, config, lev, off, value):
        log = config.diagnostics

        horizontal = value & 0x03
        vertical = (value & 0x0c) >> 2

        if horizontal == 0x03 or vertical == 0x03 or value & 0xf0:
            log.warning(lev, off, 'Sheet status section scrollbar byte flags contains unknown flags (ignored)')
            log.debug(lev, off, 'Scrollbar byte: %02x', value)

        def _triple(bits):
            return {1: Triple.OFF, 2: Triple.AUTO}.get(bits, Triple.ON)

        return _triple(horizontal), _triple(vertical)


class SheetStatusSection(Chunk):
    initial            = fields.StructField('B', default=0x02, is_magic=True)
    cursor_row         = fields.StructField('I')
    cursor_column      = fields.StructField('I')
    show_graph         = fields.BoolField()
    toolbars           = fields.StructField('B', enum=SheetToolbarFlags)
    scrollbars         = ScrollbarField()
    unknown            = fields.StructField('B', default=0x00, is_magic=True)
    sheet_display_size = fields.StructField('I')
    graph_display_size = fields.StructField('I')

    @property
    def show_horizontal_scrollbar(self):
        return self.scrollbars.value[0]

    @property
    def show_vertical_scrollbar(self):
        return self.scrollbars.value[1]

    def show_toolbar(self, flag):
        return bool(self.toolbars.value & flag)
