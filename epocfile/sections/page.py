from epocfile.core import Chunk
from epocfile import fields


class PageLayoutSection(Chunk):
    '''Only the first part of the page layout is decoded: what follows
    (header and footer paragraphs, page dimensions) is left alone.'''
    first_page_nr   = fields.StructField('I')
    header_distance = fields.LengthField()
    footer_distance = fields.LengthField()
    left_margin     = fields.LengthField()
    right_margin    = fields.LengthField()
    top_margin      = fields.LengthField()
    bottom_margin   = fields.LengthField()
