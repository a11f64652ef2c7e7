"""
Decoders of the section bodies used by the assemblers.

A decoder is any callable

    decoder(config, buf, lev, off, **context) -> (section, length)

where section has a release() method. The default ones build the Chunk
describing the section and unpack it; passing different callables to
SectionDecoders allows to plug in other implementations.
"""
from .navigator import JumpTableSection, SectionTableSection
from .sections.common import (
    ApplicationIdSection,
    StyledLayoutSection,
    WordStylesSection,
    WorkbookSection,
)
from .sections.page import PageLayoutSection
from .sections.status import SheetStatusSection, WordStatusSection
from .sections.text import TextEdSection, TextSection
from .images.paint import ClipartSection, PaintDataSection, SketchSection


def chunk_decoder(chunk_cls, **defaults):
    '''Build a decoder from a Chunk subclass: the context is passed to its constructor'''
    def decode(config, buf, lev, off, **context):
        section = chunk_cls(**dict(defaults, **context))
        length = section.unpack(config, buf, lev, off)
        return section, length

    decode.chunk_cls = chunk_cls

    return decode


class SectionDecoders(object):

    def __init__(self, **overrides):
        self.section_table  = chunk_decoder(SectionTableSection)
        self.jump_table     = chunk_decoder(JumpTableSection)
        self.application_id = chunk_decoder(ApplicationIdSection)
        self.word_status    = chunk_decoder(WordStatusSection)
        self.sheet_status   = chunk_decoder(SheetStatusSection)
        self.page_layout    = chunk_decoder(PageLayoutSection)
        self.word_styles    = chunk_decoder(WordStylesSection)
        self.text           = chunk_decoder(TextSection)
        self.styled_layout  = chunk_decoder(StyledLayoutSection)
        self.workbook       = chunk_decoder(WorkbookSection)
        self.texted         = chunk_decoder(TextEdSection)
        self.sketch         = chunk_decoder(SketchSection)
        self.paint_data     = chunk_decoder(PaintDataSection)
        self.clipart        = chunk_decoder(ClipartSection)

        for name, decoder in overrides.items():
            if not hasattr(self, name):
                raise AttributeError(f"there is no decoder named '{name}'")
            setattr(self, name, decoder)


DEFAULT_DECODERS = SectionDecoders()
