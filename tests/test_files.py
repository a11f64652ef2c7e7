import logging

import pytest

from epocfile import Buffer, Verbosity
from epocfile.exceptions import (
    AllocationException,
    EncryptedUnsupportedException,
    InvalidEncodingException,
    OutOfRangeException,
    RequiredSectionMissingException,
    UnexpectedApplicationException,
)
from epocfile.decoders import SectionDecoders
from epocfile.enum import ErrorCode
from epocfile.files import (
    ClipartFile,
    MbmFile,
    SheetFile,
    SketchFile,
    TextEdFile,
    WordFile,
    parse_clipart_file,
    parse_mbm_file,
    parse_sheet_file,
    parse_sketch_file,
    parse_texted_file,
    parse_word_file,
)
from epocfile.ids import ApplicationUid, BodyId, SectionId
from epocfile.images.paint import PaintDataSection

from conftest import (
    DocumentBuilder,
    application_id,
    clipart_document,
    clipart_section,
    mbm_document,
    page_layout,
    paint_data,
    sheet_status,
    text_section,
    u32,
    warnings_of,
    word_document,
)


def test_word(config, tracker):
    document = parse_word_file(config, Buffer(word_document()), 0, 16, decoders=tracker.decoders())

    assert isinstance(document, WordFile)
    assert document.application_id.app_name.value == 'Word.app'
    assert document.status.show_tabs
    assert document.page.left_margin.value == pytest.approx(2.54)
    assert [_.text for _ in document.paragraphs] == ['Hello', 'world']
    assert document.layout is None

    # only the section table was released
    assert len(tracker.released) == 1

    document.release()
    assert tracker.balanced


def test_word_decoding_order(config, tracker):
    parse_word_file(config, Buffer(word_document()), 0, 16, decoders=tracker.decoders())

    assert [_.__class__.__name__ for _ in tracker.acquired] == [
        'SectionTableSection',
        'ApplicationIdSection',
        'WordStatusSection',
        'PageLayoutSection',
        'WordStylesSection',
        'TextSection',
    ]


def test_word_with_layout(config):
    data = word_document(extra=[(SectionId.LAYOUT, b'\x00' * 4)])
    document = parse_word_file(config, Buffer(data), 0, 16)

    assert document.layout.text is document.text
    assert document.layout.styles is document.styles


@pytest.mark.parametrize('missing', [
    SectionId.WORD_STATUS,
    SectionId.APPL_ID,
    SectionId.PAGE_LAYOUT,
    SectionId.WORD_STYLES,
    SectionId.TEXT,
])
def test_word_missing_section(config, tracker, caplog, missing):
    with pytest.raises(RequiredSectionMissingException):
        parse_word_file(config, Buffer(word_document(skip=[missing])), 0, 16, decoders=tracker.decoders())

    assert tracker.balanced
    assert 'section not found in the section table' in caplog.text


def test_word_zero_offset_means_missing(config):
    # a later entry with offset zero shadows the status
    document = word_document(extra=[(SectionId.WORD_STATUS, 0)])

    with pytest.raises(RequiredSectionMissingException) as excinfo:
        parse_word_file(config, Buffer(document), 0, 16)

    assert excinfo.value.slot == 'word status'


def test_word_last_entry_wins(config):
    extra = [(SectionId.TEXT, text_section(b'second\x06'))]
    document = parse_word_file(config, Buffer(word_document(extra=extra)), 0, 16)

    assert [_.text for _ in document.paragraphs] == ['second']


def test_word_unexpected_application(config, tracker, caplog):
    with pytest.raises(UnexpectedApplicationException):
        parse_word_file(config, Buffer(word_document(name=b'Wordx.app')), 0, 16, decoders=tracker.decoders())

    assert tracker.balanced
    warnings = warnings_of(caplog)
    assert len(warnings) == 1
    assert 'word.app' in warnings[0].getMessage()
    assert 'Wordx.app' in warnings[0].getMessage()


def test_word_unexpected_application_uid(config):
    with pytest.raises(UnexpectedApplicationException):
        parse_word_file(config, Buffer(word_document(uid=ApplicationUid.SHEET)), 0, 16)


def test_word_unknown_section(config, caplog):
    document = parse_word_file(config, Buffer(word_document(extra=[(0x10000999, b'\x00')])), 0, 16)

    assert [_.text for _ in document.paragraphs] == ['Hello', 'world']
    assert 'Found unknown section in the Section Table (ignoring)' in caplog.text


def test_word_password(config, tracker):
    data = word_document(extra=[(SectionId.PASSWORD, b'\x00' * 4)])

    with pytest.raises(EncryptedUnsupportedException) as excinfo:
        parse_word_file(config, Buffer(data), 0, 16, decoders=tracker.decoders())

    assert excinfo.value.code == ErrorCode.PARSE
    assert tracker.balanced


def test_word_failure_releases_everything(config, tracker, caplog):
    '''The text points past the end: the sections already decoded are released'''
    document = word_document(skip=[SectionId.TEXT], extra=[(SectionId.TEXT, 0xffff)])

    with pytest.raises(OutOfRangeException):
        parse_word_file(config, Buffer(document), 0, 16, decoders=tracker.decoders())

    assert len(tracker.acquired) == 5
    assert tracker.balanced
    assert tracker.released[0].__class__.__name__ == 'WordStylesSection'
    assert 'Reading of word file failed' in caplog.text


def test_word_out_of_memory(config, tracker):
    def exhausted(config, buf, lev, off, **context):
        raise MemoryError()

    decoders = tracker.decoders()
    decoders.text = exhausted

    with pytest.raises(AllocationException):
        parse_word_file(config, Buffer(word_document()), 0, 16, decoders=decoders)

    assert tracker.balanced


def test_word_progress(config, caplog):
    caplog.set_level(logging.DEBUG, logger='epocfile')
    parse_word_file(config.replace(verbosity=Verbosity.DEBUG), Buffer(word_document()), 0, 16)

    assert 'Going to read a word file' in caplog.text
    assert 'No layout section today' in caplog.text


def sheet_document():
    return (DocumentBuilder(ApplicationUid.SHEET)
            .add(SectionId.SHEET_STATUS, sheet_status())
            .add(SectionId.APPL_ID, application_id(ApplicationUid.SHEET, b'Sheet.app'))
            .add(SectionId.PAGE_LAYOUT, page_layout())
            .add(SectionId.SHEET_WORKBOOK, b'\x00' * 4)
            .build())


def test_sheet(config, tracker):
    document = parse_sheet_file(config, Buffer(sheet_document()), 0, 16, decoders=tracker.decoders())

    assert isinstance(document, SheetFile)
    assert document.status.cursor_row.value == 3
    assert document.workbook.raw == b'\x00' * 4

    document.release()
    assert tracker.balanced


def texted_document(name=b'TextEd.app'):
    body = (u32(BodyId.TEXTED_BODY) + u32(BodyId.TEXTED_LAYOUT) + u32(0) +
            u32(BodyId.TEXTED_TEXT) + text_section(b'print 1\x06'))
    return (DocumentBuilder(ApplicationUid.TEXTED)
            .add(SectionId.APPL_ID, application_id(ApplicationUid.TEXTED, name))
            .add(SectionId.PAGE_LAYOUT, page_layout())
            .add(SectionId.TEXTED, body)
            .build())


def test_texted(config):
    document = parse_texted_file(config, Buffer(texted_document()), 0, 16)

    assert isinstance(document, TextEdFile)
    assert [_.text for _ in document.paragraphs] == ['print 1']


def test_texted_unexpected_application(config):
    with pytest.raises(UnexpectedApplicationException):
        parse_texted_file(config, Buffer(texted_document(name=b'Word.app')), 0, 16)


def test_sketch_without_sketch_section(config, caplog):
    data = (DocumentBuilder(ApplicationUid.SKETCH)
            .add(SectionId.APPL_ID, application_id(ApplicationUid.SKETCH, b'Paint.app'))
            .build())
    document = parse_sketch_file(config, Buffer(data), 0, 16)

    assert isinstance(document, SketchFile)
    assert document.sketch is None
    assert len(warnings_of(caplog)) == 1


def test_mbm(config, tracker):
    pictures = [
        paint_data(),
        paint_data(xsize=1, ysize=1, data=bytes([0x03, 0, 0, 0])),
        paint_data(xsize=2, ysize=1, data=bytes([0x06, 0, 0, 0])),
    ]
    document = parse_mbm_file(config, Buffer(mbm_document(pictures)), 0, 16, decoders=tracker.decoders())

    assert isinstance(document, MbmFile)
    assert [_.pixels for _ in document.pictures] == [[0, 1, 2, 3] * 2, [3], [2, 1]]

    offsets = [_.offset for _ in tracker.acquired if isinstance(_, PaintDataSection)]
    assert offsets == sorted(offsets)

    document.release()
    assert tracker.balanced


def test_mbm_broken_picture(config, tracker):
    pictures = [paint_data(), u32(0x10000) + paint_data()[4:]]

    with pytest.raises(OutOfRangeException):
        parse_mbm_file(config, Buffer(mbm_document(pictures)), 0, 16, decoders=tracker.decoders())

    assert tracker.balanced


def test_clipart(config, tracker):
    data = clipart_document([clipart_section(), clipart_section()])
    document = parse_clipart_file(config, Buffer(data), 0, 4, decoders=tracker.decoders())

    assert isinstance(document, ClipartFile)
    assert len(document.cliparts) == 2
    assert document.cliparts[1].picture.pixels == [0, 1, 2, 3] * 2

    document.release()
    assert tracker.balanced


def test_decoders_override():
    with pytest.raises(AttributeError):
        SectionDecoders(unknown=None)


def test_mbm_zero_bits_per_pixel(config, tracker):
    pictures = [paint_data(), paint_data(xsize=1, ysize=1, bpp=0, data=bytes(4))]

    with pytest.raises(InvalidEncodingException):
        parse_mbm_file(config, Buffer(mbm_document(pictures)), 0, 16, decoders=tracker.decoders())

    assert tracker.balanced
