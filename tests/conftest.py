import logging
import struct

import pytest

from epocfile import Charset, Configuration
from epocfile.common.checkuid import checkuid
from epocfile.decoders import SectionDecoders
from epocfile.ids import ApplicationUid, BodyId, FileUid, SectionId


def u8(value):
    return struct.pack('<B', value)


def u16(value):
    return struct.pack('<H', value)


def u32(value):
    return struct.pack('<I', value)


def s_indicator(value):
    if value < 0x40:
        return u8((value << 2) | 0x02)
    return u16((value << 3) | 0x05)


def x_indicator(value):
    if value < 0x80:
        return u8(value << 1)
    if value < 0x4000:
        return u16((value << 2) | 0x01)
    return u32((value << 3) | 0x03)


def long_string(data):
    return s_indicator(len(data)) + data


def header(uid2, uid3, uid1=FileUid.PSION5):
    return u32(uid1) + u32(uid2) + u32(uid3) + u32(checkuid(uid1, uid2, uid3))


def application_id(uid, name):
    return u32(uid) + long_string(name)


def word_status(display=0x07, pictures=0x01, top=1, side=0, operational=0x08, cursor=0x10, size=0x64):
    return bytes([0x02, display, pictures, top, side, operational]) + u32(cursor) + u32(size)


def sheet_status(row=3, column=4, graph=0, toolbars=0x03, scrollbars=0x09):
    return (u8(0x02) + u32(row) + u32(column) + u8(graph) + u8(toolbars) + u8(scrollbars) +
            u8(0x00) + u32(0x50) + u32(0x60))


def page_layout(first_page=1, lengths=(720, 720, 1440, 1440, 2880, 2880)):
    return u32(first_page) + b''.join(u32(_) for _ in lengths)


def text_section(data):
    return x_indicator(len(data)) + data


def paint_data(xsize=4, ysize=2, data=None, bpp=2, color=0, compression=0, clipart=False):
    '''A paint data section with the rows already padded to 32 bits'''
    if data is None:
        data = bytes([0xe4, 0, 0, 0]) * ysize
    size = 0x28 + len(data)
    prologue = (u32(size) + u32(0x28) + u32(xsize) + u32(ysize) + u32(1440) + u32(720) +
                u32(bpp) + u32(color) + u32(0) + u32(compression))
    if clipart:
        prologue += u32(0xffffffff) + u32(0x44)
    return prologue + data


def clipart_section(**kwargs):
    return u32(BodyId.CLIPART_ITEM) + u32(0x02) + u32(0) + u32(0) + u32(0x0c) + paint_data(clipart=True, **kwargs)


class DocumentBuilder(object):
    '''Build a document with a section table: the header, the offset of the
    table, the bodies one after the other and at last the table.'''

    def __init__(self, uid3, uid2=FileUid.DATA_FILE):
        self.uid2 = uid2
        self.uid3 = uid3
        self.entries = []

    def add(self, identifier, body):
        self.entries.append((identifier, body))
        return self

    def add_entry(self, identifier, offset):
        '''An entry pointing to an arbitrary offset'''
        self.entries.append((identifier, offset))
        return self

    def build(self):
        data = header(self.uid2, self.uid3)
        bodies = b''
        table = []
        start = len(data) + 4
        for identifier, body in self.entries:
            if isinstance(body, int):
                table.append((identifier, body))
                continue
            table.append((identifier, start + len(bodies)))
            bodies += body

        table_offset = start + len(bodies)
        table_data = u8(len(table) * 2) + b''.join(u32(_) + u32(__) for _, __ in table)

        return data + u32(table_offset) + bodies + table_data


def word_document(name=b'Word.app', uid=ApplicationUid.WORD, skip=(), extra=()):
    builder = DocumentBuilder(ApplicationUid.WORD)
    sections = [
        (SectionId.WORD_STATUS, word_status()),
        (SectionId.APPL_ID, application_id(uid, name)),
        (SectionId.PAGE_LAYOUT, page_layout()),
        (SectionId.WORD_STYLES, b'\x00' * 8),
        (SectionId.TEXT, text_section(b'Hello\x06world\x06')),
    ]
    for identifier, body in sections + list(extra):
        if identifier not in skip:
            builder.add(identifier, body)

    return builder.build()


def mbm_document(pictures):
    data = header(FileUid.MBM_FILE, 0)
    data += u32(0)  # placeholder for the jump table offset
    offsets = []
    for picture in pictures:
        offsets.append(len(data))
        data += picture
    table_offset = len(data)
    data += u32(len(offsets)) + b''.join(u32(_) for _ in offsets)

    return data[:16] + u32(table_offset) + data[20:]


def clipart_document(cliparts):
    data = u32(FileUid.CLIPART)
    start = 4 + 4 + 4 * len(cliparts)
    offsets = []
    bodies = b''
    for clipart in cliparts:
        offsets.append(start + len(bodies))
        bodies += clipart

    return data + u32(len(offsets)) + b''.join(u32(_) for _ in offsets) + bodies


class AllocationTracker(object):
    '''Wraps the decoders to count the sections handed out and released'''

    def __init__(self):
        self.acquired = []
        self.released = []

    @property
    def balanced(self):
        return sorted(map(id, self.acquired)) == sorted(map(id, self.released))

    def wrap(self, decoder):
        def decode(config, buf, lev, off, **context):
            section, length = decoder(config, buf, lev, off, **context)
            self.acquired.append(section)
            release = section.release

            def tracked_release():
                self.released.append(section)
                release()

            section.release = tracked_release
            return section, length

        return decode

    def decoders(self):
        defaults = SectionDecoders()
        return SectionDecoders(**{_: self.wrap(__) for _, __ in vars(defaults).items()})


@pytest.fixture
def config():
    return Configuration.default()


@pytest.fixture
def unicode_config():
    return Configuration(charset=Charset.UNICODE)


@pytest.fixture
def tracker():
    return AllocationTracker()


def warnings_of(caplog):
    return [_ for _ in caplog.records if _.levelno == logging.WARNING]


def errors_of(caplog):
    return [_ for _ in caplog.records if _.levelno == logging.ERROR]
