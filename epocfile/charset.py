"""
Translation between the raw bytes of a document and 16-bit code units.

The word processor stores text with a single byte per character using a
variant of Windows code page 1252; newer documents may use a multibyte
encoding close to UTF-8 limited to three bytes.
"""
from enum import Enum

from .exceptions import InvalidEncodingException, OutOfRangeException


class Charset(Enum):
    UNICODE = 0
    CP1252  = 1


def _build_cp1252():
    table = [0] * 0x100

    # control codes used by the word processor (0x06 ends a paragraph)
    for byte in range(0x06, 0x10):
        table[byte] = byte
    table[0x10] = 0x00a0  # non-breaking space

    for byte in range(0x20, 0x7f):
        table[byte] = byte

    for byte in range(0x80, 0xa0):
        try:
            table[byte] = ord(bytes([byte]).decode('cp1252'))
        except UnicodeDecodeError:
            pass

    for byte in range(0xa1, 0x100):
        table[byte] = byte

    return tuple(table)


TABLE_CP1252 = _build_cp1252()

TABLES = {
    Charset.UNICODE: TABLE_CP1252,
    Charset.CP1252: TABLE_CP1252,
}


def _get(config, buf, lev, off):
    value = buf.get(off)
    if value is None:
        config.diagnostics.error(lev, off, 'Trying byte read past the end of the file')
        raise OutOfRangeException('character past the end of the buffer', offset=off)

    return value


def read_char(config, buf, lev, off):
    '''Decode a single character returning the couple (code unit, length).'''
    char1 = _get(config, buf, lev, off)

    if not config.unicode:
        code = config.unicode_table[char1]
        return (code if code else ord(config.unknown_unicode_char)), 1

    if char1 < 0x80:
        return char1, 1

    if char1 >= 0xf0:
        config.diagnostics.error(lev, off, 'Unicode character with more than 3 bytes (0x%02x)', char1)
        raise InvalidEncodingException('character sequence longer than 3 bytes', offset=off)

    char2 = _get(config, buf, lev, off + 1)
    if (char2 & 0xc0) != 0x80:
        config.diagnostics.error(lev, off + 1, 'Unicode continuation byte expected, found 0x%02x', char2)
        raise InvalidEncodingException('invalid continuation byte', offset=off + 1)

    if char1 < 0xe0:
        return ((char1 & 0x1f) << 6) | (char2 & 0x3f), 2

    char3 = _get(config, buf, lev, off + 2)
    if (char3 & 0xc0) != 0x80:
        config.diagnostics.error(lev, off + 2, 'Unicode continuation byte expected, found 0x%02x', char3)
        raise InvalidEncodingException('invalid continuation byte', offset=off + 2)

    return ((char1 & 0x0f) << 12) | ((char2 & 0x3f) << 6) | (char3 & 0x3f), 3


def code_units(text):
    '''Return the code units of a decoded string with the terminating zero.'''
    return [ord(_) for _ in text] + [0]


def make_printable(text):
    return ''.join(_ if 0x20 <= ord(_) < 0x7f else '.' for _ in text)
