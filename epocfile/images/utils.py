from enum import Enum

from epocfile.exceptions import OutOfRangeException


class Compression(Enum):
    NONE  = 0
    RLE8  = 1
    RLE12 = 2
    RLE16 = 3
    RLE24 = 4


# the sixteen colours of the EPOC 4 bits colour mode
PALETTE_COLOR_4 = (
    (0x00, 0x00, 0x00), (0x55, 0x55, 0x55), (0x80, 0x00, 0x00), (0x80, 0x80, 0x00),
    (0x00, 0x80, 0x00), (0xff, 0x00, 0x00), (0xff, 0xff, 0x00), (0x00, 0xff, 0x00),
    (0xff, 0x00, 0xff), (0x00, 0x00, 0xff), (0x00, 0xff, 0xff), (0x80, 0x00, 0x80),
    (0x00, 0x00, 0x80), (0x00, 0x80, 0x80), (0xaa, 0xaa, 0xaa), (0xff, 0xff, 0xff),
)


def _get(encoded, index, name):
    if index >= len(encoded):
        raise OutOfRangeException('%s data truncated at byte %d' % (name, index))

    return encoded[index]


def _decode_rle(encoded, width, name):
    '''Generic marker based run-length decoding: a marker below 0x80 repeats
    the following value marker + 1 times, otherwise 0x100 - marker values
    follow as they are. A value is "width" bytes long.'''
    decoded = bytearray()

    i = 0
    while i < len(encoded):
        marker = encoded[i]
        if marker < 0x80:
            value = bytes(_get(encoded, i + 1 + _, name) for _ in range(width))
            decoded += value * (marker + 1)
            i += 1 + width
        else:
            count = 0x100 - marker
            for j in range(count * width):
                decoded.append(_get(encoded, i + 1 + j, name))
            i += 1 + count * width

    return bytes(decoded)


def decode_rle8(encoded):
    return _decode_rle(encoded, 1, 'RLE8')


def decode_rle16(encoded):
    return _decode_rle(encoded, 2, 'RLE16')


def decode_rle24(encoded):
    return _decode_rle(encoded, 3, 'RLE24')


def decode_rle12(encoded):
    '''Every little-endian word holds a 12 bits value in the low bits and the
    repetitions minus one in the high nibble; each value is written as a
    16 bits little-endian word.'''
    decoded = bytearray()

    for i in range(0, len(encoded), 2):
        low = encoded[i]
        high = _get(encoded, i + 1, 'RLE12')
        value = low + ((high & 0x0f) << 8)
        repeat = (high >> 4) + 1
        decoded += value.to_bytes(2, 'little') * repeat

    return bytes(decoded)


DECODERS = {
    Compression.RLE8: decode_rle8,
    Compression.RLE12: decode_rle12,
    Compression.RLE16: decode_rle16,
    Compression.RLE24: decode_rle24,
}


def bytes_to_pixels(data, depth, xsize, ysize):
    '''Each row starts at a 32 bits boundary; the bits of a byte are consumed
    starting from the least significant one.'''
    pixels = []

    nr = 0
    for y in range(ysize):
        # new lines will start at longs
        nr = (nr + 3) & ~3
        source = 0
        ibits = 0
        for x in range(xsize):
            output = 0
            obits = 0
            while obits < depth:
                if ibits == 0:
                    if nr >= len(data):
                        raise OutOfRangeException('pixel data truncated at row %d column %d' % (y, x))
                    source = data[nr]
                    ibits = 8
                    nr += 1
                bits = depth - obits if ibits + obits > depth else ibits
                output = (output << bits) | (source & ((1 << bits) - 1))
                source >>= bits
                ibits -= bits
                obits += bits
            pixels.append(output)

    return pixels


def split_color_bits(depth):
    '''Number of bits for red, green and blue when a pixel is not a palette index'''
    width = (depth + 2) // 3
    red = min(width, depth)
    green = min(width, depth - red)
    return red, green, depth - red - green


def pixels_to_floats(pixels, depth, color, palette=None):
    '''Every pixel becomes a (red, green, blue) triple of floats in [0, 1].'''
    result = []

    if palette:
        # an index outside the palette is taken as the first colour
        for pixel in pixels:
            if pixel >= len(palette):
                pixel = 0
            result.append(tuple(_ / 255.0 for _ in palette[pixel]))
        return result

    if not color:
        maximum = float((1 << depth) - 1)
        return [(pixel / maximum, ) * 3 for pixel in pixels]

    redbits, greenbits, bluebits = split_color_bits(depth)

    def _channel(value, bits):
        return (value & ((1 << bits) - 1)) / float((1 << bits) - 1) if bits > 0 else 0.0

    for pixel in pixels:
        result.append((
            _channel(pixel >> (bluebits + greenbits), redbits),
            _channel(pixel >> bluebits, greenbits),
            _channel(pixel, bluebits),
        ))

    return result
