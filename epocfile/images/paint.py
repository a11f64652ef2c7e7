from PIL import Image

from epocfile.core import Chunk
from epocfile import fields
from epocfile.exceptions import InvalidEncodingException, OutOfRangeException
from epocfile.ids import BodyId
from epocfile.images.utils import (
    Compression,
    DECODERS,
    PALETTE_COLOR_4,
    bytes_to_pixels,
    pixels_to_floats,
)


PIXEL_DATA_OFFSET = 0x28


class ColorField(fields.StructField):
    '''0 for greyscale, 1 for colour; anything else is taken as colour.'''

    def __init__(self, **kw):
        super().__init__('I', **kw)

    def _convert(self, config, lev, off, value):
        if value not in (0, 1):
            config.diagnostics.warning(lev, off, 'Paint data section unknown color type (ignored)')
            config.diagnostics.debug(lev, off, 'Color: read %08x, expected %08x or %08x', value, 0, 1)
            return True

        return bool(value)


class CompressionField(fields.StructField):

    def __init__(self, **kw):
        super().__init__('I', **kw)

    def _convert(self, config, lev, off, value):
        try:
            compression = Compression(value)
        except ValueError:
            config.diagnostics.warning(lev, off, 'Paint data section has unknown compression type, assuming none')
            config.diagnostics.debug(lev, off, 'Read compression type %d', value)
            compression = Compression.NONE

        config.diagnostics.debug(lev, off, 'Compression: %s', compression.name)

        return compression


class PaintDataSection(Chunk):
    '''A bitmap: the header gives the size in pixels and in centimetres, the
    depth and the encoding; the pixel data starts at data_offset from the
    beginning of the section (eight bytes later for clipart).'''
    section_size   = fields.StructField('I')
    data_offset    = fields.StructField('I')
    xsize          = fields.StructField('I')
    ysize          = fields.StructField('I')
    pic_xsize      = fields.LengthField()
    pic_ysize      = fields.LengthField()
    bits_per_pixel = fields.StructField('I')
    color          = ColorField()
    reserved       = fields.StructField('I', default=0x00, is_magic=True)
    compression    = CompressionField()
    # only for clipart
    clipart_marker  = fields.StructField('I', default=0xffffffff, is_magic=True)
    clipart_unknown = fields.StructField('I', default=0x44, is_magic=True)

    CLIPART_FIELDS = ('clipart_marker', 'clipart_unknown')

    def __init__(self, clipart=False, **kwargs):
        self.clipart = clipart
        super().__init__(**kwargs)

    def init(self):
        super().init()
        self.pixels = []
        self.floats = []

    def get_ordered_fields_name(self):
        names = super().get_ordered_fields_name()
        if self.clipart:
            return names

        return [_ for _ in names if _ not in self.CLIPART_FIELDS]

    def _read_pixel_data(self, config, buf, lev, off, size):
        log = config.diagnostics
        try:
            return buf.read(off, size)
        except OutOfRangeException:
            log.error(lev, off, 'Pixel data (%d bytes) past the end of the file', size)
            raise

    def unpack_fields(self, config, buf, lev, off):
        log = config.diagnostics

        super().unpack_fields(config, buf, lev, off)

        if self.data_offset.value != PIXEL_DATA_OFFSET:
            log.error(lev, self.data_offset.offset, 'Paint data section data offset has unexpected value')
            log.debug(lev, self.data_offset.offset, 'Data offset: read %08x, expected %08x',
                      self.data_offset.value, PIXEL_DATA_OFFSET)

        length = self.data_offset.value
        datasize = self.section_size.value - length
        if self.clipart:
            length += 8

        depth = self.bits_per_pixel.value
        if depth == 0:
            log.error(lev, self.bits_per_pixel.offset, 'Paint data section has zero bits per pixel')
            raise InvalidEncodingException('zero bits per pixel', offset=self.bits_per_pixel.offset)

        if self.color.value or depth != 2:
            log.warning(lev, off + length, 'All image types except 2-bit greyscale are experimental!')

        log.progress(lev, off + length, 'Going to read the pixel data')
        data = self._read_pixel_data(config, buf, lev, off + length, datasize)
        length += datasize

        decoder = DECODERS.get(self.compression.value)
        try:
            if decoder:
                log.progress(lev, off + length, 'Going to decode the %s encoding', self.compression.value.name)
                data = decoder(data)

            log.progress(lev, off + length, 'Going to convert the bytes to pixels')
            self.pixels = bytes_to_pixels(data, depth, self.xsize.value, self.ysize.value)
        except OutOfRangeException as e:
            log.error(lev, off + length, 'Decoding of the pixel data failed')
            e.offset = off + length
            raise

        palette = PALETTE_COLOR_4 if self.color.value and depth == 4 else None
        if palette and any(_ >= len(palette) for _ in self.pixels):
            log.warning(lev, off + length, 'Invalid palet color found (using color 0x00)')
        self.floats = pixels_to_floats(self.pixels, depth, self.color.value, palette=palette)

        return length

    def to_image(self):
        '''Returns the picture as a RGB Pillow image'''
        image = Image.new('RGB', (self.xsize.value, self.ysize.value))
        image.putdata([tuple(int(round(_ * 255)) for _ in pixel) for pixel in self.floats])

        return image


class SketchSection(Chunk):
    displayed_xsize         = fields.StructField('H')
    displayed_ysize         = fields.StructField('H')
    picture_data_x_offset   = fields.StructField('H')
    picture_data_y_offset   = fields.StructField('H')
    displayed_size_x_offset = fields.StructField('H')
    displayed_size_y_offset = fields.StructField('H')
    form_xsize              = fields.StructField('H')
    form_ysize              = fields.StructField('H')
    reserved                = fields.StructField('H', default=0x00, is_magic=True)
    picture                 = PaintDataSection()
    raw_magnification_x     = fields.StructField('H')
    raw_magnification_y     = fields.StructField('H')
    raw_cut_left            = fields.StructField('I')
    raw_cut_right           = fields.StructField('I')
    raw_cut_top             = fields.StructField('I')
    raw_cut_bottom          = fields.StructField('I')

    @property
    def magnification_x(self):
        return self.raw_magnification_x.value / 1000.0

    @property
    def magnification_y(self):
        return self.raw_magnification_y.value / 1000.0

    def _cut(self, raw, displayed):
        return raw.value * 6.0 / displayed.value if displayed.value else 0.0

    @property
    def cut_left(self):
        return self._cut(self.raw_cut_left, self.displayed_xsize)

    @property
    def cut_right(self):
        return self._cut(self.raw_cut_right, self.displayed_xsize)

    @property
    def cut_top(self):
        return self._cut(self.raw_cut_top, self.displayed_ysize)

    @property
    def cut_bottom(self):
        return self._cut(self.raw_cut_bottom, self.displayed_ysize)

    def validate(self, config, lev, off):
        log = config.diagnostics
        if not self.displayed_xsize.value or not self.displayed_ysize.value:
            log.warning(lev, off, 'Sketch section with a zero displayed size: cuts set to zero')

        log.debug(lev, off, 'Cuts: left %f, right %f, top %f, bottom %f',
                  self.cut_left, self.cut_right, self.cut_top, self.cut_bottom)


class ClipartSection(Chunk):
    item_id   = fields.StructField('I', default=BodyId.CLIPART_ITEM, is_magic=True)
    unknown1  = fields.StructField('I', default=0x02, is_magic=True)
    unknown2  = fields.StructField('I', default=0x00, is_magic=True)
    unknown3  = fields.StructField('I', default=0x00, is_magic=True)
    unknown4  = fields.StructField('I', default=0x0c)
    picture   = PaintDataSection(clipart=True)

    def unpack_fields(self, config, buf, lev, off):
        length = super().unpack_fields(config, buf, lev, off)

        if self.unknown4.value not in (0x0c, 0x08):
            config.diagnostics.warning(lev, self.unknown4.offset,
                                       'Unexpected value in clipart section preamble (ignored)')
            config.diagnostics.debug(lev, self.unknown4.offset, 'Read %08x, expected %08x or %08x',
                                     self.unknown4.value, 0x0c, 0x08)

        return length
