"""
A Field is "fundamental" datatype from the format point of view, something
directly unpackable from a buffer at a given offset.

Every field has the same entry point

    length = field.unpack(config, buf, lev, off)

that stores the decoded value into field.value and returns the number of
bytes consumed; the classmethod read() does the same without keeping the
field around and returns the couple (value, length).
"""
import struct
from enum import Enum, Flag

from bitstring import BitArray

from .charset import read_char, make_printable
from .enum import Compliant
from .meta import FieldBase
from .properties import PropertyDescriptor
from .exceptions import (
    EnumException,
    EpocException,
    InvalidEncodingException,
    MagicException,
    MalformedStringException,
    OutOfRangeException,
    PreconditionException,
)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, compliant=Compliant.INHERIT, is_magic=False):
        super().__init__()
        self.name = name
        self.father = father
        self.default = default
        self.offset = None
        self._size = 0
        self.compliant = compliant
        self.is_magic = is_magic
        self.released = False

        self.init()

    def init(self):
        self.value = self.default

    def __str__(self):
        return str(self.value)

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.value)

    def _get_size(self):
        return self._size

    size = property(
        fget=lambda self: self._get_size(),
    )

    def is_compliant(self, config, level):
        '''Returns True if the level of compliance is requested by this field,
        by the fields containing it or, at last, by the configuration.'''
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                return False

            instance = instance.father

        return bool(config.compliant & level)

    def unpack(self, config, buf, lev, off):
        raise NotImplementedError(f'method {self.__class__.__name__}.unpack() not implemented')

    @classmethod
    def read(cls, config, buf, lev, off, *args, **kwargs):
        field = cls(*args, **kwargs)
        length = field.unpack(config, buf, lev, off)

        return field.value, length

    def release(self):
        if self.released:
            raise RuntimeError(f"field '{self.name}' of type {self.__class__.__name__} released twice")

        self.released = True


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    little-endian integers from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum (or enum.Flag) so to have directly a representation of the integer value of
    the field itself.
    """
    WIDTHS = {
        'B': 'byte',
        'H': 'word',
        'I': 'long',
    }

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def __repr__(self):
        if self.enum or not isinstance(self.value, int):
            return f'<{self.__class__.__name__}({self.value!r})>'

        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def get_format(self):
        return '<%s' % self.format

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _read_raw(self, config, buf, lev, off, size):
        try:
            return buf.read(off, size)
        except OutOfRangeException:
            config.diagnostics.error(lev, off, 'Trying %s read past the end of the file',
                                     self.WIDTHS.get(self.format, 'data'))
            raise

    def _unpack_struct(self, config, buf, lev, off) -> int:
        raw = self._read_raw(config, buf, lev, off, self.size)
        return struct.unpack(self.get_format(), raw)[0]

    def _unpack_flags(self, config, lev, off, value: int) -> Flag:
        known = 0
        for member in self.enum:
            known |= member.value

        unknown = value & ~known
        if unknown:
            if self.is_compliant(config, Compliant.ENUM):
                config.diagnostics.error(lev, off, 'Unknown flags 0x%x for %s', unknown, self.enum.__name__)
                raise EnumException('unknown flags 0x%x' % unknown, offset=off)
            config.diagnostics.warning(lev, off, 'Unknown flags 0x%x for %s (ignored)', unknown, self.enum.__name__)

        return self.enum(value & known)

    def _unpack_enum(self, config, lev, off, value: int) -> Enum:
        if issubclass(self.enum, Flag):
            return self._unpack_flags(config, lev, off, value)

        try:
            return self.enum(value)
        except ValueError:
            if self.is_compliant(config, Compliant.ENUM):
                config.diagnostics.error(lev, off, 'Unknown value 0x%x for %s', value, self.enum.__name__)
                raise EnumException('unknown value 0x%x' % value, offset=off)

            config.diagnostics.warning(lev, off, 'Unknown value 0x%x for %s (ignored)', value, self.enum.__name__)

        return value

    def _convert(self, config, lev, off, value):
        '''Hook to transform the integer just unpacked'''
        return value

    def unpack(self, config, buf, lev, off):
        self.offset = off
        value = self._unpack_struct(config, buf, lev, off)

        if self.is_magic and value != self.default:
            config.diagnostics.warning(lev, off, "Field '%s' has value 0x%x instead of 0x%x",
                                       self.name, value, self.default)
            if self.is_compliant(config, Compliant.MAGIC):
                raise MagicException('magic mismatch for %s' % self.name, offset=off)

        if self.enum:
            value = self._unpack_enum(config, lev, off, value)

        self.value = self._convert(config, lev, off, value)

        return self.size


class SignedField(StructField):
    '''32 bits with the sign in bit 31 and the magnitude in the others.'''

    def __init__(self, **kw):
        super().__init__('I', **kw)

    def _convert(self, config, lev, off, value):
        magnitude = value & 0x7fffffff
        return -magnitude if value & 0x80000000 else magnitude


class LengthField(SignedField):
    '''A distance stored in twips, returned in centimetres.'''

    def _convert(self, config, lev, off, value):
        value = super()._convert(config, lev, off, value) * 2.54 / 1440.0
        config.diagnostics.debug(lev, off, 'Length value: %f', value)
        return value


class SizeField(SignedField):
    '''A size stored in twentieths of a point, returned in points.'''

    def _convert(self, config, lev, off, value):
        value = super()._convert(config, lev, off, value) / 20.0
        config.diagnostics.debug(lev, off, 'Size value: %f', value)
        return value


class BoolField(StructField):

    def __init__(self, default=False, **kw):
        super().__init__('B', default=default, **kw)

    def _convert(self, config, lev, off, value):
        if value == 0:
            return False
        if value != 1:
            config.diagnostics.warning(lev, off, 'Unknown value for boolean')
            config.diagnostics.debug(lev, off, 'Boolean value: %02x', value)

        return True


class SIndicatorField(Field):
    '''Variable length count: one byte (xxxxxx10) or two bytes (xxxxx101).'''

    def __init__(self, **kw):
        super().__init__(default=0, **kw)

    def unpack(self, config, buf, lev, off):
        log = config.diagnostics
        log.progress(lev + 1, off, 'Going to read a S length indicator')
        self.offset = off

        byte, _ = StructField.read(config, buf, lev + 2, off, 'B')
        if (byte & 0x03) == 0x02:
            value, length = byte >> 2, 1
        elif (byte & 0x07) == 0x05:
            word, length = StructField.read(config, buf, lev + 2, off, 'H')
            value = word >> 3
        else:
            log.error(lev + 1, off, 'S indicator: invalid encoding (0x%02x)', byte)
            raise InvalidEncodingException('invalid S indicator 0x%02x' % byte, offset=off)

        log.debug(lev + 1, off, 'S indicator value: %04x', value)
        log.progress(lev + 1, off + length - 1, 'End of S length indicator (total length: %08x)', length)

        self.value, self._size = value, length

        return length


class XIndicatorField(Field):
    '''Variable length count: one (xxxxxxx0), two (xxxxxx01) or four (xxxxx011) bytes.'''

    def __init__(self, **kw):
        super().__init__(default=0, **kw)

    def unpack(self, config, buf, lev, off):
        log = config.diagnostics
        log.progress(lev + 1, off, 'Going to read a X length indicator')
        self.offset = off

        byte, _ = StructField.read(config, buf, lev + 2, off, 'B')
        if (byte & 0x01) == 0x00:
            value, length = byte >> 1, 1
        elif (byte & 0x03) == 0x01:
            word, length = StructField.read(config, buf, lev + 2, off, 'H')
            value = word >> 2
        elif (byte & 0x07) == 0x03:
            long, length = StructField.read(config, buf, lev + 2, off, 'I')
            value = long >> 3
        else:
            log.error(lev + 1, off, 'X indicator: invalid encoding (0x%02x)', byte)
            raise InvalidEncodingException('invalid X indicator 0x%02x' % byte, offset=off)

        log.debug(lev + 1, off, 'X indicator value: %08x', value)
        log.progress(lev + 1, off + length - 1, 'End of X length indicator (total length: %08x)', length)

        self.value, self._size = value, length

        return length


class FloatField(Field):
    '''Eight bytes: six and a bit of mantissa (explicit leading one), then a
    16-bit word with the sign in bit 15 and the exponent in bits 4-14.'''
    BIAS = 0x3ff

    def __init__(self, **kw):
        super().__init__(default=0.0, **kw)

    def _get_size(self):
        return 8

    def unpack(self, config, buf, lev, off):
        log = config.diagnostics
        log.progress(lev + 1, off, 'Going to read a float')
        self.offset = off

        try:
            raw = buf.read(off, 8)
        except OutOfRangeException:
            log.error(lev + 1, off, 'Reading of float failed')
            raise

        bits = BitArray(bytes=raw[:7])

        mantissa, weight = 1.0, 0.5
        # bit position p lives in byte p >> 3 at bit p & 7 (bit 0 is the LSB)
        for position in range(0x33, 0, -1):
            if bits[(position >> 3) * 8 + 7 - (position & 0x07)]:
                mantissa += weight
            weight /= 2.0

        word = struct.unpack('<H', raw[6:8])[0]
        exponent = (word & 0x7ff0) >> 4

        value = mantissa * 2.0 ** (exponent - self.BIAS)
        if word & 0x8000:
            value = -value

        log.debug(lev + 1, off, 'Float value: %f', value)

        self.value = value

        return self.size


class CharListField(Field):
    """Sequence of characters spanning exactly n bytes; the single characters
    are decoded by the character set of the configuration."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        self.length = n if n is not None else 0
        super().__init__(default='', **kw)

    def __len__(self):
        return len(self.value)

    def _unpack_chars(self, config, buf, lev, off, count):
        log = config.diagnostics
        text = []
        i = 0
        while i < count:
            code, length = read_char(config, buf, lev + 1, off + i)
            if i + length > count:
                log.error(lev + 1, off + i, 'Malformed string')
                raise MalformedStringException(
                    'character at %d would overshoot the declared %d bytes' % (i, count), offset=off + i)
            text.append(chr(code))
            i += length

        self.value = ''.join(text)
        log.debug(lev + 1, off, 'String: "%s"', make_printable(self.value))

        return i

    def unpack(self, config, buf, lev, off):
        log = config.diagnostics
        self.offset = off
        count = self.length

        if count <= 0:
            log.error(lev + 1, off, 'Number of characters must be positive (%d)', count)
            raise PreconditionException('non positive character count %d' % count, offset=off)

        log.progress(lev + 1, off, 'Going to read a character list (%d bytes)', count)
        self._size = self._unpack_chars(config, buf, lev, off, count)

        return self._size


class StringField(CharListField):
    '''Long form: the number of bytes is given by a preceding S indicator.'''
    count_field = SIndicatorField

    def __init__(self, **kw):
        super().__init__(n=None, **kw)

    def _read_count(self, config, buf, lev, off):
        return self.count_field.read(config, buf, lev, off)

    def unpack(self, config, buf, lev, off):
        log = config.diagnostics
        log.progress(lev + 1, off, 'Going to read a string')
        self.offset = off

        count, length = self._read_count(config, buf, lev + 2, off)
        log.debug(lev + 2, off, 'Length: %d', count)

        length += self._unpack_chars(config, buf, lev + 1, off + length, count)
        log.progress(lev + 1, off + length - 1, 'End of string (total length: %08x)', length)

        self.length = count
        self._size = length

        return length


class ShortStringField(StringField):
    '''Short form: the number of bytes is given by a preceding single byte.'''

    def _read_count(self, config, buf, lev, off):
        return StructField.read(config, buf, lev, off, 'B')


class ArrayField(Field):
    '''Unpack an array of fields (or Chunks) one after the other.

    You indicate the number of elements via the parameter named "n", directly
    or as a Dependency on a field unpacked before.

    This class behaves like a list.
    '''
    n = PropertyDescriptor('n', int)

    def __init__(self, field_cls, n=0, **kw):
        self.field_cls = field_cls
        self.n = n
        super().__init__(default=None, **kw)

    def init(self):
        self.value = []

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def instance_element(self, index):
        element = self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy
        element.name = '%s[%d]' % (self.name, index)
        return element

    def unpack(self, config, buf, lev, off):
        self.offset = off
        self.value = []

        length = 0
        for index in range(self.n):
            element = self.instance_element(index)
            try:
                length += element.unpack(config, buf, lev, off + length)
            except EpocException as e:
                e.chain.append('[%d]' % index)
                raise
            self.value.append(element)

        self._size = length

        return length

    def release(self):
        for element in reversed(self.value):
            element.release()
        super().release()
