"""
Chunk: a structure of a document made of other fields, like the header
or the body of a section.
"""
from typing import Tuple, List, Dict

from .configuration import Configuration
from .fields import Field
from .meta import MetaChunk
from .streams import Buffer
from .exceptions import EpocException


class Chunk(Field, metaclass=MetaChunk):
    """
    A sequence of fields unpacked one after the other; after unpack() its
    offset and size delimit it into the buffer.

    A Chunk can contain sub-chunks, declared as class attributes in the order
    they appear into the buffer. The default unpack() reads them one after the
    other; sections with a layout that depends on the data override
    unpack_fields() and use unpack_field() for each part they read.

    Passing some data to the constructor unpacks it right away

        status = WordStatusSection(b'\\x02...')
    """
    description = None

    def __init__(self, source=None, config=None, offset=0, **kwargs):
        super().__init__(**kwargs)

        if source is not None:
            buf = source if isinstance(source, Buffer) else Buffer(source)
            self.unpack(config or Configuration.default(), buf, 0, offset)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def get_description(self) -> str:
        return self.description or self._meta.description

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(
            '%s=%r' % (_, field) for _, field in self.get_fields()))

    def __str__(self):
        return ''.join('%s: %r\n' % (_, field) for _, field in self.get_fields())

    def init(self):
        for _, field in self.get_fields():
            field.init()

    @property
    def value(self):
        return self

    @value.setter
    def value(self, value):
        if value is not None and value is not self:
            raise AttributeError(f'a {self.__class__.__name__} has no value to set')

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def unpack_field(self, name, config, buf, lev, off) -> int:
        '''Unpack the field named "name" at the given offset. The failure is
        annotated with the name of the field before propagating it.'''
        field = getattr(self, name)
        try:
            return field.unpack(config, buf, lev, off)
        except EpocException as e:
            e.chain.append(name)
            raise

    def unpack_fields(self, config, buf, lev, off) -> int:
        length = 0
        for field_name in self.get_ordered_fields_name():
            length += self.unpack_field(field_name, config, buf, lev, off + length)

        return length

    def validate(self, config, lev, off):
        '''Hook called when all the fields are unpacked'''
        pass

    def unpack(self, config, buf, lev, off):
        '''Read the fields starting at off and return the number of bytes used.

        The diagnostics follow the nesting: the chunk reports its start and
        its end at level lev + 1 and its fields at level lev + 2.
        '''
        log = config.diagnostics
        log.progress(lev + 1, off, 'Going to read the %s', self.get_description())

        self.offset = off
        try:
            self._size = self.unpack_fields(config, buf, lev + 2, off)
            self.validate(config, lev + 1, off)
        except EpocException:
            log.error(lev + 1, off, 'Reading of %s failed', self.get_description())
            raise

        log.progress(lev + 1, off + self._size - 1, 'End of %s (total length: %08x)',
                     self.get_description(), self._size)

        return self._size

    def release(self):
        for _, field in reversed(self.get_fields()):
            if not field.released:
                field.release()
        super().release()
