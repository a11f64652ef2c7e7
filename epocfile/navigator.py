"""
Tables locating the parts of a document.

The section table maps identifiers to offsets and it is used by every
document with an application id; the jump table is a bare list of offsets
whose index is the number of the picture it points to.
"""
from collections import namedtuple

from .core import Chunk
from . import fields
from .properties import Dependency, RatioDependency


SectionTableEntry = namedtuple('SectionTableEntry', ['identifier', 'offset'])


class SectionTableEntryChunk(Chunk):
    description = 'section table entry'
    section_id     = fields.StructField('I')
    section_offset = fields.StructField('I')

    @property
    def entry(self):
        return SectionTableEntry(self.section_id.value, self.section_offset.value)


class SectionTableSection(Chunk):
    '''The first byte is the number of 32 bits words following it: each
    entry takes two of them.'''
    nr      = fields.StructField('B')
    entries = fields.ArrayField(SectionTableEntryChunk(), n=RatioDependency(2, '.nr'))

    def validate(self, config, lev, off):
        if self.nr.value % 2:
            config.diagnostics.warning(lev, off, 'Section table length odd - ignoring last entry')

        for entry in self.entries:
            config.diagnostics.debug(lev + 1, entry.offset, 'Section: %08x at %08x',
                                     entry.section_id.value, entry.section_offset.value)

    def __iter__(self):
        return (_.entry for _ in self.entries)

    def __len__(self):
        return len(self.entries)

    def lookup(self):
        '''Map each identifier to its offset: when an identifier repeats the
        last occurrence wins. An offset 0 marks the section as absent.'''
        result = {}
        for identifier, offset in self:
            result[identifier] = offset

        return result


class JumpTableSection(Chunk):
    count   = fields.StructField('I')
    entries = fields.ArrayField(fields.StructField('I'), n=Dependency('.count'))

    def validate(self, config, lev, off):
        for index, offset in enumerate(self.offsets):
            config.diagnostics.debug(lev + 1, off, 'Offset %d: %08x', index, offset)

    @property
    def offsets(self):
        return [_.value for _ in self.entries]

    def __iter__(self):
        return iter(self.offsets)

    def __len__(self):
        return len(self.entries)
