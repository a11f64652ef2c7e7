"""
Configuration of a decoding session.

A Configuration is an immutable value built once and passed to every unpack()
call: changing the character set or the verbosity means deriving a new
value with replace(), never mutating the one a decode is using.
"""
import dataclasses
import os
from functools import cached_property
from typing import Optional, Tuple

from .charset import Charset, TABLES
from .diagnostics import Diagnostics
from .enum import Compliant, Verbosity


@dataclasses.dataclass(frozen=True)
class Configuration:
    verbosity: Verbosity = Verbosity.WARN
    charset: Charset = Charset.CP1252
    unknown_unicode_char: str = '?'
    compliant: Compliant = Compliant.NONE
    # overrides the table selected by charset when given
    table: Optional[Tuple[int, ...]] = None
    logger_name: str = 'epocfile'

    def __post_init__(self):
        if self.table is not None and len(self.table) != 0x100:
            raise ValueError('a translation table must have 256 entries, not %d' % len(self.table))

        if len(self.unknown_unicode_char) != 1:
            raise ValueError("'unknown_unicode_char' must be a single character")

    @classmethod
    def default(cls):
        return cls()

    @classmethod
    def from_environ(cls, environ=None, **kwargs):
        '''The presence of DEBUG in the environment turns on the most
        verbose diagnostics.'''
        environ = os.environ if environ is None else environ
        if 'DEBUG' in environ:
            kwargs.setdefault('verbosity', Verbosity.DEBUG)

        return cls(**kwargs)

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)

    @property
    def unicode(self) -> bool:
        return self.charset == Charset.UNICODE

    @property
    def unicode_table(self) -> Tuple[int, ...]:
        if self.table is not None:
            return self.table

        return TABLES[self.charset]

    @cached_property
    def diagnostics(self):
        return Diagnostics(self)
