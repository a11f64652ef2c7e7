from enum import Enum, Flag, IntEnum


class Compliant(Flag):
    '''It indicates which degree of compliantness the data must reflect the format'''
    NONE  = 0
    ENUM  = 1 << 0
    MAGIC = 1 << 1
    INHERIT = 1 << 2


class Verbosity(IntEnum):
    '''How chatty the diagnostics are: a channel is emitted only when the
    configured verbosity is at least its own level.'''
    FATAL    = 1
    ERROR    = 2
    WARN     = 3
    PROGRESS = 4
    DEBUG    = 5


class ErrorCode(Enum):
    OTHER = 1
    NOMEM = 2
    PARSE = 3


class FileType(Enum):
    '''Kind of document announced by the header'''
    UNKNOWN = 0
    WORD    = 1
    TEXTED  = 2
    SKETCH  = 3
    MBM     = 4
    CLIPART = 5
    SHEET   = 6
