'''
Identifiers found into the documents: the UIDs of the file header, the
identifiers of the section table entries and the ones used inside the
section bodies.
'''
from enum import IntEnum


class FileUid(IntEnum):
    PSION5    = 0x10000037
    CLIPART   = 0x10000041
    DATA_FILE = 0x1000006D
    MBM_FILE  = 0x10000042


class ApplicationUid(IntEnum):
    '''Third UID of a data file, repeated into the application id section'''
    WORD   = 0x1000007F
    TEXTED = 0x10000085
    SKETCH = 0x1000007D
    SHEET  = 0x10000088


class SectionId(IntEnum):
    WORD_STATUS    = 0x10000243
    APPL_ID        = 0x10000089
    TEXT           = 0x10000106
    LAYOUT         = 0x10000143
    WORD_STYLES    = 0x10000104
    PAGE_LAYOUT    = 0x10000105
    PASSWORD       = 0x100000CD
    SKETCH         = 0x1000007D
    SHEET_STATUS   = 0x1000011F
    SHEET_WORKBOOK = 0x1000011D
    TEXTED         = 0x10000085


class BodyId(IntEnum):
    PAGE_DIMENSIONS1   = 0x100000FD
    PAGE_DIMENSIONS2   = 0x1000010E
    TEXTED_BODY        = 0x1000005C
    TEXTED_REPLACEMENT = 0x10000063
    TEXTED_UNKNOWN     = 0x10000065
    TEXTED_LAYOUT      = 0x10000066
    TEXTED_TEXT        = 0x10000064
    CLIPART_ITEM       = 0x10000040
