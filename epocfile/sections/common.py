'''
Sections shared by every kind of document: the file header, the application
id and the placeholder for the bodies not decoded by this package.
'''
from epocfile.core import Chunk
from epocfile import fields
from epocfile.common.checkuid import CheckUidField
from epocfile.enum import FileType
from epocfile.exceptions import ChecksumException, UnpackException
from epocfile.ids import ApplicationUid, FileUid


DATA_FILE_TYPES = {
    ApplicationUid.WORD: FileType.WORD,
    ApplicationUid.TEXTED: FileType.TEXTED,
    ApplicationUid.SKETCH: FileType.SKETCH,
    ApplicationUid.SHEET: FileType.SHEET,
}


class HeaderSection(Chunk):
    '''Four UIDs: the first tells if it's a clipart file (and in this case the
    header stops there), the second and the third the kind of document and
    the last one is a checksum of the others.'''
    uid1 = fields.StructField('I')
    uid2 = fields.StructField('I')
    uid3 = fields.StructField('I')
    uid4 = CheckUidField(['uid1', 'uid2', 'uid3'])

    def init(self):
        super().init()
        self.file = FileType.UNKNOWN

    def _classify(self, config, lev, off):
        log = config.diagnostics
        uid2, uid3 = self.uid2.value, self.uid3.value

        if uid2 == FileUid.DATA_FILE:
            if uid3 in DATA_FILE_TYPES:
                return DATA_FILE_TYPES[uid3]
            log.warning(lev, off, 'UID3 has unknown value for a data file (%08x)', uid3)
        elif uid2 == FileUid.MBM_FILE:
            if uid3 != 0:
                log.warning(lev, off, 'UID3 set in MBM file?!? (%08x)', uid3)
            return FileType.MBM
        else:
            log.warning(lev, off, 'UID2 has unknown value (%08x)', uid2)

        return FileType.UNKNOWN

    def unpack_fields(self, config, buf, lev, off):
        log = config.diagnostics

        length = self.unpack_field('uid1', config, buf, lev, off)
        log.debug(lev, off, 'UID1: %08x', self.uid1.value)

        if self.uid1.value == FileUid.CLIPART:
            log.debug(lev, off, 'File is a Clipart file')
            self.file = FileType.CLIPART
            return length

        if self.uid1.value != FileUid.PSION5:
            log.error(lev, off, 'UID1 has unknown value. This is probably not a (parsable) Psion 5 file')
            raise UnpackException('unknown UID1 %08x' % self.uid1.value, offset=off)

        length += self.unpack_field('uid2', config, buf, lev, off + length)
        length += self.unpack_field('uid3', config, buf, lev, off + length)
        log.debug(lev, off + 4, 'UID2: %08x; UID3: %08x', self.uid2.value, self.uid3.value)

        self.file = self._classify(config, lev, off + 4)

        length += self.unpack_field('uid4', config, buf, lev, off + length)
        if not self.uid4.is_valid():
            log.error(lev, off + 12, 'UID4 (%08x) does not match checksum (%08x)',
                      self.uid4.value, self.uid4.calculate())
            raise ChecksumException('checksum mismatch', offset=off + 12)

        return length


def applid_matches(found, sought):
    '''The names are compared ignoring the case of the ASCII letters only:
    the sought name must be lowercase.'''
    if len(found) != len(sought):
        return False

    for f, s in zip(found, sought):
        if f == s:
            continue
        if 'a' <= s <= 'z' and ord(f) == ord(s) - 0x20:
            continue
        return False

    return True


class ApplicationIdSection(Chunk):
    uid      = fields.StructField('I')
    app_name = fields.StringField()

    def validate(self, config, lev, off):
        config.diagnostics.debug(lev, off, 'ID: %08x, name: "%s"', self.uid.value, self.app_name.value)

    def matches(self, uid, name):
        return self.uid.value == uid and applid_matches(self.app_name.value, name)


class OpaqueSection(Chunk):
    '''Placeholder for a section body this package does not decode: it keeps
    the offset and a preview of the raw data so that it can be decoded later
    by somebody else.'''
    PREVIEW = 0x40

    def __init__(self, **kwargs):
        self.raw = b''
        super().__init__(**kwargs)

    def unpack_fields(self, config, buf, lev, off):
        self.raw = buf.read(off, max(1, min(self.PREVIEW, len(buf) - off)))
        config.diagnostics.debug(lev, off, 'Section body not decoded (%s)', self.get_description())
        return 0


class WordStylesSection(OpaqueSection):
    pass


class StyledLayoutSection(OpaqueSection):
    '''The layout of the paragraphs refers to the styles table'''

    def __init__(self, text=None, styles=None, **kwargs):
        self.text = text
        self.styles = styles
        super().__init__(**kwargs)


class WorkbookSection(OpaqueSection):
    description = 'sheet workbook section'
