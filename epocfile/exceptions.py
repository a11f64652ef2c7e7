from .enum import ErrorCode


class EpocException(Exception):
    '''Base class to extend in order to throw exception in epocfile.

    Apart from a human readable message it carries the chain of the layers
    that the exception crossed while propagating (innermost first) and the
    offset where the failure was detected.
    '''
    code = ErrorCode.OTHER

    def __init__(self, message='', chain=None, offset=None):
        self.message = message
        self.chain = chain if chain is not None else []
        self.offset = offset
        super().__init__(message)

    def __str__(self):
        msg = self.message
        if self.offset is not None:
            msg = '%s (offset %08x)' % (msg, self.offset)
        if self.chain:
            msg = '%s [%s]' % (msg, ' <- '.join(self.chain))
        return msg


class UnpackException(EpocException):
    code = ErrorCode.PARSE


class OutOfRangeException(UnpackException):
    '''Reading past the available data.'''
    pass


class InvalidEncodingException(UnpackException):
    '''A variable length value or a character has an unrecognized bit pattern.'''
    pass


class MalformedStringException(UnpackException):
    pass


class MagicException(UnpackException):
    pass


class EnumException(UnpackException):
    pass


class ChecksumException(UnpackException):
    pass


class AllocationException(EpocException):
    code = ErrorCode.NOMEM


class RequiredSectionMissingException(UnpackException):

    def __init__(self, slot, **kwargs):
        self.slot = slot
        super().__init__('%s section not found in the section table' % slot, **kwargs)


class UnexpectedApplicationException(UnpackException):
    pass


class EncryptedUnsupportedException(EpocException):
    '''This is useful when is not possible to go on: password protected
    documents are never decoded.'''
    code = ErrorCode.PARSE


class PreconditionException(EpocException):
    pass
