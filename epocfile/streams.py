import logging
import os

from .exceptions import OutOfRangeException


logger = logging.getLogger(__name__)


class Buffer(object):
    '''This is a simple wrapper around the raw data of a document: it
    never changes and every access is checked against its boundaries, so
    that reading outside it is a failure and not garbage.'''

    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as bytes'''
        if isinstance(obj, os.PathLike):
            obj = os.fspath(obj)

        init_method_name = 'init_%s' % obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to build a buffer from' % obj.__class__.__name__)

        self._data = init_method(obj)

    def init_str(self, path):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % path)
        with open(path, 'rb') as f:
            return f.read()

    def init_bytes(self, data):
        '''We think these are raw bytes'''
        return data

    def init_bytearray(self, data):
        return bytes(data)

    def init_memoryview(self, data):
        return data.tobytes()

    def init_Buffer(self, other):
        return other._data

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return '<%s(%d bytes)>' % (self.__class__.__name__, len(self))

    def get(self, offset):
        '''Returns the byte at the given offset or None if out of range.'''
        if offset < 0 or offset >= len(self._data):
            return None

        return self._data[offset]

    def read(self, offset, n):
        '''Returns exactly n bytes starting from offset.'''
        if offset < 0 or n < 0 or offset + n > len(self._data):
            raise OutOfRangeException(
                'reading %d bytes past the end of a buffer of %d bytes' % (n, len(self._data)),
                offset=offset)

        return self._data[offset:offset + n]
