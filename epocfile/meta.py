"""
Machinery behind the declarative description of a section

    class PageLayoutSection(Chunk):
        first_page_nr   = fields.StructField('I')
        header_distance = fields.LengthField()

The metaclass records the names of the fields in the order they are declared
and replaces each of them with a descriptor; the first access from an
instance gives that instance its private copy of the declared field, so that
two sections never share decoded values.
"""
import copy
import logging
import re


logger = logging.getLogger(__name__)


def describe(name: str) -> str:
    '''WordStatusSection -> "word status section"'''
    return ' '.join(_.lower() for _ in re.findall(r'[A-Z][a-z0-9]*', name)) or name


class FieldDescriptor(object):
    """Per-instance access to a declared field."""

    def __init__(self, prototype: "FieldBase", name: str):
        prototype.name = name
        self.prototype = prototype

    @property
    def name(self):
        return self.prototype.name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self.prototype

        try:
            return instance.__dict__[self.name]
        except KeyError:
            field = self.prototype.create(father=instance)
            instance.__dict__[self.name] = field
            return field

    def __set__(self, instance, value):
        expected = self.prototype.__class__
        if not isinstance(value, expected):
            raise ValueError(f"field '{self.name}' accepts only instances of {expected.__name__}")

        value.name, value.father = self.name, instance
        instance.__dict__[self.name] = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls._meta.fields:
            raise AttributeError(f"field '{name}' declared twice in {cls.__name__}")

        cls._meta.fields.append(name)
        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        '''A fresh copy of this field attached to father'''
        field = copy.deepcopy(self)
        field.father = father
        return field


class Meta(object):
    """What the metaclass knows about a chunk: its fields in order of
    declaration and a description used in the diagnostics."""

    def __init__(self, name, inherited=()):
        self.fields = list(inherited)
        self.description = describe(name)


class MetaChunk(type):

    def __new__(mcs, name, bases, attrs):
        declared = {_: __ for _, __ in attrs.items() if isinstance(__, FieldBase)}
        for field_name in declared:
            del attrs[field_name]

        cls = super().__new__(mcs, name, bases, attrs)

        inherited = []
        for base in bases:
            for field_name in getattr(base, '_meta', Meta(base.__name__)).fields:
                if field_name not in inherited:
                    inherited.append(field_name)

        cls._meta = Meta(name, inherited)

        for field_name, field in declared.items():
            logger.debug('%s: field \'%s\' of type %s', name, field_name, field.__class__.__name__)
            field.contribute_to_chunk(cls, field_name)

        return cls
