import pytest

from epocfile import Buffer
from epocfile.core import Chunk
from epocfile import fields
from epocfile.exceptions import EpocException, OutOfRangeException
from epocfile.meta import describe
from epocfile.properties import Dependency
from epocfile.sections.common import WordStylesSection, WorkbookSection


class Simple(Chunk):
    kind   = fields.StructField('B')
    length = fields.StructField('B')
    data   = fields.CharListField(n=Dependency('.length'))


class Nested(Chunk):
    magic  = fields.StructField('H', default=0xcafe)
    simple = Simple()
    items  = fields.ArrayField(fields.StructField('B'), n=Dependency('simple.length'))


def test_chunk_fields_order():
    assert Simple._meta.fields == ['kind', 'length', 'data']
    assert Nested._meta.fields == ['magic', 'simple', 'items']


def test_chunk_instances_are_independent():
    first, second = Simple(), Simple()

    assert first.kind is not second.kind
    assert first.kind.father is first


def test_chunk_unpack(config):
    simple = Simple()
    length = simple.unpack(config, Buffer(b'\x01\x03abcd'), 0, 0)

    assert length == 5
    assert simple.size == 5
    assert simple.kind.value == 0x01
    assert simple.data.value == 'abc'
    assert simple.layout == {
        'kind': (0, 1),
        'length': (1, 1),
        'data': (2, 3),
    }


def test_chunk_from_source():
    simple = Simple(b'\x00\x00\x02\x02hi', offset=2)

    assert simple.offset == 2
    assert simple.data.value == 'hi'


def test_chunk_nested_dependency(config):
    nested = Nested()
    length = nested.unpack(config, Buffer(b'\xfe\xca\x07\x02hi\x01\x02'), 0, 0)

    assert length == 8
    assert nested.simple.data.value == 'hi'
    assert [_.value for _ in nested.items] == [1, 2]
    assert nested.items[1].name == 'items[1]'


def test_chunk_failure_chain(config, caplog):
    nested = Nested()

    with pytest.raises(OutOfRangeException) as excinfo:
        nested.unpack(config, Buffer(b'\xfe\xca\x07\x02hi\x01'), 0, 0)

    assert excinfo.value.chain == ['[1]', 'items']
    assert excinfo.value.offset == 7
    assert isinstance(excinfo.value, EpocException)
    assert 'Reading of nested failed' in caplog.text


def test_chunk_release(config):
    simple = Simple(b'\x01\x01a')
    simple.release()

    assert simple.released
    assert all(_.released for __, _ in simple.get_fields())

    with pytest.raises(RuntimeError):
        simple.release()


def test_field_assignment_type_checked():
    simple = Simple()

    with pytest.raises(ValueError):
        simple.kind = fields.StringField()


def test_chunk_description():
    assert describe('WordStatusSection') == 'word status section'
    assert WordStylesSection().get_description() == 'word styles section'
    assert WorkbookSection().get_description() == 'sheet workbook section'


def test_chunk_inherits_fields():
    class Extended(Simple):
        trailer = fields.StructField('B')

    assert Extended._meta.fields == ['kind', 'length', 'data', 'trailer']
    assert Extended(b'\x00\x01a\xff').trailer.value == 0xff
