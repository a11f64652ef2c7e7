import dataclasses
import logging

import pytest

from epocfile import Charset, Compliant, Configuration, Verbosity
from epocfile.charset import TABLE_CP1252


def test_default():
    config = Configuration.default()

    assert config.verbosity == Verbosity.WARN
    assert config.charset == Charset.CP1252
    assert config.compliant == Compliant.NONE
    assert config.unicode_table is TABLE_CP1252


def test_immutable():
    config = Configuration.default()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.verbosity = Verbosity.DEBUG

    other = config.replace(verbosity=Verbosity.DEBUG)
    assert other.verbosity == Verbosity.DEBUG
    assert config.verbosity == Verbosity.WARN


def test_from_environ():
    assert Configuration.from_environ({}).verbosity == Verbosity.WARN
    assert Configuration.from_environ({'DEBUG': '1'}).verbosity == Verbosity.DEBUG
    assert Configuration.from_environ({'DEBUG': '1'}, verbosity=Verbosity.ERROR).verbosity == Verbosity.ERROR


@pytest.mark.parametrize('kwargs', [
    {'table': (0, ) * 10},
    {'unknown_unicode_char': ''},
    {'unknown_unicode_char': 'ab'},
])
def test_invalid(kwargs):
    with pytest.raises(ValueError):
        Configuration(**kwargs)


def test_diagnostics(caplog):
    caplog.set_level(logging.DEBUG, logger='epocfile')
    config = Configuration(verbosity=Verbosity.PROGRESS)

    config.diagnostics.progress(2, 0x10, 'Going to read %s', 'something')
    config.diagnostics.debug(2, 0x10, 'not shown')
    config.diagnostics.warning(1, 0x20, 'careful')

    messages = [_.getMessage() for _ in caplog.records]
    assert messages == [
        '00000010 ==> Going to read something',
        'WARNING (offset 00000020): careful',
    ]
    assert caplog.records[0].offset == 0x10
    assert caplog.records[0].lev == 2


def test_diagnostics_logger_name(caplog):
    config = Configuration(logger_name='elsewhere')
    config.diagnostics.error(0, 0, 'broken')

    assert caplog.records[0].name == 'elsewhere'
