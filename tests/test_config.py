# -*- coding: utf-8 -*-
import pytest

from scnlib.config import LibraryConfig


def test_defaults(tmpdir):
    cfg = LibraryConfig(str(tmpdir.join('missing.cfg')))
    cfg.read()
    assert cfg.raster_origin == 'top'
    assert cfg.shared_directory == 'all'


def test_environment_variable(tmpdir, monkeypatch):
    filename = str(tmpdir.join('scnlib.cfg'))
    monkeypatch.setenv('SCNLIB_CONFIG_FILE', filename)
    assert LibraryConfig().config_file == filename


def test_read_file(tmpdir):
    filename = tmpdir.join('scnlib.cfg')
    filename.write('[scnlib]\nraster_origin = bottom\nshared_directory = error\n')
    cfg = LibraryConfig(str(filename))
    cfg.read()
    assert cfg.raster_origin == 'bottom'
    assert cfg.shared_directory == 'error'


def test_read_invalid_value(tmpdir):
    filename = tmpdir.join('scnlib.cfg')
    filename.write('[scnlib]\nraster_origin = sideways\n')
    with pytest.raises(ValueError):
        LibraryConfig(str(filename)).read()


def test_read_unparsable_file(tmpdir):
    filename = tmpdir.join('scnlib.cfg')
    filename.write('raster_origin = top\n')
    with pytest.raises(ValueError):
        LibraryConfig(str(filename)).read()


def test_setter_validation(tmpdir):
    cfg = LibraryConfig(str(tmpdir.join('scnlib.cfg')))
    with pytest.raises(ValueError):
        cfg.shared_directory = 'first'
