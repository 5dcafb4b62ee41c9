import pytest

from otfglyphs import FontReader, config


@pytest.fixture
def reader():
    ''' Make a FontReader over bytes, optionally placed after some padding '''
    def make(data, pad=0):
        return FontReader(bytes(pad) + data)
    return make


@pytest.fixture
def widths():
    ''' Advance width of glyph i is 2*i '''
    return list(range(0, 2000, 2))


@pytest.fixture(autouse=True)
def reset_config():
    strict, logwarn, langs = config.strict_anchors, config.log_warnings, config.otf_languages
    yield
    config.strict_anchors, config.log_warnings, config.otf_languages = strict, logwarn, langs
