import pytest

from otfglyphs import (Font, Glyph, Language, LigSetCoverageMismatch, MissingGlyphMapping,
                       UnsupportedLanguageError, config)
from fontbuilder import (sfnt, hhea, hmtx, cmap, cmap4, cmap12, layout_table, u16, u32,
                         ligaturesub, singlesub1, singlepos1)


WIDTHS = [500 + i for i in range(800)]
CHARS = {'A': 503, 'f': 10, 'i': 12}


def make_font(gsub=None, gpos=None, cmaptable=None, scripts=(('beng', ()),), drop=()):
    tables = {
        'hhea': hhea(len(WIDTHS)),
        'hmtx': hmtx(WIDTHS),
        'cmap': cmaptable if cmaptable is not None else cmap([(3, 1, cmap4(CHARS))]),
    }
    if gsub is not None:
        tables['GSUB'] = layout_table(gsub, scripts=scripts)
    if gpos is not None:
        tables['GPOS'] = layout_table(gpos, scripts=scripts)
    for tag in drop:
        del tables[tag]
    return sfnt(tables)


LIGATURES = [(4, [ligaturesub([(10, [(700, [10, 12])])])]),
             (1, [singlesub1([503], -3)])]


class TestFont:
    def test_tables(self):
        font = Font(make_font(gsub=LIGATURES))
        assert set(font.tables) == {'hhea', 'hmtx', 'cmap', 'GSUB'}
        assert font.glyphwidths == WIDTHS
        assert font.gpos is None

    def test_cmap4_glyphtochar(self):
        font = Font(make_font())
        assert font.glyphtochar == {503: 'A', 10: 'f', 12: 'i'}

    def test_cmap12_preferred(self):
        table = cmap([(3, 1, cmap4({'f': 10})),
                      (3, 10, cmap12([(0x66, 0x69, 10), (0x1F600, 0x1F600, 600)]))])
        font = Font(make_font(cmaptable=table))
        assert font.glyphtochar == {10: 'f', 11: 'g', 12: 'h', 13: 'i', 600: '\U0001F600'}

    def test_first_character_wins(self):
        table = cmap([(3, 1, cmap4({'A': 5, 'B': 5}))])
        assert Font(make_font(cmaptable=table)).glyphtochar == {5: 'A'}

    def test_substitutions(self):
        font = Font(make_font(gsub=LIGATURES))
        assert font.language() is Language.BENGALI
        assert font.substitutions() == {'ffi': Glyph(700, WIDTHS[700], 'ffi'),
                                        'A': Glyph(500, WIDTHS[500], 'A')}

    def test_substitutions_need_supported_language(self):
        font = Font(make_font(gsub=LIGATURES, scripts=(('latn', ()),)))
        with pytest.raises(UnsupportedLanguageError):
            font.language()
        assert font.substitutions() == {}

    def test_substitutions_language_config(self):
        config.otf_languages = ()
        font = Font(make_font(gsub=LIGATURES))
        assert font.substitutions() == {}

    def test_unresolved_ligature_component(self):
        font = Font(make_font(gsub=[(4, [ligaturesub([(10, [(700, [10, 999])])])])]))
        assert font.errors == {}
        assert font.substitutions() == {}
        assert isinstance(font.errors['GSUB'], MissingGlyphMapping)
        assert font.errors['GSUB'].glyphid == 999

    def test_gsub_error_does_not_stop_gpos(self):
        bad = ligaturesub([(10, [(700, [11])])], coverage=[10, 11])
        font = Font(make_font(gsub=[(4, [bad])],
                              gpos=[(1, [singlepos1([20], 0x3, (5, -6))])]))
        assert isinstance(font.errors['GSUB'], LigSetCoverageMismatch)
        assert 'GPOS' not in font.errors
        assert font.gpos.placements == {20: (5, -6)}
        assert font.substitutions() == {}

    def test_no_gsub(self):
        font = Font(make_font())
        assert font.gsub is None
        assert font.substitutions() == {}
        with pytest.raises(UnsupportedLanguageError):
            font.language()

    def test_from_file(self, tmp_path):
        path = tmp_path / 'test.ttf'
        path.write_bytes(make_font(gsub=LIGATURES))
        font = Font(path)
        assert 'ffi' in font.substitutions()

    def test_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Font(tmp_path / 'missing.ttf')

    @pytest.mark.parametrize('tag', ['cmap', 'hhea', 'hmtx'])
    def test_required_tables(self, tag):
        with pytest.raises(ValueError):
            Font(make_font(drop=[tag]))

    def test_no_usable_cmap(self):
        table = cmap([(1, 0, cmap4({'f': 10}))])
        with pytest.raises(ValueError):
            Font(make_font(cmaptable=table))

    def test_cmap_subtable_past_end(self):
        table = u16(0, 1) + u16(3, 1) + u32(0xFFFF)
        with pytest.raises(ValueError):
            Font(make_font(cmaptable=table))

    def test_truncated_hmtx(self):
        data = sfnt({'hhea': hhea(5000), 'hmtx': hmtx(WIDTHS), 'cmap': cmap([(3, 1, cmap4(CHARS))])})
        with pytest.raises(ValueError):
            Font(data)
