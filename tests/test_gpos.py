import pytest

from otfglyphs import GlyphPositioningTable, Anchor, UnsupportedFormatError, Language, config
from otfglyphs.fonttypes import PosLookupRecord
from fontbuilder import (layout_table, singlepos1, singlepos2, marktobase, chaincontext3,
                         anchor, u16)


def read_gpos(reader, lookups, **kwargs):
    return GlyphPositioningTable(reader(layout_table(lookups, **kwargs)), 0).read()


class TestSingleAdjustment:
    def test_format1_xy_placement(self, reader):
        gpos = read_gpos(reader, [(1, [singlepos1([20, 21], 0x3, (5, -6))])])
        assert gpos.placements == {20: (5, -6), 21: (5, -6)}

    def test_format1_y_only(self, reader):
        gpos = read_gpos(reader, [(1, [singlepos1([20], 0x2, (-40,))])])
        assert gpos.placements == {20: (0, -40)}

    def test_format1_advance_does_not_misalign(self, reader):
        gpos = read_gpos(reader, [(1, [singlepos1([20], 0x5, (7, 300))])])
        assert gpos.placements == {20: (7, 0)}

    def test_format2_per_glyph(self, reader):
        gpos = read_gpos(reader, [(1, [singlepos2([20, 21], 0x3, [(1, 2), (3, 4)])])])
        assert gpos.placements == {20: (1, 2), 21: (3, 4)}

    def test_unsupported_format_warns(self, reader):
        gpos = read_gpos(reader, [(1, [u16(3)])])
        assert gpos.placements == {}
        assert 'PosFormat 3' in gpos.warnings[0].message


class TestMarkToBase:
    def subtable(self, baseanchors=None, markanchor=None):
        if baseanchors is None:
            baseanchors = [anchor(1, 500, 700), anchor(1, 250, 0)]
        if markanchor is None:
            markanchor = anchor(1, 100, 650)
        return marktobase(
            markcoverage=[90, 91],
            basecoverage=[30, 31],
            classcount=2,
            markrecords=[(0, markanchor), (1, anchor(1, 0, -10))],
            baseanchors=baseanchors,
            baserecords=[[0, 1], [0, None]])

    def test_anchors(self, reader):
        gpos = read_gpos(reader, [(4, [self.subtable()])])
        assert gpos.markanchors == {90: (0, Anchor(1, 100, 650)),
                                    91: (1, Anchor(1, 0, -10))}
        assert gpos.baseanchors == {(0, 30): (500, 700),
                                    (1, 30): (250, 0),
                                    (0, 31): (500, 700)}
        assert gpos.warnings == []

    def test_mark_offset(self, reader):
        gpos = read_gpos(reader, [(4, [self.subtable()])])
        assert gpos.mark_offset(30, 90) == (400, 50)
        assert gpos.mark_offset(30, 91) == (250, 10)
        assert gpos.mark_offset(31, 91) is None
        assert gpos.mark_offset(30, 12) is None

    def test_other_anchor_format_tolerated(self, reader):
        sub = self.subtable(baseanchors=[anchor(2, 500, 700), anchor(3, 250, 0)])
        gpos = read_gpos(reader, [(4, [sub])])
        assert gpos.baseanchors[(0, 30)] == (500, 700)
        assert gpos.baseanchors[(1, 30)] == (250, 0)
        assert len(gpos.warnings) == 2
        assert all('AnchorFormat' in w.message for w in gpos.warnings)

    def test_strict_anchors(self, reader):
        config.strict_anchors = True
        sub = self.subtable(markanchor=anchor(3, 1, 2))
        with pytest.raises(UnsupportedFormatError) as exc:
            read_gpos(reader, [(4, [sub])])
        assert exc.value.context == 'anchor'

    def test_unsupported_format_warns(self, reader):
        gpos = read_gpos(reader, [(4, [u16(2)])])
        assert gpos.markanchors == {}
        assert len(gpos.warnings) == 1

    def test_extra_mark_records_read(self, reader):
        sub = marktobase(markcoverage=[90], basecoverage=[30], classcount=2,
                         markrecords=[(0, anchor(1, 100, 650)), (1, anchor(3, 7, 8))],
                         baseanchors=[anchor(1, 500, 700)], baserecords=[[0, None]])
        gpos = read_gpos(reader, [(4, [sub])])
        assert gpos.markanchors == {90: (0, Anchor(1, 100, 650))}
        assert len(gpos.warnings) == 2
        assert '2 mark records for 1 mark coverage glyphs' in gpos.warnings[0].message
        assert 'AnchorFormat 3' in gpos.warnings[1].message

    def test_extra_mark_records_strict_anchors(self, reader):
        config.strict_anchors = True
        sub = marktobase(markcoverage=[90], basecoverage=[30], classcount=2,
                         markrecords=[(0, anchor(1, 100, 650)), (1, anchor(3, 7, 8))],
                         baseanchors=[anchor(1, 500, 700)], baserecords=[[0, None]])
        with pytest.raises(UnsupportedFormatError):
            read_gpos(reader, [(4, [sub])])

    def test_extra_base_records_warn(self, reader):
        sub = marktobase(markcoverage=[90], basecoverage=[30], classcount=2,
                         markrecords=[(0, anchor(1, 100, 650))],
                         baseanchors=[anchor(1, 500, 700), anchor(1, 250, 0)],
                         baserecords=[[0, None], [1, 1]])
        gpos = read_gpos(reader, [(4, [sub])])
        assert gpos.baseanchors == {(0, 30): (500, 700)}
        assert len(gpos.warnings) == 1
        assert '2 base records for 1 base coverage glyphs' in gpos.warnings[0].message

    def test_null_mark_anchor_skipped(self, reader):
        sub = marktobase(markcoverage=[90, 91], basecoverage=[30], classcount=2,
                         markrecords=[(0, None), (1, anchor(1, 0, -10))],
                         baseanchors=[anchor(1, 500, 700), anchor(1, 250, 0)],
                         baserecords=[[0, 1]])
        gpos = read_gpos(reader, [(4, [sub])])
        assert gpos.markanchors == {91: (1, Anchor(1, 0, -10))}
        assert gpos.warnings == []
        assert gpos.mark_offset(30, 90) is None
        assert gpos.mark_offset(30, 91) == (250, 10)


class TestChainContext:
    def test_format3(self, reader):
        sub = chaincontext3([[1, 2]], [[3], [4, 5]], [[6]], [(0, 2), (1, 3)])
        gpos = read_gpos(reader, [(8, [sub])])
        assert len(gpos.chaincontexts) == 1
        rule = gpos.chaincontexts[0]
        assert rule.backtrack == [[1, 2]]
        assert rule.input == [[3], [4, 5]]
        assert rule.lookahead == [[6]]
        assert rule.records == [PosLookupRecord(0, 2), PosLookupRecord(1, 3)]

    def test_empty_sequences(self, reader):
        gpos = read_gpos(reader, [(8, [chaincontext3([], [[3]], [], [])])])
        assert gpos.chaincontexts[0].backtrack == []
        assert gpos.chaincontexts[0].records == []

    def test_other_formats_skipped(self, reader):
        gpos = read_gpos(reader, [(8, [u16(1)]), (8, [chaincontext3([], [[3]], [], [])])])
        assert len(gpos.chaincontexts) == 1
        assert 'LookupType 8' in gpos.warnings[0].message


class TestLookupTypes:
    def test_unknown_types_skipped(self, reader):
        lookups = [(2, [u16(1)]), (99, [u16(0)]), (1, [singlepos1([20], 0x1, (9,))])]
        gpos = read_gpos(reader, lookups)
        assert gpos.placements == {20: (9, 0)}
        assert [w.table for w in gpos.warnings] == ['GPOS', 'GPOS']

    def test_language(self, reader):
        gpos = read_gpos(reader, [], scripts=[('beng', ('BEN ',))])
        assert gpos.supported_language() is Language.BENGALI
