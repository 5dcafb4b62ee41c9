''' Glyph Positioning System (GPOS) tables '''

from __future__ import annotations
from typing import Optional
import logging

from .config import config
from .errors import UnsupportedFormatError
from .fontread import FontReader
from .fonttypes import Anchor, MarkRecord, PosLookupRecord, ChainContext, ParseWarning
from .language import Language
from .tables import LayoutTable, NULL_OFFSET, read_coverage, walk, warn


class GposHandler:
    ''' Interprets GPOS lookup subtables

        Attributes:
            placements: glyph -> (dx, dy) from Single Adjustment
            markanchors: mark glyph -> (mark class, mark Anchor)
            baseanchors: (mark class, base glyph) -> (x, y) of the base anchor
            chaincontexts: Chaining Context (format 3) rules
    '''
    table = 'GPOS'

    def __init__(self, fontfile: FontReader):
        self.fontfile = fontfile
        self.placements: dict[int, tuple[int, int]] = {}
        self.markanchors: dict[int, tuple[int, Anchor]] = {}
        self.baseanchors: dict[tuple[int, int], tuple[int, int]] = {}
        self.chaincontexts: list[ChainContext] = []
        self.warnings: list[ParseWarning] = []

    def read_subtable(self, lookuptype: int, ofst: int) -> None:
        if lookuptype == 1:  # Single adjustment
            self.read_singleadjust(ofst)
        elif lookuptype == 4:  # Mark-to-base
            self.read_marktobase(ofst)
        elif lookuptype == 8:  # Chained contexts
            self.read_chaincontext(ofst)
        else:
            warn(self, ofst, f'LookupType {lookuptype} is not yet supported')

    def read_singleadjust(self, ofst: int) -> None:
        ''' Single Adjustment Positioning (LookupType 1) '''
        fmt = self.fontfile.readuint16(ofst)
        if fmt not in (1, 2):
            warn(self, ofst, f'PosFormat {fmt} for LookupType 1 is not yet supported')
            return

        covofst = self.fontfile.readuint16()
        valueformat = self.fontfile.readuint16()
        if fmt == 1:  # One value for all covered glyphs
            values = [self.fontfile.readvaluerecord(valueformat)]
        else:
            cnt = self.fontfile.readuint16()
            values = [self.fontfile.readvaluerecord(valueformat) for _ in range(cnt)]

        coverage = read_coverage(self.fontfile, ofst + covofst)
        if fmt == 1:
            values = values * len(coverage)
        elif len(values) != len(coverage):
            warn(self, ofst, f'{len(values)} value records for {len(coverage)} coverage glyphs')

        for gid, value in zip(coverage, values):
            self.placements[gid] = (value.get('xplacement', 0), value.get('yplacement', 0))
        logging.debug('GPOS single adjustment %s at %s: %s glyphs', fmt, ofst, len(coverage))

    def read_anchor(self, ofst: int) -> Anchor:
        ''' Anchor table. Only format 1 x/y are meaningful; other formats
            still begin with x/y which are read as-is.
        '''
        fmt = self.fontfile.readuint16(ofst)
        if fmt != 1:
            if config.strict_anchors:
                raise UnsupportedFormatError('anchor', fmt, ofst)
            warn(self, ofst, f'Extra features of AnchorFormat {fmt} will not be used')
        x = self.fontfile.readint16()
        y = self.fontfile.readint16()
        return Anchor(fmt, x, y)

    def read_marktobase(self, ofst: int) -> None:
        ''' Mark-To-Base Attachment Positioning (LookupType 4) '''
        fmt = self.fontfile.readuint16(ofst)
        if fmt != 1:
            warn(self, ofst, f'PosFormat {fmt} for LookupType 4 is not supported')
            return

        markcovofst = self.fontfile.readuint16()
        basecovofst = self.fontfile.readuint16()
        classcnt = self.fontfile.readuint16()
        markarrayofst = self.fontfile.readuint16() + ofst
        basearrayofst = self.fontfile.readuint16() + ofst

        markcoverage = read_coverage(self.fontfile, ofst + markcovofst)
        basecoverage = read_coverage(self.fontfile, ofst + basecovofst)
        logging.debug('GPOS mark-to-base at %s: marks %s, bases %s',
                      ofst, markcoverage, basecoverage)

        # Mark Array
        cnt = self.fontfile.readuint16(markarrayofst)
        markrecords = [MarkRecord(self.fontfile.readuint16(), self.fontfile.readuint16())
                       for _ in range(cnt)]
        if len(markrecords) != len(markcoverage):
            warn(self, markarrayofst,
                 f'{len(markrecords)} mark records for {len(markcoverage)} mark coverage glyphs')
        markanchors = []
        for record in markrecords:
            if record.anchorofst == NULL_OFFSET:
                markanchors.append(None)
            else:
                markanchors.append(self.read_anchor(markarrayofst + record.anchorofst))
        for gid, record, anchor in zip(markcoverage, markrecords, markanchors):
            if anchor is not None:
                self.markanchors[gid] = (record.markclass, anchor)

        # Base Array: one anchor offset per mark class for each base glyph
        cnt = self.fontfile.readuint16(basearrayofst)
        baserecords = []
        for _ in range(cnt):
            baserecords.append([self.fontfile.readuint16() for _ in range(classcnt)])
        if len(baserecords) != len(basecoverage):
            warn(self, basearrayofst,
                 f'{len(baserecords)} base records for {len(basecoverage)} base coverage glyphs')

        anchors = {}  # Shared anchor tables are read once
        for anchorofst in sorted({a for record in baserecords for a in record}):
            if anchorofst != NULL_OFFSET:
                anchors[anchorofst] = self.read_anchor(basearrayofst + anchorofst)

        for gid, record in zip(basecoverage, baserecords):
            for markclass, anchorofst in enumerate(record):
                if anchorofst != NULL_OFFSET:
                    anchor = anchors[anchorofst]
                    self.baseanchors[(markclass, gid)] = (anchor.x, anchor.y)

    def read_chaincontext(self, ofst: int) -> None:
        ''' Chained Contexts Positioning (LookupType 8, format 3) '''
        fmt = self.fontfile.readuint16(ofst)
        if fmt != 3:
            warn(self, ofst, f'PosFormat {fmt} for LookupType 8 is not supported')
            return

        backtrackcnt = self.fontfile.readuint16()
        backofsts = [self.fontfile.readuint16() for _ in range(backtrackcnt)]
        inptcnt = self.fontfile.readuint16()
        inptofsts = [self.fontfile.readuint16() for _ in range(inptcnt)]
        lookcnt = self.fontfile.readuint16()
        lookofsts = [self.fontfile.readuint16() for _ in range(lookcnt)]
        poscnt = self.fontfile.readuint16()
        records = []
        for _ in range(poscnt):
            records.append(PosLookupRecord(self.fontfile.readuint16(),
                                           self.fontfile.readuint16()))
        logging.debug('GPOS chained context 3 at %s: %s', ofst, records)

        backtrack = [read_coverage(self.fontfile, ofst+bofst) for bofst in backofsts]
        inpt = [read_coverage(self.fontfile, ofst+iofst) for iofst in inptofsts]
        lookahead = [read_coverage(self.fontfile, ofst+lofst) for lofst in lookofsts]
        self.chaincontexts.append(ChainContext(backtrack, inpt, lookahead, records))


class GlyphPositioningTable:
    ''' Glyph Positioning System Table

        Args:
            fontfile: Reader over the font data
            ofst: Offset of the GPOS table in the font
    '''
    def __init__(self, fontfile: FontReader, ofst: int):
        self.fontfile = fontfile
        self.ofst = ofst
        self.handler = GposHandler(fontfile)
        self.layout: Optional[LayoutTable] = None

    def read(self) -> GlyphPositioningTable:
        ''' Read the table. Raises FontReadingError if the table is malformed. '''
        self.handler = GposHandler(self.fontfile)
        self.layout = None
        self.layout = walk(self.fontfile, self.ofst, self.handler)
        return self

    @property
    def placements(self) -> dict[int, tuple[int, int]]:
        return self.handler.placements

    @property
    def markanchors(self) -> dict[int, tuple[int, Anchor]]:
        return self.handler.markanchors

    @property
    def baseanchors(self) -> dict[tuple[int, int], tuple[int, int]]:
        return self.handler.baseanchors

    @property
    def chaincontexts(self) -> list[ChainContext]:
        return self.handler.chaincontexts

    @property
    def warnings(self) -> list[ParseWarning]:
        return self.handler.warnings

    def mark_offset(self, base: int, mark: int) -> Optional[tuple[int, int]]:
        ''' Return dx, dy of mark glyph wrt base glyph '''
        markanchor = self.markanchors.get(mark)
        if markanchor is None:
            return None
        markclass, anchor = markanchor
        basexy = self.baseanchors.get((markclass, base))
        if basexy is None:
            return None
        dx = basexy[0] - anchor.x
        dy = basexy[1] - anchor.y
        logging.debug('Positioning Mark %s on %s: (%s, %s)', mark, base, dx, dy)
        return dx, dy

    def supported_language(self) -> Language:
        ''' Language identified from the table's script tags '''
        tags = self.layout.supported_languages() if self.layout else []
        return Language.from_tags(tags)

    def __repr__(self):
        return f'<GlyphPositioningTable {hex(self.ofst)}>'
