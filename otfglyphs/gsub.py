''' Glyph Substitution (GSUB) tables

    Reads Single (LookupType 1) and Ligature (LookupType 4) substitution
    subtables into a map of composite glyph -> constituent glyphs, then
    resolves that map into text using the font's glyph -> character map.
'''

from __future__ import annotations
from typing import Mapping, Optional, Sequence
import logging

from .errors import (UnsupportedFormatError, StructuralError, LigSetCoverageMismatch,
                     MissingGlyphMapping, CyclicGlyphMapping)
from .fontread import FontReader
from .fonttypes import Glyph, ParseWarning
from .language import Language
from .tables import LayoutTable, read_coverage, walk, warn


class GsubHandler:
    ''' Interprets GSUB lookup subtables into `rawmap`, a map of
        substituted glyph id -> list of glyph ids it stands for.
    '''
    table = 'GSUB'

    def __init__(self, fontfile: FontReader):
        self.fontfile = fontfile
        self.rawmap: dict[int, list[int]] = {}
        self.warnings: list[ParseWarning] = []

    def read_subtable(self, lookuptype: int, ofst: int) -> None:
        if lookuptype == 1:  # Single Substitution
            self.read_singlesub(ofst)
        elif lookuptype == 4:  # Ligature Substitution
            self.read_ligaturesub(ofst)
        else:
            warn(self, ofst, f'LookupType {lookuptype} is not yet handled')

    def read_singlesub(self, ofst: int) -> None:
        ''' Single Substitution Subtable (LookupType 1, formats 1 and 2) '''
        fmt = self.fontfile.readuint16(ofst)
        if fmt == 1:
            covofst = self.fontfile.readuint16()
            deltagid = self.fontfile.readint16()
            logging.debug('GSUB single sub 1 at %s: delta %s', ofst, deltagid)
            for gid in read_coverage(self.fontfile, ofst + covofst):
                self.rawmap[(gid + deltagid) % 0x10000] = [gid]

        elif fmt == 2:
            covofst = self.fontfile.readuint16()
            glyphcount = self.fontfile.readuint16()
            subglyphids = [self.fontfile.readuint16() for _ in range(glyphcount)]
            coverage = read_coverage(self.fontfile, ofst + covofst)
            if len(coverage) != glyphcount:
                raise StructuralError('GSUB', ofst, 'coverage glyphs', glyphcount, len(coverage))
            logging.debug('GSUB single sub 2 at %s: %s glyphs', ofst, glyphcount)
            for subgid, gid in zip(subglyphids, coverage):
                self.rawmap[subgid] = [gid]

        else:
            raise UnsupportedFormatError('GSUB single substitution', fmt, ofst)

    def read_ligaturesub(self, ofst: int) -> None:
        ''' Ligature Substitution Subtable (LookupType 4) '''
        fmt = self.fontfile.readuint16(ofst)
        if fmt != 1:
            raise UnsupportedFormatError('GSUB ligature substitution', fmt, ofst)

        covofst = self.fontfile.readuint16()
        cnt = self.fontfile.readuint16()
        ligsetofsts = [self.fontfile.readuint16() + ofst for _ in range(cnt)]
        coverage = read_coverage(self.fontfile, ofst + covofst)
        if len(coverage) != cnt:
            raise LigSetCoverageMismatch(ofst, cnt, len(coverage))

        for firstgid, ligsetofst in zip(coverage, ligsetofsts):
            ligcnt = self.fontfile.readuint16(ligsetofst)
            ligofsts = [self.fontfile.readuint16() + ligsetofst for _ in range(ligcnt)]
            for ligofst in ligofsts:
                self.read_ligature(ligofst, firstgid)

    def read_ligature(self, ofst: int, firstgid: int) -> None:
        ''' Ligature table. The first component comes from the coverage table. '''
        ligglyph = self.fontfile.readuint16(ofst)
        compcount = self.fontfile.readuint16()
        compglyphs = [firstgid]
        for _ in range(compcount-1):
            compglyphs.append(self.fontfile.readuint16())
        logging.debug('GSUB ligature %s <- %s', ligglyph, compglyphs)

        previous = self.rawmap.get(ligglyph)
        self.rawmap[ligglyph] = compglyphs
        if previous is not None:
            warn(self, ofst, f'GlyphID={ligglyph} redefined: {previous} replaced by {compglyphs}')


def glyph_width(glyphwidths: Sequence[int], glyphid: int) -> int:
    ''' Advance width of glyph. Glyphs past the end of the
        width array share the last width, as in the hmtx table.
    '''
    if not glyphwidths:
        return 0
    if glyphid < len(glyphwidths):
        return glyphwidths[glyphid]
    return glyphwidths[-1]


def resolve_text(glyphid: int, rawmap: Mapping[int, Sequence[int]],
                 glyphtochar: Mapping[int, str]) -> str:
    ''' Expand a substituted glyph into the text it represents.

        Components with a character are leaves. Other components must be
        substituted glyphs themselves and are expanded depth-first using
        an explicit stack. A glyph met again while it is still being
        expanded raises CyclicGlyphMapping.
    '''
    chars = []
    expanding = [glyphid]
    stack = [iter(rawmap[glyphid])]
    while stack:
        component = next(stack[-1], None)
        if component is None:  # Finished this composite
            stack.pop()
            expanding.pop()
            continue

        char = glyphtochar.get(component)
        if char is not None:
            chars.append(char)
            continue

        if component in expanding:
            raise CyclicGlyphMapping(component)
        components = rawmap.get(component)
        if not components:
            raise MissingGlyphMapping(component)
        expanding.append(component)
        stack.append(iter(components))
    return ''.join(chars)


def resolve(rawmap: Mapping[int, Sequence[int]], glyphtochar: Mapping[int, str],
            glyphwidths: Sequence[int]) -> dict[str, Glyph]:
    ''' Build the text -> Glyph substitution map '''
    submap = {}
    for glyphid in rawmap:
        text = resolve_text(glyphid, rawmap, glyphtochar)
        if text in submap:
            logging.debug('GSUB text %r: GlyphID=%s replaces GlyphID=%s',
                          text, glyphid, submap[text].glyphid)
        submap[text] = Glyph(glyphid, glyph_width(glyphwidths, glyphid), text)
    return submap


class GlyphSubstitutionTable:
    ''' Glyph Substitution Table

        Args:
            fontfile: Reader over the font data
            ofst: Offset of the GSUB table in the font
            glyphtochar: Glyph id -> character, from the font's cmap
            glyphwidths: Advance width of each glyph id
    '''
    def __init__(self, fontfile: FontReader, ofst: int,
                 glyphtochar: Mapping[int, str], glyphwidths: Sequence[int]):
        self.fontfile = fontfile
        self.ofst = ofst
        self.glyphtochar = glyphtochar
        self.glyphwidths = glyphwidths
        self.handler = GsubHandler(fontfile)
        self.layout: Optional[LayoutTable] = None

    def read(self) -> GlyphSubstitutionTable:
        ''' Read the table. Raises FontReadingError if the table is malformed;
            `rawmap` then holds the substitutions read before the error.
        '''
        self.handler = GsubHandler(self.fontfile)
        self.layout = None
        self.layout = walk(self.fontfile, self.ofst, self.handler)
        return self

    @property
    def rawmap(self) -> dict[int, list[int]]:
        return self.handler.rawmap

    @property
    def warnings(self) -> list[ParseWarning]:
        return self.handler.warnings

    def substitution_map(self) -> dict[str, Glyph]:
        ''' Map of text -> substituted Glyph '''
        return resolve(self.rawmap, self.glyphtochar, self.glyphwidths)

    def supported_language(self) -> Language:
        ''' Language identified from the table's script tags '''
        tags = self.layout.supported_languages() if self.layout else []
        return Language.from_tags(tags)

    def __repr__(self):
        return f'<GlyphSubstitutionTable {hex(self.ofst)}>'
