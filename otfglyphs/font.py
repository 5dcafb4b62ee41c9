''' Read a font file's layout tables and the glyph data they depend on '''

from __future__ import annotations
from typing import Union, Optional
import logging
from pathlib import Path
from collections import namedtuple

from .config import config
from .errors import FontReadingError, ResolutionError, UnsupportedLanguageError
from .fontread import FontReader
from .fonttypes import AdvanceWidth, Table, Glyph
from .gpos import GlyphPositioningTable
from .gsub import GlyphSubstitutionTable


CMapTable = namedtuple('CMapTable', ['platform', 'platformid', 'offset'])

# (platform, encoding, format) in order of preference
CMAP_PREFERENCE = [(3, 10, 12), (3, 1, 4), (0, 4, 12), (0, 6, 12), (0, 3, 4), (0, 1, 4), (0, 0, 4)]


class Font:
    ''' Read the GSUB and GPOS tables of an OpenType/TTF font, along with
        the cmap and hmtx tables needed to interpret them.

        Args:
            name: File name of the font, or the font data
    '''
    def __init__(self, name: Union[str, Path, bytes]):
        self.fname = None
        if isinstance(name, (bytes, bytearray)):
            data = bytes(name)
        else:
            if not Path(name).exists():
                raise FileNotFoundError(f'Font {name} not found.')
            self.fname = Path(name)
            with open(self.fname, 'rb') as f:
                data = f.read()

        self.fontfile = FontReader(data)
        self.tables: dict[str, Table] = {}
        self.errors: dict[str, FontReadingError] = {}
        self._loadfont()

    def _loadfont(self) -> None:
        ''' Read font tables '''
        self._readtables()
        try:
            numlonghormetrics = self.fontfile.readuint16(self.tables['hhea'].offset + 34)
            self.advwidths = self._readwidths(numlonghormetrics)
            self.glyphtochar = self._readcmap()
        except EOFError as exc:
            raise ValueError(f'Unsupported font (truncated hhea, hmtx or cmap table): {exc}') from exc
        self.glyphwidths = [w.width for w in self.advwidths]

        self.gsub: Optional[GlyphSubstitutionTable] = None
        if 'GSUB' in self.tables:
            self.gsub = GlyphSubstitutionTable(
                self.fontfile, self.tables['GSUB'].offset, self.glyphtochar, self.glyphwidths)
            self._readlayout('GSUB', self.gsub)

        self.gpos: Optional[GlyphPositioningTable] = None
        if 'GPOS' in self.tables:
            self.gpos = GlyphPositioningTable(self.fontfile, self.tables['GPOS'].offset)
            self._readlayout('GPOS', self.gpos)

    def _readlayout(self, tag: str, table: Union[GlyphSubstitutionTable, GlyphPositioningTable]) -> None:
        ''' Read one layout table. Errors are kept so the other table is still read. '''
        try:
            table.read()
        except FontReadingError as exc:
            logging.error('Error reading %s table: %s', tag, exc)
            self.errors[tag] = exc

    def _readtables(self) -> None:
        ''' Read list of tables in the font '''
        try:
            self.fontfile.seek(0)
            scalartype = self.fontfile.readuint32()
            numtables = self.fontfile.readuint16()
            self.fontfile.skip(6)  # searchrange, entryselector, rangeshift

            # Table Directory
            self.tables = {}
            for i in range(numtables):
                tag = self.fontfile.readtag()
                self.tables[tag] = Table(checksum=self.fontfile.readuint32(),
                                         offset=self.fontfile.readuint32(),
                                         length=self.fontfile.readuint32())
        except EOFError as exc:
            raise ValueError('Unsupported font (truncated table directory).') from exc
        logging.debug('Font version %#010x tables %s', scalartype, list(self.tables))

        for tag in ('cmap', 'hhea', 'hmtx'):
            if tag not in self.tables:
                raise ValueError(f'Unsupported font (no {tag} table).')

    def _readwidths(self, numlonghormetrics: int) -> list[AdvanceWidth]:
        ''' Read `advanceWidth` and `leftsidebearing` from "hmtx" table '''
        self.fontfile.seek(self.tables['hmtx'].offset)
        advwidths = []
        for i in range(numlonghormetrics):
            w = self.fontfile.readuint16()
            b = self.fontfile.readint16()
            advwidths.append(AdvanceWidth(w, b))
        return advwidths

    def _readcmap(self) -> dict[int, str]:
        ''' Read "cmap" table into a glyph id -> character map.
            Cmap formats 4 and 12 are supported. When several characters
            map to one glyph, the lowest code point is used.
        '''
        cmapofst = self.tables['cmap'].offset
        version = self.fontfile.readuint16(cmapofst)
        numtables = self.fontfile.readuint16()
        cmaptables = []
        for i in range(numtables):
            cmaptables.append(CMapTable(
                self.fontfile.readuint16(),
                self.fontfile.readuint16(),
                self.fontfile.readuint32()))

        available = {}
        for ctable in cmaptables:
            cmapformat = self.fontfile.readuint16(cmapofst + ctable.offset)
            available.setdefault((ctable.platform, ctable.platformid, cmapformat), ctable)

        for key in CMAP_PREFERENCE:
            if key in available:
                ctable_ofst = cmapofst + available[key].offset
                if key[2] == 4:
                    return self._readcmap4(ctable_ofst)
                return self._readcmap12(ctable_ofst)
        raise ValueError('No suitable cmap table found in font.')

    def _readcmap4(self, ofst: int) -> dict[int, str]:
        ''' cmap format 4: segment mapping to delta values '''
        self.fontfile.seek(ofst + 2)
        length = self.fontfile.readuint16()
        lang = self.fontfile.readuint16()
        segcount = self.fontfile.readuint16() // 2
        self.fontfile.skip(6)  # searchrange, entryselector, rangeshift
        endcodes = [self.fontfile.readuint16() for i in range(segcount)]
        _ = self.fontfile.readuint16()  # reserved pad
        startcodes = [self.fontfile.readuint16() for i in range(segcount)]
        iddeltas = [self.fontfile.readuint16() for i in range(segcount)]
        idrangeoffset = [self.fontfile.readuint16() for i in range(segcount)]

        # Length of glyph array comes from total length of cmap table
        # //2 because len is in bytes, but table glyphidxarray is 16-bit
        glyphtablelen = (length - (self.fontfile.tell() - ofst)) // 2
        glyphidxarray = [self.fontfile.readuint16() for i in range(glyphtablelen)]

        glyphtochar: dict[int, str] = {}
        for i in range(segcount):
            for code in range(startcodes[i], endcodes[i]+1):
                if code == 0xFFFF:
                    continue
                if idrangeoffset[i] == 0:
                    gid = (code + iddeltas[i]) & 0xFFFF
                else:
                    idx = idrangeoffset[i]//2 + (code - startcodes[i]) - (segcount - i)
                    if not 0 <= idx < len(glyphidxarray):
                        continue
                    gid = glyphidxarray[idx]
                    if gid != 0:
                        gid = (gid + iddeltas[i]) & 0xFFFF
                if gid != 0:
                    glyphtochar.setdefault(gid, chr(code))
        return glyphtochar

    def _readcmap12(self, ofst: int) -> dict[int, str]:
        ''' cmap format 12: segmented coverage '''
        self.fontfile.seek(ofst + 4)
        length = self.fontfile.readuint32()
        lang = self.fontfile.readuint32()
        ngroups = self.fontfile.readuint32()
        glyphtochar: dict[int, str] = {}
        for i in range(ngroups):
            start = self.fontfile.readuint32()
            end = self.fontfile.readuint32()
            glyphstart = self.fontfile.readuint32()
            for code in range(start, min(end, 0x10FFFF)+1):
                gid = glyphstart + code - start
                if gid != 0:
                    glyphtochar.setdefault(gid, chr(code))
        return glyphtochar

    def language(self):
        ''' Language identified by the GSUB script tags '''
        if self.gsub is None:
            raise UnsupportedLanguageError([])
        return self.gsub.supported_language()

    def substitutions(self) -> dict[str, Glyph]:
        ''' Text -> Glyph substitution map, if the font's GSUB table
            was read and its language is one of `config.otf_languages`.
        '''
        if self.gsub is None or 'GSUB' in self.errors:
            return {}
        try:
            language = self.gsub.supported_language()
        except UnsupportedLanguageError as exc:
            logging.info('No glyph substitution: %s', exc)
            return {}
        if language not in config.otf_languages:
            return {}
        try:
            return self.gsub.substitution_map()
        except ResolutionError as exc:
            logging.error('Error resolving GSUB substitutions: %s', exc)
            self.errors['GSUB'] = exc
            return {}

    def __repr__(self):
        return f'<Font {self.fname if self.fname else "(data)"}>'
