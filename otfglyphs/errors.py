''' Exceptions raised while reading OpenType layout tables '''

from __future__ import annotations
from typing import Sequence


class FontReadingError(Exception):
    ''' Base class for all font reading errors '''


class FontIOError(FontReadingError):
    ''' Font data ended before a structure could be read '''


class UnsupportedFormatError(FontReadingError):
    ''' A known structure uses a format variant that is not implemented '''
    def __init__(self, context: str, value: int, ofst: int):
        self.context = context
        self.value = value
        self.ofst = ofst
        super().__init__(f'Unsupported {context} format {value} at offset {ofst}')


class StructuralError(FontReadingError):
    ''' Internal consistency check failed '''
    def __init__(self, table: str, ofst: int, what: str, expected: int, found: int):
        self.table = table
        self.ofst = ofst
        self.expected = expected
        self.found = found
        super().__init__(f'{table} subtable at offset {ofst}: '
                         f'expected {expected} {what}, found {found}')


class LigSetCoverageMismatch(StructuralError):
    ''' Ligature Set count differs from number of coverage glyphs '''
    def __init__(self, ofst: int, ligsetcount: int, coveragecount: int):
        super().__init__('GSUB', ofst, 'ligature sets (one per coverage glyph)',
                         coveragecount, ligsetcount)


class ResolutionError(FontReadingError):
    ''' Composite glyph could not be expanded into text '''
    def __init__(self, glyphid: int, msg: str):
        self.glyphid = glyphid
        super().__init__(msg)


class MissingGlyphMapping(ResolutionError):
    ''' Glyph has neither a character nor a substitution entry '''
    def __init__(self, glyphid: int):
        super().__init__(glyphid, f'No corresponding character or simple glyphs found for GlyphID={glyphid}')


class CyclicGlyphMapping(ResolutionError):
    ''' Composite glyph refers back to itself '''
    def __init__(self, glyphid: int):
        super().__init__(glyphid, f'Composite GlyphID={glyphid} is defined in terms of itself')


class UnsupportedLanguageError(FontReadingError):
    ''' None of the font's script tags are recognized '''
    def __init__(self, tags: Sequence[str]):
        self.tags = list(tags)
        super().__init__(f'Unsupported languages {self.tags}')
