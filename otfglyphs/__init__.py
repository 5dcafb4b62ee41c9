''' Read OpenType GSUB and GPOS layout tables '''

from .config import config
from .errors import (FontReadingError, FontIOError, UnsupportedFormatError,
                     StructuralError, LigSetCoverageMismatch, ResolutionError,
                     MissingGlyphMapping, CyclicGlyphMapping, UnsupportedLanguageError)
from .font import Font
from .fontread import FontReader
from .fonttypes import Glyph, Anchor, ParseWarning
from .gpos import GlyphPositioningTable
from .gsub import GlyphSubstitutionTable
from .language import Language
from .tables import read_coverage, walk

__version__ = '0.1'
