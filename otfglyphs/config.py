''' Global configuration '''

from __future__ import annotations
from dataclasses import dataclass

from .language import Language


@dataclass
class Config:
    ''' Global configuration options

        Attributes:
            strict_anchors: Raise UnsupportedFormatError for GPOS Anchor
                tables other than format 1, instead of warning
            log_warnings: Send tolerated-data warnings to the logging
                module in addition to collecting them
            otf_languages: Languages for which Font.substitutions
                returns the GSUB substitution map
    '''
    strict_anchors: bool = False
    log_warnings: bool = True
    otf_languages: tuple = (Language.BENGALI,)


config = Config()
