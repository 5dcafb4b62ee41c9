''' Languages recognized from OpenType script tags '''

from __future__ import annotations
from typing import Iterable
from enum import Enum

from .errors import UnsupportedLanguageError


class Language(Enum):
    ''' Language with the OpenType script tags that identify it '''
    BENGALI = ('beng', 'bng2')

    def __init__(self, *tags: str):
        self.tags = tags

    def is_supported(self, tag: str) -> bool:
        ''' Check if the script tag identifies this language '''
        return tag in self.tags

    @classmethod
    def from_tags(cls, tags: Iterable[str]) -> Language:
        ''' Get the first language identified by any tag, checking
            tags in order. Raises UnsupportedLanguageError if none match.
        '''
        tags = list(tags)
        for tag in tags:
            for lang in cls:
                if lang.is_supported(tag):
                    return lang
        raise UnsupportedLanguageError(tags)
