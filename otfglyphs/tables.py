''' Structures common to the GSUB and GPOS layout tables: the table
    header, Script List, Feature List, Lookup List and Coverage tables.

    `walk` reads one layout table and hands every lookup subtable to a
    handler object. GSUB and GPOS each provide their own handler.
'''

from __future__ import annotations
from typing import Optional, Protocol
import logging

from .config import config
from .errors import FontIOError, UnsupportedFormatError
from .fontread import FontReader
from .fonttypes import (TableHeader, LangSys, Script, Feature, Lookup,
                        RangeRecord, ParseWarning)


NULL_OFFSET = 0
NO_REQUIRED_FEATURE = 0xFFFF
USE_MARK_FILTERING_SET = 0x0010


class SubtableHandler(Protocol):
    ''' Interprets the lookup subtables of one layout table '''
    table: str
    warnings: list[ParseWarning]

    def read_subtable(self, lookuptype: int, ofst: int) -> None:
        ...


def warn(handler: SubtableHandler, ofst: int, msg: str) -> None:
    ''' Record tolerated, unsupported data found at `ofst` '''
    handler.warnings.append(ParseWarning(handler.table, ofst, msg))
    if config.log_warnings:
        logging.warning('%s at offset %s: %s', handler.table, ofst, msg)


def read_coverage(fontfile: FontReader, ofst: int) -> list[int]:
    ''' Read a Coverage table into its list of glyph ids, in coverage
        index order. Format 2 ranges are expanded and concatenated
        in record order.
    '''
    fmt = fontfile.readuint16(ofst)
    glyphs: list[int] = []
    if fmt == 1:
        cnt = fontfile.readuint16()
        for _ in range(cnt):
            glyphs.append(fontfile.readuint16())

    elif fmt == 2:
        cnt = fontfile.readuint16()
        for _ in range(cnt):
            # startcoverageidx is not used to place the range
            rng = RangeRecord(fontfile.readuint16(),
                              fontfile.readuint16(),
                              fontfile.readuint16())
            glyphs.extend(range(rng.start, rng.end+1))
    else:
        raise UnsupportedFormatError('coverage', fmt, ofst)
    return glyphs


def read_header(fontfile: FontReader, ofst: int) -> TableHeader:
    ''' Read GSUB/GPOS header. Offsets are relative to the table start. '''
    version = fontfile.readint32(ofst)
    return TableHeader(version,
                       fontfile.readuint16(),
                       fontfile.readuint16(),
                       fontfile.readuint16())


def read_langsys(fontfile: FontReader, tag: str, ofst: int) -> LangSys:
    ''' Read a Language System table '''
    lookuporder = fontfile.readuint16(ofst)
    reqfeatureidx = fontfile.readuint16()
    cnt = fontfile.readuint16()
    featureidxs = [fontfile.readuint16() for _ in range(cnt)]
    logging.debug('LangSys %s: required feature %s, features %s',
                  tag, reqfeatureidx, featureidxs)
    return LangSys(tag, lookuporder, reqfeatureidx, featureidxs)


def read_script(fontfile: FontReader, tag: str, ofst: int) -> Script:
    ''' Read a Script table and its Language System tables '''
    defaultofst = fontfile.readuint16(ofst)
    cnt = fontfile.readuint16()
    langofsts = {}
    for _ in range(cnt):
        langtag = fontfile.readtag()
        langofsts[langtag] = fontfile.readuint16() + ofst

    languages = {}
    for langtag, langofst in langofsts.items():
        languages[langtag] = read_langsys(fontfile, langtag, langofst)

    default = None
    if defaultofst != NULL_OFFSET:
        default = read_langsys(fontfile, '', ofst + defaultofst)
    return Script(tag, ofst, default, languages)


def read_scriptlist(fontfile: FontReader, ofst: int) -> dict[str, Script]:
    ''' Read the Script List. Keys are script tags in file order. '''
    cnt = fontfile.readuint16(ofst)
    scriptofsts = {}
    for _ in range(cnt):
        tag = fontfile.readtag()
        scriptofsts[tag] = fontfile.readuint16() + ofst

    scripts = {}
    for tag, scriptofst in scriptofsts.items():
        scripts[tag] = read_script(fontfile, tag, scriptofst)
    return scripts


def read_feature(fontfile: FontReader, tag: str, ofst: int) -> Feature:
    ''' Read a Feature table '''
    paramsofst = fontfile.readuint16(ofst)
    cnt = fontfile.readuint16()
    lookupids = [fontfile.readuint16() for _ in range(cnt)]
    logging.debug('Feature %s: lookups %s', tag, lookupids)
    return Feature(tag, ofst, paramsofst, lookupids)


def read_featurelist(fontfile: FontReader, ofst: int) -> list[Feature]:
    ''' Read the Feature List, in feature index order '''
    cnt = fontfile.readuint16(ofst)
    records = []
    for _ in range(cnt):
        records.append((fontfile.readtag(), fontfile.readuint16() + ofst))
    return [read_feature(fontfile, tag, featofst) for tag, featofst in records]


def read_lookup(fontfile: FontReader, index: int, ofst: int) -> Lookup:
    ''' Read a Lookup table. Subtable offsets are returned absolute. '''
    lookuptype = fontfile.readuint16(ofst)
    flag = fontfile.readuint16()
    cnt = fontfile.readuint16()
    subtableofsts = [fontfile.readuint16() + ofst for _ in range(cnt)]
    markfilterset = None
    if flag & USE_MARK_FILTERING_SET:
        markfilterset = fontfile.readuint16()
    return Lookup(index, ofst, lookuptype, flag, subtableofsts, markfilterset)


class LayoutTable:
    ''' Structure of a GSUB or GPOS table after it has been walked '''
    def __init__(self, header: TableHeader, scripts: dict[str, Script],
                 features: list[Feature], lookups: list[Lookup]):
        self.header = header
        self.scripts = scripts
        self.features = features
        self.lookups = lookups

    def supported_languages(self) -> list[str]:
        ''' Script tags defined in the table, in file order '''
        return list(self.scripts.keys())

    def features_for(self, script: str = 'DFLT', language: str = '') -> dict[str, list[int]]:
        ''' Feature tag -> lookup indices for one script and language
            system. Falls back to the DFLT script and the default
            language system.
        '''
        scr = self.scripts.get(script, self.scripts.get('DFLT'))
        if scr is None:
            return {}
        langsys: Optional[LangSys] = scr.languages.get(language, scr.default)
        if langsys is None:
            return {}

        featureidxs = list(langsys.featureidxs)
        if langsys.reqfeatureidx != NO_REQUIRED_FEATURE:
            featureidxs.insert(0, langsys.reqfeatureidx)
        features = {}
        for idx in featureidxs:
            if idx < len(self.features):
                features[self.features[idx].tag] = self.features[idx].lookupids
        return features

    def __repr__(self):
        return (f'<LayoutTable v{self.header.version:#010x} scripts={self.supported_languages()} '
                f'lookups={len(self.lookups)}>')


def walk(fontfile: FontReader, ofst: int, handler: SubtableHandler) -> LayoutTable:
    ''' Read the layout table starting at `ofst`, calling
        `handler.read_subtable` for every subtable of every lookup.

        Running out of data raises FontIOError. Errors raised by the
        handler propagate unchanged.
    '''
    try:
        header = read_header(fontfile, ofst)
        scripts = read_scriptlist(fontfile, ofst + header.scriptlistofst)
        features = read_featurelist(fontfile, ofst + header.featurelistofst)

        lookuplistofst = ofst + header.lookuplistofst
        cnt = fontfile.readuint16(lookuplistofst)
        lookupofsts = [fontfile.readuint16() + lookuplistofst for _ in range(cnt)]
        lookups = []
        for index, lookupofst in enumerate(lookupofsts):
            lookup = read_lookup(fontfile, index, lookupofst)
            lookups.append(lookup)
            logging.debug('%s lookup %s: type %s, %s subtables',
                          handler.table, index, lookup.type, len(lookup.subtableofsts))
            for subtableofst in lookup.subtableofsts:
                handler.read_subtable(lookup.type, subtableofst)

    except (EOFError, OSError) as exc:
        raise FontIOError(f'Error reading {handler.table} table at offset {ofst}: {exc}') from exc

    return LayoutTable(header, scripts, features, lookups)
