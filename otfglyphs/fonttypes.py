from __future__ import annotations
from collections import namedtuple


Table = namedtuple('Table', ['checksum', 'offset', 'length'])
AdvanceWidth = namedtuple('AdvanceWidth', ['width', 'leftsidebearing'])

# Layout table structure (common to GSUB and GPOS)
TableHeader = namedtuple(
    'TableHeader', ['version', 'scriptlistofst', 'featurelistofst', 'lookuplistofst'])
LangSys = namedtuple('LangSys', ['tag', 'lookuporder', 'reqfeatureidx', 'featureidxs'])
Script = namedtuple('Script', ['tag', 'ofst', 'default', 'languages'])
Feature = namedtuple('Feature', ['tag', 'ofst', 'paramsofst', 'lookupids'])
Lookup = namedtuple(
    'Lookup', ['index', 'ofst', 'type', 'flag', 'subtableofsts', 'markfilterset'])
RangeRecord = namedtuple('RangeRecord', ['start', 'end', 'startcoverageidx'])

# GPOS records
MarkRecord = namedtuple('MarkRecord', ['markclass', 'anchorofst'])
Anchor = namedtuple('Anchor', ['format', 'x', 'y'])
PosLookupRecord = namedtuple('PosLookupRecord', ['sequenceindex', 'lookupindex'])
ChainContext = namedtuple('ChainContext', ['backtrack', 'input', 'lookahead', 'records'])

# Resolved substitution output
Glyph = namedtuple('Glyph', ['glyphid', 'width', 'text'])

# Tolerated, unsupported data found during a read
ParseWarning = namedtuple('ParseWarning', ['table', 'offset', 'message'])
