''' Random-access reader for binary font data '''

from __future__ import annotations
from typing import Optional
import struct


class FontReader:
    ''' Big-endian reader over the bytes of a font file.

        Most read methods take an optional `ofst`. When given, the
        reader seeks to that absolute position before reading.

        Args:
            data: Font file contents
    '''
    def __init__(self, data: bytes):
        self.data = data
        self.ptr = 0

    def __len__(self):
        return len(self.data)

    def seek(self, ofst: int) -> int:
        ''' Move to absolute position `ofst` '''
        if ofst < 0 or ofst > len(self.data):
            raise EOFError(f'Seek to {ofst} outside font data of {len(self.data)} bytes')
        self.ptr = ofst
        return self.ptr

    def tell(self) -> int:
        ''' Current position '''
        return self.ptr

    def skip(self, n: int) -> None:
        ''' Advance the position by `n` bytes '''
        self.seek(self.ptr + n)

    def read(self, n: int, ofst: Optional[int] = None) -> bytes:
        ''' Read `n` bytes '''
        if ofst is not None:
            self.seek(ofst)
        end = self.ptr + n
        if end > len(self.data):
            raise EOFError(f'Read of {n} bytes at {self.ptr} past end of font data')
        val = self.data[self.ptr:end]
        self.ptr = end
        return val

    def _unpack(self, fmt: str, ofst: Optional[int]):
        return struct.unpack(fmt, self.read(struct.calcsize(fmt), ofst))[0]

    def readuint8(self, ofst: Optional[int] = None) -> int:
        return self._unpack('>B', ofst)

    def readuint16(self, ofst: Optional[int] = None) -> int:
        return self._unpack('>H', ofst)

    def readint16(self, ofst: Optional[int] = None) -> int:
        return self._unpack('>h', ofst)

    def readuint32(self, ofst: Optional[int] = None) -> int:
        return self._unpack('>L', ofst)

    def readint32(self, ofst: Optional[int] = None) -> int:
        return self._unpack('>l', ofst)

    def readstring(self, n: int, encoding: str = 'latin-1', ofst: Optional[int] = None) -> str:
        ''' Read `n` bytes and decode them (tags are 4-byte ASCII) '''
        return self.read(n, ofst).decode(encoding)

    def readtag(self, ofst: Optional[int] = None) -> str:
        ''' Read a 4-byte OpenType tag '''
        return self.readstring(4, 'latin-1', ofst)

    def readvaluerecord(self, valueformat: int) -> dict:
        ''' Read a GPOS ValueRecord. Only fields flagged in
            `valueformat` are stored in the file, and only those
            fields are returned.
        '''
        X_PLACEMENT = 0x0001
        Y_PLACEMENT = 0x0002
        X_ADVANCE = 0x0004
        Y_ADVANCE = 0x0008
        X_PLA_DEVICE = 0x0010
        Y_PLA_DEVICE = 0x0020
        X_ADV_DEVICE = 0x0040
        Y_ADV_DEVICE = 0x0080

        value = {}
        if valueformat & X_PLACEMENT:
            value['xplacement'] = self.readint16()
        if valueformat & Y_PLACEMENT:
            value['yplacement'] = self.readint16()
        if valueformat & X_ADVANCE:
            value['xadvance'] = self.readint16()
        if valueformat & Y_ADVANCE:
            value['yadvance'] = self.readint16()
        if valueformat & X_PLA_DEVICE:
            value['xpladevice'] = self.readuint16()
        if valueformat & Y_PLA_DEVICE:
            value['ypladevice'] = self.readuint16()
        if valueformat & X_ADV_DEVICE:
            value['xadvdevice'] = self.readuint16()
        if valueformat & Y_ADV_DEVICE:
            value['yadvdevice'] = self.readuint16()
        return value
