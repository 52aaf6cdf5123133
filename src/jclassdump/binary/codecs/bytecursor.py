from __future__ import annotations
import struct

from ..errors import OutOfBounds


class Cursor:
    __slots__ = ("buf", "pos")

    def __init__(self, data: bytes | bytearray | memoryview):
        self.buf = memoryview(bytes(data))
        self.pos = 0

    def __len__(self) -> int: return len(self.buf)
    def remaining(self) -> int: return len(self.buf) - self.pos
    def tell(self) -> int: return self.pos

    def take(self, n: int) -> bytes:
        end = self.pos + n
        if n < 0 or end > len(self.buf):
            raise OutOfBounds(self.pos, n, self.remaining())
        out = self.buf[self.pos:end].tobytes()
        self.pos = end
        return out

    def text(self, n: int, encoding: str = "utf-8") -> str:
        """Same bytes as take(n), decoded; undecodable bytes survive as surrogates."""
        return self.take(n).decode(encoding, errors="surrogateescape")

    # big-endian fixed-width reads
    def _unpack(self, fmt: str, n: int):
        return struct.unpack(fmt, self.take(n))[0]
    def u8(self) -> int:  return self._unpack(">B", 1)
    def s8(self) -> int:  return self._unpack(">b", 1)
    def u16(self) -> int: return self._unpack(">H", 2)
    def s16(self) -> int: return self._unpack(">h", 2)
    def u32(self) -> int: return self._unpack(">I", 4)
    def s32(self) -> int: return self._unpack(">i", 4)

    def peek(self, n: int) -> bytes:
        end = self.pos + n
        if n < 0 or end > len(self.buf):
            raise OutOfBounds(self.pos, n, self.remaining())
        return self.buf[self.pos:end].tobytes()
