from __future__ import annotations


class ParseError(ValueError):
    pass


class OutOfBounds(ParseError):
    def __init__(self, offset: int, need: int, available: int):
        self.offset, self.need, self.available = offset, need, available
        super().__init__(f"underrun: need {need} at {offset}, have {available}")


class UnsupportedTag(ParseError):
    def __init__(self, tag: int, offset: int, what: str = "constant pool tag"):
        self.tag, self.offset, self.what = tag, offset, what
        super().__init__(f"unsupported {what} {tag} at {offset}")


class UnresolvedIndex(ParseError):
    def __init__(self, index: int, pool_size: int):
        self.index, self.pool_size = index, pool_size
        super().__init__(f"constant pool index {index} out of range 1..{pool_size}")


class TypeMismatch(ParseError):
    def __init__(self, index: int, expected: str, found: str):
        self.index, self.expected, self.found = index, expected, found
        super().__init__(f"constant pool index {index}: expected {expected}, got {found}")


class UnsupportedFeature(ParseError):
    def __init__(self, feature: str, count: int, offset: int):
        self.feature, self.count, self.offset = feature, count, offset
        super().__init__(f"{feature} decoding not supported ({feature}_count={count} at {offset})")


class BadMagic(ParseError):
    def __init__(self, magic: str):
        self.magic = magic
        super().__init__(f"bad magic {magic!r}, expected 'cafebabe'")
