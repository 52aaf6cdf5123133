from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
from .bytecursor import Cursor
from ...models.common import AccessFlagSet


@dataclass(frozen=True)
class Flag:
    name: str
    bit: int


# Class-level flags (ClassFile.access_flags)
CLASS_FLAGS: Tuple[Flag, ...] = (
    Flag("PUBLIC",     0x0001),
    Flag("FINAL",      0x0010),
    Flag("SUPER",      0x0020),
    Flag("INTERFACE",  0x0200),
    Flag("ABSTRACT",   0x0400),
    Flag("SYNTHETIC",  0x1000),
    Flag("ANNOTATION", 0x2000),
    Flag("ENUM",       0x4000),
    Flag("MODULE",     0x8000),
)

# Method-level flags (method_info.access_flags). 0x0020/0x0040/0x0080 mean
# something else here than on a class.
METHOD_FLAGS: Tuple[Flag, ...] = (
    Flag("PUBLIC",       0x0001),
    Flag("PRIVATE",      0x0002),
    Flag("PROTECTED",    0x0004),
    Flag("STATIC",       0x0008),
    Flag("FINAL",        0x0010),
    Flag("SYNCHRONIZED", 0x0020),
    Flag("BRIDGE",       0x0040),
    Flag("VARARGS",      0x0080),
    Flag("NATIVE",       0x0100),
    Flag("ABSTRACT",     0x0400),
    Flag("STRICT",       0x0800),
    Flag("SYNTHETIC",    0x1000),
)


def expand_flags(mask: int, table: Tuple[Flag, ...]) -> AccessFlagSet:
    """Bits not named in the table are kept in mask but get no name."""
    return AccessFlagSet(mask=mask, names=tuple(f.name for f in table if mask & f.bit))


def decode_class_flags(cur: Cursor) -> AccessFlagSet:
    return expand_flags(cur.u16(), CLASS_FLAGS)


def decode_method_flags(cur: Cursor) -> AccessFlagSet:
    return expand_flags(cur.u16(), METHOD_FLAGS)
