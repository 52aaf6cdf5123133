from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union

from .codecs.bytecursor import Cursor
from .codecs.access_flags import decode_class_flags
from .codecs.constant_pool import decode_constant_pool, iter_pool_slots
from .codecs.member import decode_attributes, decode_method
from .errors import (
    BadMagic,
    TypeMismatch,
    UnresolvedIndex,
    UnsupportedFeature,
)

# Models
from jclassdump.config import DecodeOptions
from jclassdump.models.classfile import ClassFile
from jclassdump.models.constants import ClassInfo, ConstantPool, ConstantPoolEntry, Utf8Info

BytesLike = Union[str, Path, bytes, bytearray, memoryview]

logger = logging.getLogger(__name__)

CLASS_MAGIC = "cafebabe"


# -----------------------------
# Helpers
# -----------------------------

def _load_bytes(inp: BytesLike) -> bytes:
    if isinstance(inp, (bytes, bytearray, memoryview)):
        return bytes(inp)
    p = Path(str(inp))
    return p.read_bytes()


# -----------------------------
# Cross-reference resolution
# -----------------------------

def entry_at(pool: ConstantPool, index: int) -> Optional[ConstantPoolEntry]:
    """Bounds-checked 1-based slot lookup."""
    if not 1 <= index <= len(pool):
        raise UnresolvedIndex(index, len(pool))
    return pool.slot(index)


def _expect(pool: ConstantPool, index: int, kind: type, label: str):
    entry = entry_at(pool, index)
    if not isinstance(entry, kind):
        found = entry.tag if entry is not None else "unusable slot"
        raise TypeMismatch(index, label, found)
    return entry


def resolve_utf8(pool: ConstantPool, index: int) -> str:
    return _expect(pool, index, Utf8Info, "CONSTANT_Utf8").text


def resolve_class_name(pool: ConstantPool, index: int) -> str:
    """
    Follow a CONSTANT_Class entry to the Utf8 holding its binary name.
    Never substitutes a default: index 0 fails like any other bad index.
    """
    cls = _expect(pool, index, ClassInfo, "CONSTANT_Class")
    return resolve_utf8(pool, cls.name_index)


# -----------------------------
# Structure decode
# -----------------------------

def _decode_header(cur: Cursor, options: DecodeOptions) -> Tuple[str, int, int]:
    magic = cur.take(4).hex()
    if options.check_magic and magic != CLASS_MAGIC:
        raise BadMagic(magic)
    minor = cur.s16()
    major = cur.s16()
    return magic, minor, major


def _reject_table(cur: Cursor, feature: str) -> int:
    at = cur.tell()
    count = cur.u16()
    if count:
        raise UnsupportedFeature(feature, count, at)
    return count


def decode_classfile(cur: Cursor, options: Optional[DecodeOptions] = None) -> ClassFile:
    """
    Single forward pass over a class file:
      header, constant pool, access flags, this/super, interfaces, fields,
      methods, then (if any bytes remain) class attributes.
    The first error aborts the whole decode.
    """
    options = options or DecodeOptions()

    magic, minor, major = _decode_header(cur, options)

    pool_count = cur.u16()
    pool = ConstantPool(decode_constant_pool(cur, pool_count, wide_slots=options.wide_slots))
    logger.debug("constant pool: %d slots, ends at %d", len(pool), cur.tell())

    access = decode_class_flags(cur)

    this_index = cur.u16()
    this_name = resolve_class_name(pool, this_index)
    super_index = cur.u16()
    super_name = resolve_class_name(pool, super_index)
    logger.debug("class %s extends %s", this_name, super_name)

    interfaces_count = _reject_table(cur, "interfaces")
    fields_count = _reject_table(cur, "fields")

    methods_count = cur.u16()
    methods = [decode_method(cur) for _ in range(methods_count)]
    logger.debug("%d methods, cursor at %d", methods_count, cur.tell())

    attributes = decode_attributes(cur) if cur.remaining() else []
    if cur.remaining():
        logger.warning("%d trailing bytes after class attributes at %d", cur.remaining(), cur.tell())

    return ClassFile(
        magic=magic,
        minor=minor,
        major=major,
        constants_pool=pool,
        access_flags=access,
        this_class=this_name,
        super_class=super_name,
        interfaces_count=interfaces_count,
        fields_count=fields_count,
        methods=methods,
        attributes=attributes,
        this_class_index=this_index,
        super_class_index=super_index,
    )


def parse_file(data: BytesLike, options: Optional[DecodeOptions] = None) -> ClassFile:
    """Full parse of a class file from a path or an in-memory buffer."""
    raw = _load_bytes(data)
    return decode_classfile(Cursor(raw), options)


# -----------------------------
# Fast, lighter views
# -----------------------------

def iter_constants(
    data: BytesLike, options: Optional[DecodeOptions] = None
) -> Iterator[Tuple[int, Optional[ConstantPoolEntry]]]:
    """
    Stream (index, entry) pairs from the constant pool without building a
    ClassFile. Stops after the pool; nothing past it is read.
    """
    options = options or DecodeOptions()
    cur = Cursor(_load_bytes(data))
    _decode_header(cur, options)
    count = cur.u16()
    yield from iter_pool_slots(cur, count, wide_slots=options.wide_slots)


def summarize_file(data: BytesLike, options: Optional[DecodeOptions] = None) -> Dict[str, object]:
    """
    Short digest: version, pool size, class names, and method
    name/descriptor pairs resolved through the pool.
    """
    cf = parse_file(data, options)
    pool = cf.constants_pool
    return {
        "magic": cf.magic,
        "version": f"{cf.major}.{cf.minor}",
        "constant_pool_count": len(pool) + 1,
        "access_flags": list(cf.access_flags.names),
        "this_class": cf.this_class,
        "super_class": cf.super_class,
        "methods": [
            f"{resolve_utf8(pool, m.name_index)}{resolve_utf8(pool, m.descriptor_index)}"
            for m in cf.methods
        ],
    }
