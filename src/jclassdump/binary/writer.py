from __future__ import annotations
from typing import Iterable
from ..models.classfile import ClassFile
from ..models.constants import TAG_VALUES, ConstantPool
from ..models.member import AttributeInfo


def _u2(v: int) -> bytes: return v.to_bytes(2, "big", signed=False)
def _s2(v: int) -> bytes: return v.to_bytes(2, "big", signed=True)
def _s4(v: int) -> bytes: return v.to_bytes(4, "big", signed=True)


def encode_constant_pool(pool: ConstantPool) -> bytes:
    out = bytearray()
    out += _u2(len(pool) + 1)
    for entry in pool:
        if entry is None:  # shadow slot of a wide constant; nothing on the wire
            continue
        out += TAG_VALUES[entry.tag].to_bytes(1, "big")
        if entry.tag == "CONSTANT_Utf8":
            out += _u2(len(entry.raw)) + entry.raw
        elif entry.tag in ("CONSTANT_Integer", "CONSTANT_Float"):
            out += entry.raw
        elif entry.tag in ("CONSTANT_Long", "CONSTANT_Double"):
            out += _s4(entry.high) + _s4(entry.low)
        elif entry.tag == "CONSTANT_MethodHandle":
            out += entry.reference_kind.to_bytes(1, "big") + _u2(entry.reference_index)
        else:
            # Every remaining shape is a run of u2 indices in declaration order.
            for v in entry.model_dump(exclude={"tag"}).values():
                out += _u2(v)
    return bytes(out)


def encode_attributes(attrs: Iterable[AttributeInfo]) -> bytes:
    attrs = list(attrs)
    out = bytearray(_u2(len(attrs)))
    for a in attrs:
        out += _u2(a.attribute_name_index) + _s4(len(a.info)) + a.info
    return bytes(out)


def write_file(file: ClassFile) -> bytes:
    """
    Re-encode a decoded ClassFile. Interfaces and fields are never decoded,
    so both counts are written as 0.
    """
    if file.interfaces_count or file.fields_count:
        raise ValueError("cannot encode interfaces/fields: they are never decoded")
    out = bytearray()
    out += bytes.fromhex(file.magic)
    out += _s2(file.minor) + _s2(file.major)
    out += encode_constant_pool(file.constants_pool)
    out += _u2(file.access_flags.mask)
    out += _u2(file.this_class_index) + _u2(file.super_class_index)
    out += _u2(0) + _u2(0)
    out += _u2(len(file.methods))
    for m in file.methods:
        out += _u2(m.access_flags.mask) + _u2(m.name_index) + _u2(m.descriptor_index)
        out += encode_attributes(m.attributes)
    if file.attributes:
        out += encode_attributes(file.attributes)
    return bytes(out)
