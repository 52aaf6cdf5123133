from __future__ import annotations
import logging
from types import MappingProxyType
from typing import Callable, Iterator, Optional, Tuple

from .bytecursor import Cursor
from ..errors import UnsupportedTag
from ...models.constants import (
    POOL_TAGS,
    ClassInfo, DoubleInfo, DynamicInfo, FieldrefInfo, FloatInfo, IntegerInfo,
    InterfaceMethodrefInfo, InvokeDynamicInfo, LongInfo, MethodHandleInfo,
    MethodrefInfo, MethodTypeInfo, ModuleInfo, NameAndTypeInfo, PackageInfo,
    StringInfo, Utf8Info, ConstantPoolEntry,
)

logger = logging.getLogger(__name__)

# method_handle reference_kind (JVMS 5.4.3.5)
REFERENCE_KINDS = MappingProxyType({
    1: "REF_getField",
    2: "REF_getStatic",
    3: "REF_putField",
    4: "REF_putStatic",
    5: "REF_invokeVirtual",
    6: "REF_invokeStatic",
    7: "REF_invokeSpecial",
    8: "REF_newInvokeSpecial",
    9: "REF_invokeInterface",
})

# Tags whose entry occupies two pool slots on the wire
WIDE_TAGS = frozenset((5, 6))


def _utf8(cur: Cursor) -> Utf8Info:
    length = cur.u16()
    raw = cur.take(length)
    return Utf8Info(length=length, raw=raw, text=raw.decode("utf-8", errors="surrogateescape"))

def _integer(cur: Cursor) -> IntegerInfo: return IntegerInfo(raw=cur.take(4))
def _float(cur: Cursor) -> FloatInfo:     return FloatInfo(raw=cur.take(4))
def _long(cur: Cursor) -> LongInfo:       return LongInfo(high=cur.s32(), low=cur.s32())
def _double(cur: Cursor) -> DoubleInfo:   return DoubleInfo(high=cur.s32(), low=cur.s32())
def _class(cur: Cursor) -> ClassInfo:     return ClassInfo(name_index=cur.u16())
def _string(cur: Cursor) -> StringInfo:   return StringInfo(string_index=cur.u16())

def _fieldref(cur: Cursor) -> FieldrefInfo:
    return FieldrefInfo(class_index=cur.u16(), name_and_type_index=cur.u16())

def _methodref(cur: Cursor) -> MethodrefInfo:
    return MethodrefInfo(class_index=cur.u16(), name_and_type_index=cur.u16())

def _interface_methodref(cur: Cursor) -> InterfaceMethodrefInfo:
    return InterfaceMethodrefInfo(class_index=cur.u16(), name_and_type_index=cur.u16())

def _name_and_type(cur: Cursor) -> NameAndTypeInfo:
    return NameAndTypeInfo(name_index=cur.u16(), descriptor_index=cur.u16())

def _method_handle(cur: Cursor) -> MethodHandleInfo:
    at = cur.tell()
    kind = cur.u8()
    if kind not in REFERENCE_KINDS:
        raise UnsupportedTag(kind, at, what="method handle reference kind")
    return MethodHandleInfo(
        reference_kind=kind,
        reference_kind_name=REFERENCE_KINDS[kind],
        reference_index=cur.u16(),
    )

def _method_type(cur: Cursor) -> MethodTypeInfo:
    return MethodTypeInfo(descriptor_index=cur.u16())

def _dynamic(cur: Cursor) -> DynamicInfo:
    return DynamicInfo(bootstrap_method_attr_index=cur.u16(), name_and_type_index=cur.u16())

def _invoke_dynamic(cur: Cursor) -> InvokeDynamicInfo:
    return InvokeDynamicInfo(bootstrap_method_attr_index=cur.u16(), name_and_type_index=cur.u16())

def _module(cur: Cursor) -> ModuleInfo:   return ModuleInfo(name_index=cur.u16())
def _package(cur: Cursor) -> PackageInfo: return PackageInfo(name_index=cur.u16())


# ---- tag -> shape plan ----
CONSTANT_DECODERS = MappingProxyType({
    1:  _utf8,
    3:  _integer,
    4:  _float,
    5:  _long,
    6:  _double,
    7:  _class,
    8:  _string,
    9:  _fieldref,
    10: _methodref,
    11: _interface_methodref,
    12: _name_and_type,
    15: _method_handle,
    16: _method_type,
    17: _dynamic,
    18: _invoke_dynamic,
    19: _module,
    20: _package,
})


def decode_constant(cur: Cursor, tag: int) -> ConstantPoolEntry:
    """
    Decode the body of one pool entry whose tag byte was already consumed.
    Unknown tags fail before anything else is read.
    """
    read: Optional[Callable[[Cursor], ConstantPoolEntry]] = CONSTANT_DECODERS.get(tag)
    if read is None:
        raise UnsupportedTag(tag, cur.tell() - 1)
    return read(cur)


def iter_pool_slots(
    cur: Cursor, count: int, *, wide_slots: bool = False
) -> Iterator[Tuple[int, Optional[ConstantPoolEntry]]]:
    """
    Yield (index, entry) for slots 1..count-1 in wire order. With wide_slots,
    the slot after a Long/Double is yielded as None without reading anything.
    """
    i = 1
    while i < count:
        tag = cur.u8()
        entry = decode_constant(cur, tag)
        yield i, entry
        i += 1
        if tag in WIDE_TAGS:
            if wide_slots:
                if i < count:
                    yield i, None
                    i += 1
            else:
                logger.warning("%s at pool index %d kept in a single slot", POOL_TAGS[tag], i - 1)


def decode_constant_pool(cur: Cursor, count: int, *, wide_slots: bool = False) -> list:
    return [entry for _, entry in iter_pool_slots(cur, count, wide_slots=wide_slots)]
