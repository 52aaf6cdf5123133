from __future__ import annotations
from typing import List
from .bytecursor import Cursor
from .access_flags import decode_method_flags
from ..errors import OutOfBounds
from ...models.member import AttributeInfo, MethodInfo

def decode_attribute(cur: Cursor) -> AttributeInfo:
    """
    attribute_info: u2 name index, i4 length, then `length` opaque bytes.
    The payload is not interpreted here (Code, LineNumberTable, ... all alike).
    """
    name_index = cur.u16()
    length = cur.s32()
    if length < 0:
        raise OutOfBounds(cur.tell(), length, cur.remaining())
    return AttributeInfo(attribute_name_index=name_index, attribute_length=length, info=cur.take(length))

def decode_attributes(cur: Cursor) -> List[AttributeInfo]:
    count = cur.u16()
    return [decode_attribute(cur) for _ in range(count)]

def decode_method(cur: Cursor) -> MethodInfo:
    flags = decode_method_flags(cur)
    name_index = cur.u16()
    descriptor_index = cur.u16()
    return MethodInfo(
        access_flags=flags,
        name_index=name_index,
        descriptor_index=descriptor_index,
        attributes=decode_attributes(cur),
    )
