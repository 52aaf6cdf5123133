from __future__ import annotations
import math
import struct
from types import MappingProxyType
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, computed_field, field_serializer

from .common import PoolIndex

# Wire tag -> output label. Labels double as the discriminator of ConstantPoolEntry.
POOL_TAGS = MappingProxyType({
    1: "CONSTANT_Utf8",
    3: "CONSTANT_Integer",
    4: "CONSTANT_Float",
    5: "CONSTANT_Long",
    6: "CONSTANT_Double",
    7: "CONSTANT_Class",
    8: "CONSTANT_String",
    9: "CONSTANT_Fieldref",
    10: "CONSTANT_Methodref",
    11: "CONSTANT_InterfaceMethodref",
    12: "CONSTANT_NameAndType",
    15: "CONSTANT_MethodHandle",
    16: "CONSTANT_MethodType",
    17: "CONSTANT_Dynamic",
    18: "CONSTANT_InvokeDynamic",
    19: "CONSTANT_Module",
    20: "CONSTANT_Package",
})
TAG_VALUES = MappingProxyType({label: tag for tag, label in POOL_TAGS.items()})


class _Entry(BaseModel):
    model_config = ConfigDict(frozen=True)


class _RawEntry(_Entry):
    raw: bytes = Field(..., min_length=4, max_length=4)

    @field_serializer("raw", when_used="json")
    def _hex(self, v: bytes) -> str:
        return v.hex()


def decode_modified_utf8(raw: bytes) -> str:
    """
    Class files store "modified UTF-8": NUL is C0 80 and supplementary
    characters are surrogate pairs encoded separately. Plain UTF-8 is the
    common case and decodes unchanged.
    """
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass
    try:
        s = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
    except UnicodeDecodeError:
        return raw.decode("utf-8", errors="replace")
    # pair up surrogates; lone ones become U+FFFD
    return s.encode("utf-16-le", errors="surrogatepass").decode("utf-16-le", errors="replace")


def _finite_or_name(v: float):
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "Infinity" if v > 0 else "-Infinity"
    return v


class Utf8Info(_Entry):
    """
    text is raw decoded with surrogateescape, so
    text.encode("utf-8", "surrogateescape") == raw always holds.
    readable is the modified UTF-8 reading, for display only.
    """
    tag: Literal["CONSTANT_Utf8"] = "CONSTANT_Utf8"
    length: int = Field(..., ge=0, le=0xFFFF)
    raw: bytes
    text: str

    @field_serializer("raw", when_used="json")
    def _hex(self, v: bytes) -> str:
        return v.hex()

    @property
    def readable(self) -> str:
        return decode_modified_utf8(self.raw)


class IntegerInfo(_RawEntry):
    tag: Literal["CONSTANT_Integer"] = "CONSTANT_Integer"

    @computed_field
    @property
    def value(self) -> int:
        return struct.unpack(">i", self.raw)[0]


class FloatInfo(_RawEntry):
    tag: Literal["CONSTANT_Float"] = "CONSTANT_Float"

    @computed_field
    @property
    def value(self) -> float:
        return struct.unpack(">f", self.raw)[0]

    @field_serializer("value", when_used="json")
    def _json_value(self, v: float):
        return _finite_or_name(v)


class LongInfo(_Entry):
    tag: Literal["CONSTANT_Long"] = "CONSTANT_Long"
    high: int
    low: int

    @computed_field
    @property
    def value(self) -> int:
        return struct.unpack(">q", struct.pack(">ii", self.high, self.low))[0]


class DoubleInfo(_Entry):
    tag: Literal["CONSTANT_Double"] = "CONSTANT_Double"
    high: int
    low: int

    @computed_field
    @property
    def value(self) -> float:
        return struct.unpack(">d", struct.pack(">ii", self.high, self.low))[0]

    @field_serializer("value", when_used="json")
    def _json_value(self, v: float):
        return _finite_or_name(v)


class ClassInfo(_Entry):
    tag: Literal["CONSTANT_Class"] = "CONSTANT_Class"
    name_index: PoolIndex


class StringInfo(_Entry):
    tag: Literal["CONSTANT_String"] = "CONSTANT_String"
    string_index: PoolIndex


class FieldrefInfo(_Entry):
    tag: Literal["CONSTANT_Fieldref"] = "CONSTANT_Fieldref"
    class_index: PoolIndex
    name_and_type_index: PoolIndex


class MethodrefInfo(_Entry):
    tag: Literal["CONSTANT_Methodref"] = "CONSTANT_Methodref"
    class_index: PoolIndex
    name_and_type_index: PoolIndex


class InterfaceMethodrefInfo(_Entry):
    tag: Literal["CONSTANT_InterfaceMethodref"] = "CONSTANT_InterfaceMethodref"
    class_index: PoolIndex
    name_and_type_index: PoolIndex


class NameAndTypeInfo(_Entry):
    tag: Literal["CONSTANT_NameAndType"] = "CONSTANT_NameAndType"
    name_index: PoolIndex
    descriptor_index: PoolIndex


class MethodHandleInfo(_Entry):
    tag: Literal["CONSTANT_MethodHandle"] = "CONSTANT_MethodHandle"
    reference_kind: int = Field(..., ge=1, le=9)
    reference_kind_name: str
    reference_index: PoolIndex


class MethodTypeInfo(_Entry):
    tag: Literal["CONSTANT_MethodType"] = "CONSTANT_MethodType"
    descriptor_index: PoolIndex


class DynamicInfo(_Entry):
    tag: Literal["CONSTANT_Dynamic"] = "CONSTANT_Dynamic"
    bootstrap_method_attr_index: int = Field(..., ge=0, le=0xFFFF)
    name_and_type_index: PoolIndex


class InvokeDynamicInfo(_Entry):
    tag: Literal["CONSTANT_InvokeDynamic"] = "CONSTANT_InvokeDynamic"
    bootstrap_method_attr_index: int = Field(..., ge=0, le=0xFFFF)
    name_and_type_index: PoolIndex


class ModuleInfo(_Entry):
    tag: Literal["CONSTANT_Module"] = "CONSTANT_Module"
    name_index: PoolIndex


class PackageInfo(_Entry):
    tag: Literal["CONSTANT_Package"] = "CONSTANT_Package"
    name_index: PoolIndex


ConstantPoolEntry = Annotated[
    Union[
        Utf8Info, IntegerInfo, FloatInfo, LongInfo, DoubleInfo, ClassInfo, StringInfo,
        FieldrefInfo, MethodrefInfo, InterfaceMethodrefInfo, NameAndTypeInfo,
        MethodHandleInfo, MethodTypeInfo, DynamicInfo, InvokeDynamicInfo,
        ModuleInfo, PackageInfo,
    ],
    Field(discriminator="tag"),
]


class ConstantPool(RootModel[List[Optional[ConstantPoolEntry]]]):
    """
    Pool slots in wire order. Slot i (1-based) is stored at position i-1;
    None marks the shadow slot after a Long/Double when wide slots are on.
    """
    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.root)

    def __iter__(self):
        return iter(self.root)

    def slot(self, index: int) -> Optional[ConstantPoolEntry]:
        return self.root[index - 1]
