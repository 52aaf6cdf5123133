from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from .common import AccessFlagSet, PoolIndex
from .constants import ConstantPool
from .member import AttributeInfo, MethodInfo

class ClassFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    magic: str
    minor: int
    major: int
    constants_pool: ConstantPool
    access_flags: AccessFlagSet
    this_class: str
    super_class: str
    interfaces_count: int = 0
    fields_count: int = 0
    methods: List[MethodInfo] = Field(default_factory=list)
    attributes: List[AttributeInfo] = Field(default_factory=list)

    # Raw indices behind this_class/super_class; kept for re-encoding, not rendered.
    this_class_index: PoolIndex = Field(0, exclude=True)
    super_class_index: PoolIndex = Field(0, exclude=True)

    # Convenience constructors around the binary and render layers
    @classmethod
    def from_binary(cls, data: Union[bytes, str, Path], options=None) -> "ClassFile":
        from ..binary.reader import parse_file
        return parse_file(data, options)

    def to_binary(self) -> bytes:
        from ..binary.writer import write_file
        return write_file(self)

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        from ..render.json_out import render_json
        return render_json(self, indent=indent)

    def to_text(self) -> str:
        from ..render.text_out import render_text
        return render_text(self)
