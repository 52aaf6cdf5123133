from __future__ import annotations
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_serializer
from .common import AccessFlagSet, PoolIndex

class AttributeInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    attribute_name_index: PoolIndex
    attribute_length: int = Field(..., ge=0)
    info: bytes = b""

    @field_serializer("info", when_used="json")
    def _hex(self, v: bytes) -> str:
        return v.hex()

class MethodInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_flags: AccessFlagSet
    name_index: PoolIndex
    descriptor_index: PoolIndex
    attributes: List[AttributeInfo] = Field(default_factory=list)
