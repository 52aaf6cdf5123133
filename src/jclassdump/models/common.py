from __future__ import annotations
from typing import Annotated, Tuple
from pydantic import BaseModel, ConfigDict, Field

# Raw u2 index into the constant pool. Range against the actual pool is
# only checked when the index is resolved.
PoolIndex = Annotated[int, Field(ge=0, le=0xFFFF)]


class AccessFlagSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    mask: int = Field(..., ge=0, le=0xFFFF)
    names: Tuple[str, ...] = ()

    def __contains__(self, name: str) -> bool:
        return name in self.names
