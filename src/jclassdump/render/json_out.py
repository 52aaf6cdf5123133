from __future__ import annotations
import json
from typing import Optional
from ..models.classfile import ClassFile

def render_json(file: ClassFile, *, indent: Optional[int] = 2) -> str:
    """Indented JSON; byte payloads come out as hex strings."""
    return json.dumps(file.model_dump(mode="json"), indent=indent, allow_nan=False)
