from __future__ import annotations
from pydantic import BaseModel, ConfigDict

class DecodeOptions(BaseModel):
    """
    Knobs for a single decode session.

    wide_slots: Long/Double entries take two pool slots (the second is kept
        as None). Off by default: each takes one slot, as the decoder has
        always done, and a warning is logged when one is seen.
    check_magic: reject files whose magic is not CAFEBABE.
    """
    model_config = ConfigDict(frozen=True)

    wide_slots: bool = False
    check_magic: bool = False
