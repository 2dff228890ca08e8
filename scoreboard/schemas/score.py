from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel


class ScoreSubmitIn(CamelModel):
    track_id: str = Field(..., min_length=1, max_length=64)
    time: int = Field(..., gt=0, description="Lap time in milliseconds")
    screenshot: Optional[str] = Field(default=None, max_length=2048)
    replay: Optional[str] = Field(default=None, max_length=2048)

    @field_validator("track_id")
    @classmethod
    def strip_track_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Track ID is required")
        return v
