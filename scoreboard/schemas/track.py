from typing import Literal, Optional

from pydantic import Field, model_validator

from .base import CamelModel

# Weekly-Challenge and Campaign-Challenge only appear on challenge slot views.
TrackMapType = Literal["Campaign", "Weekly", "Custom"]
TrackDifficulty = Literal["Beginner", "Intermediate", "Advanced", "Expert", "Lunatic"]


class TrackCreateIn(CamelModel):
    id: Optional[str] = Field(default=None, min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_-]+$")
    name: str = Field(..., min_length=1, max_length=120)
    author: str = Field(default="Nadeo", max_length=60)
    map_type: TrackMapType = "Campaign"
    difficulty: TrackDifficulty = "Intermediate"
    author_time: Optional[int] = Field(default=None, gt=0)
    gold_time: Optional[int] = Field(default=None, gt=0)
    silver_time: Optional[int] = Field(default=None, gt=0)
    bronze_time: Optional[int] = Field(default=None, gt=0)
    week_number: Optional[int] = Field(default=None, ge=1)
    is_active: bool = True

    @model_validator(mode="after")
    def weekly_needs_week(self):
        if self.map_type == "Weekly" and self.week_number is None:
            raise ValueError("Weekly tracks require weekNumber")
        return self


class ChallengeAssignIn(CamelModel):
    track_id: str = Field(..., min_length=1, max_length=64)
