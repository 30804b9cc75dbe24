from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

# "live" is reserved; nothing currently determines an event to be in progress.
Status = Literal["upcoming", "completed", "live"]
Result = Literal["W", "L", "D"]


class Fixture(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    date: datetime  # aware, UTC
    opponent: str = ""  # empty for non-match events (training etc.)
    team_name: str = Field(default="Titans", alias="teamName")
    is_home: bool = Field(default=True, alias="isHome")
    location: str = "TBC"
    competition: str = "Fixture"
    competition_tag: Optional[str] = Field(default=None, alias="competitionTag")
    status: Status = "upcoming"
    score: Optional[str] = None  # "N-M"
    result: Optional[Result] = None
