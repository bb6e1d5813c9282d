from datetime import date
from typing import Optional
from pydantic import BaseModel


class ResultPayload(BaseModel):
    home_goals: Optional[int] = None
    away_goals: Optional[int] = None


class UpdateFixtureBody(BaseModel):
    match_date: Optional[date] = None   # ISO (YYYY-MM-DD)
    match_time: Optional[str] = None    # HH:MM (24h)
    result: Optional[ResultPayload] = None
