from typing import Optional
from pydantic import BaseModel


class GenerateReportBody(BaseModel):
    round: Optional[int] = None        # defaults to the latest round with a result
    leagueCode: Optional[str] = None   # defaults to every league
