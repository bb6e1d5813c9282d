from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from league_backend.core.database import get_db
from league_backend.teams.services.team_service import TeamService

router = APIRouter()


@router.get("/")
def list_teams(search: str = "", leagueCode: Optional[str] = None, db: Session = Depends(get_db)):
    """
    Get up to 30 teams for the admin pickers.
    """
    teams = TeamService(db).search_teams(search, leagueCode)

    return {
        "teams": [
            {"id": t.id, "name": t.name, "league_code": t.league_code, "is_placeholder": bool(t.is_placeholder)}
            for t in teams
        ]
    }
