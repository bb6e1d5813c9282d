from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from league_backend.core.database import get_db
from league_backend.leagues.services.league_service import LeagueService

router = APIRouter()


@router.get("/")
def list_leagues(db: Session = Depends(get_db)):
    leagues = LeagueService(db).list_leagues()
    return {"leagues": [{"league_code": l.league_code, "league_name": l.league_name} for l in leagues]}
