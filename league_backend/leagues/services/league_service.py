from typing import Optional
from sqlalchemy.orm import Session
from league_backend.leagues.models.league_model import League


class LeagueService:
    def __init__(self, db: Session):
        self.db = db

    def get_league(self, league_code: str) -> Optional[League]:
        return self.db.query(League).filter(League.league_code == league_code).first()

    def get_or_create_league(self, league_code: str, league_name: Optional[str] = None) -> League:
        '''Retrieve a league by code, or stage a new one if it doesn't exist.'''
        league = self.get_league(league_code)
        if not league:
            league = League(league_code=league_code, league_name=league_name or league_code)
            self.db.add(league)
            self.db.flush()
        return league

    def list_leagues(self):
        return self.db.query(League).order_by(League.league_code).all()
