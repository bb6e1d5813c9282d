from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from league_backend.core.exceptions import ReadFailure
from league_backend.teams.models.team_model import Team


class TeamService:
    def __init__(self, db: Session):
        self.db = db

    def search_teams(self, search: str = "", league_code: Optional[str] = None, limit: int = 30):
        """Teams ordered by name, filtered by a case-insensitive name fragment and league."""
        try:
            query = self.db.query(Team)

            if search:
                query = query.filter(Team.name.ilike(f"%{search}%"))
            if league_code:
                query = query.filter(Team.league_code == league_code)

            return query.order_by(Team.name.asc()).limit(limit).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ReadFailure(f"Failed to read teams: {e}") from e
