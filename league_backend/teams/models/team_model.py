from sqlalchemy import Column, String, ForeignKey, Integer, Boolean
from sqlalchemy.orm import relationship
from league_backend.core.database import Base

class Team(Base):
    __tablename__ = "teams"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    league_code = Column(String, ForeignKey("leagues.league_code"), index=True)

    # Byes / "TBD" slots used for scheduling; never ranked
    is_placeholder = Column(Boolean, default=False)

    league = relationship("League", back_populates="teams")
    home_fixtures = relationship("Fixture", foreign_keys="[Fixture.home_team_id]", back_populates="home_team")
    away_fixtures = relationship("Fixture", foreign_keys="[Fixture.away_team_id]", back_populates="away_team")
    standings = relationship("Standing", back_populates="team")
