from sqlalchemy import Column, String, Integer, ForeignKey, Date
from sqlalchemy.orm import relationship
from league_backend.core.database import Base

class Fixture(Base):
    __tablename__ = "fixtures"

    id = Column(Integer, primary_key=True, index=True)
    league_code = Column(String, ForeignKey("leagues.league_code"), index=True, nullable=False)
    round = Column(Integer, nullable=False)
    home_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    away_team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    group_code = Column(String, nullable=True)
    phase = Column(String, nullable=True)
    match_date = Column(Date, nullable=True)
    match_time = Column(String, nullable=True)  # HH:MM, 24h

    league = relationship("League", back_populates="fixtures")
    home_team = relationship("Team", foreign_keys=[home_team_id], back_populates="home_fixtures")
    away_team = relationship("Team", foreign_keys=[away_team_id], back_populates="away_fixtures")
    result = relationship("Result", back_populates="fixture", uselist=False)
