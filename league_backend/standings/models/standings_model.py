from sqlalchemy import Column, String, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from league_backend.core.database import Base

class Standing(Base):
    __tablename__ = "standings"
    __table_args__ = (
        UniqueConstraint("team_id", "league_code", name="uq_standings_team_league"),
    )

    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=False)
    league_code = Column(String, ForeignKey("leagues.league_code"), index=True, nullable=False)

    played = Column(Integer, nullable=False, default=0)
    wins = Column(Integer, nullable=False, default=0)
    draws = Column(Integer, nullable=False, default=0)
    losses = Column(Integer, nullable=False, default=0)
    goals_for = Column(Integer, nullable=False, default=0)
    goals_against = Column(Integer, nullable=False, default=0)
    goal_difference = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=0)
    group_code = Column(String, nullable=True)
    phase = Column(String, nullable=True)

    team = relationship("Team", back_populates="standings")
    league = relationship("League", back_populates="standings")
