from sqlalchemy import Column, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from league_backend.core.database import Base

class Result(Base):
    __tablename__ = "results"
    __table_args__ = (
        CheckConstraint("home_goals >= 0", name="ck_results_home_goals"),
        CheckConstraint("away_goals >= 0", name="ck_results_away_goals"),
    )

    id = Column(Integer, primary_key=True, index=True)
    fixture_id = Column(Integer, ForeignKey("fixtures.id"), unique=True, nullable=False)
    home_goals = Column(Integer, nullable=False)
    away_goals = Column(Integer, nullable=False)

    fixture = relationship("Fixture", back_populates="result")
