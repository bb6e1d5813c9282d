from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from league_backend.core.database import Base

class League(Base):
    __tablename__ = "leagues"

    league_code = Column(String, primary_key=True, index=True)
    league_name = Column(String, nullable=False)

    teams = relationship("Team", back_populates="league")
    fixtures = relationship("Fixture", back_populates="league")
    standings = relationship("Standing", back_populates="league")
