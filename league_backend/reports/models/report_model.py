from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, DateTime, JSON
from league_backend.core.database import Base

class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, index=True)
    season = Column(String, nullable=False)
    round = Column(Integer, nullable=False)
    league_code = Column(String, nullable=True)  # None = every league
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    content = Column(JSON, nullable=False)
