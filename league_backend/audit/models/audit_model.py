from datetime import datetime, timezone
from sqlalchemy import Column, String, Integer, DateTime, JSON
from league_backend.core.database import Base

class AuditLog(Base):
    __tablename__ = "audit_log"

    id = Column(Integer, primary_key=True, index=True)
    table_name = Column(String, nullable=False)
    record_id = Column(Integer, nullable=True)
    action = Column(String, nullable=False)  # INSERT / UPDATE / DELETE
    old_data = Column(JSON, nullable=True)
    new_data = Column(JSON, nullable=True)
    changed_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
