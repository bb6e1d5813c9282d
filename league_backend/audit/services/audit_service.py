import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from league_backend.audit.models.audit_model import AuditLog
from league_backend.core.exceptions import ReadFailure

logger = logging.getLogger(__name__)


class AuditService:
    def __init__(self, db: Session):
        self.db = db

    def record(self, table_name: str, record_id, action: str, old_data=None, new_data=None):
        """Stage an audit entry; it is committed together with the change it describes."""
        entry = AuditLog(
            table_name=table_name,
            record_id=record_id,
            action=action,
            old_data=old_data,
            new_data=new_data,
        )
        self.db.add(entry)
        return entry

    def list_entries(self, limit: int = 200):
        try:
            return (
                self.db.query(AuditLog)
                .order_by(AuditLog.changed_at.desc(), AuditLog.id.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to read audit log: {e}")
            raise ReadFailure("Failed to read audit log.") from e
