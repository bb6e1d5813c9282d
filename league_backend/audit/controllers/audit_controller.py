from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from league_backend.core.database import get_db
from league_backend.audit.services.audit_service import AuditService

router = APIRouter()


@router.get("/list")
def list_audit_logs(db: Session = Depends(get_db)):
    """Latest 200 audit entries, newest first."""
    entries = AuditService(db).list_entries()

    return {
        "logs": [
            {
                "id": e.id,
                "table_name": e.table_name,
                "record_id": e.record_id,
                "action": e.action,
                "old_data": e.old_data,
                "new_data": e.new_data,
                "changed_at": e.changed_at,
            }
            for e in entries
        ]
    }
