from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session
from league_backend.core.database import get_db
from league_backend.backup.services.backup_service import BackupService

router = APIRouter()


class RestoreRequest(BaseModel):
    backupName: Optional[str] = None
    mode: Optional[str] = None
    leagueCode: Optional[str] = None


@router.post("/create")
def create_backup(db: Session = Depends(get_db)):
    """Snapshot teams, fixtures, results and standings into a JSON file."""
    return BackupService(db).create_backup()


@router.get("/list")
def list_backups(db: Session = Depends(get_db)):
    return {"backups": BackupService(db).list_backups()}


@router.get("/download")
def download_backup(name: str, db: Session = Depends(get_db)):
    path = BackupService(db).existing_backup_path(name)
    return FileResponse(path, media_type="application/json", filename=path.name)


@router.delete("/delete")
def delete_backup(name: str, db: Session = Depends(get_db)):
    return BackupService(db).delete_backup(name)


@router.post("/restore")
def restore_backup(body: RestoreRequest, db: Session = Depends(get_db)):
    """Restore everything (mode=ALL) or a single league (mode=ONE_LEAGUE)."""
    return BackupService(db).restore_backup(body.backupName, body.mode, body.leagueCode)
