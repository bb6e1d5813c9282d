from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File
from sqlalchemy.orm import Session
from league_backend.core.database import get_db
from league_backend.core.utils import parse_optional_int, parse_positive_int
from league_backend.fixtures.models.fixture_schema import UpdateFixtureBody
from league_backend.fixtures.services.fixture_service import FixtureService
from league_backend.fixtures.services.fixture_upload_service import FixtureUploadService

router = APIRouter()


@router.get("/")
def list_fixtures(
    leagueCode: Optional[str] = None,
    round: Optional[str] = None,
    teamId: Optional[str] = None,
    db: Session = Depends(get_db),
):
    """Fixtures for the admin screens, optionally filtered by league, round and team."""
    round_no = parse_optional_int(round, "round")
    team_id = parse_optional_int(teamId, "teamId")

    fixtures = FixtureService(db).list_fixtures(leagueCode, round_no, team_id)
    return {"fixtures": fixtures}


@router.put("/{fixture_id}")
def update_fixture(fixture_id: str, body: UpdateFixtureBody, db: Session = Depends(get_db)):
    """Update date/time and/or upsert the result, then rebuild the league table."""
    fid = parse_positive_int(fixture_id, "fixture id")
    return FixtureService(db).update_fixture(fid, body)


@router.delete("/{fixture_id}/result")
def delete_result(fixture_id: str, db: Session = Depends(get_db)):
    fid = parse_positive_int(fixture_id, "fixture id")
    return FixtureService(db).delete_result(fid)


@router.post("/upload-fixtures-csv/")
async def upload_csv(
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """Upload CSV and delegate processing to the service layer."""
    upload_service = FixtureUploadService(db)
    return await upload_service.process_csv(file)
