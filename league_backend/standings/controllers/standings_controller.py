import json
from typing import Optional
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from league_backend.core.database import get_db
from league_backend.core.utils import parse_positive_int
from league_backend.standings.services.standing_service import StandingService

router = APIRouter()


async def _read_json_body(request: Request) -> dict:
    body = await request.body()
    if not body:
        return {}
    try:
        data = json.loads(body)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


@router.get("/recalculate-standings")
def recalculate_standings_get(fixtureId: Optional[str] = None, db: Session = Depends(get_db)):
    """Browser-friendly trigger: recompute the league of ?fixtureId=."""
    fixture_id = parse_positive_int(fixtureId, "fixtureId")
    return StandingService(db).recalculate_for_fixture(fixture_id)


@router.post("/recalculate-standings")
async def recalculate_standings_post(request: Request, db: Session = Depends(get_db)):
    """
    Recompute the standings of the league a fixture belongs to.

    The fixture id is taken from the JSON body field ``fixtureId`` and falls
    back to the ``fixtureId`` query parameter.
    """
    body = await _read_json_body(request)
    raw = body.get("fixtureId")
    if raw is None:
        raw = request.query_params.get("fixtureId")

    fixture_id = parse_positive_int(raw, "fixtureId")
    return await run_in_threadpool(StandingService(db).recalculate_for_fixture, fixture_id)


@router.get("/standings/{league_code}")
def get_standings(league_code: str, db: Session = Depends(get_db)):
    """Sorted league table."""
    table = StandingService(db).get_league_table(league_code)
    return {"league_code": league_code, "standings": table}
