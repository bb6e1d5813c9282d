from fastapi import APIRouter
from league_backend.standings.controllers.standings_controller import router as standings_router
from league_backend.fixtures.controllers.fixture_controller import router as fixtures_router
from league_backend.teams.controllers.team_controller import router as teams_router
from league_backend.audit.controllers.audit_controller import router as audit_router
from league_backend.backup.controllers.backup_controller import router as backup_router
from league_backend.leagues.controllers.league_controller import router as leagues_router
from league_backend.reports.controllers.report_controller import router as reports_router

api_router = APIRouter()

api_router.include_router(standings_router, tags=["standings"])
api_router.include_router(fixtures_router, prefix="/admin/fixtures", tags=["fixtures"])
api_router.include_router(teams_router, prefix="/admin/teams", tags=["teams"])
api_router.include_router(audit_router, prefix="/audit", tags=["audit"])
api_router.include_router(backup_router, prefix="/backup", tags=["backup"])
api_router.include_router(leagues_router, prefix="/leagues", tags=["leagues"])
api_router.include_router(reports_router, prefix="/reports", tags=["reports"])
