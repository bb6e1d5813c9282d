import logging
import re
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError
from league_backend.core.exceptions import (
    LeagueBackendError,
    NotFoundError,
    ReadFailure,
    StandingsRecalculationError,
    ValidationError,
    WriteFailure,
)
from league_backend.fixtures.models.fixture_model import Fixture
from league_backend.fixtures.models.fixture_schema import UpdateFixtureBody
from league_backend.results.services.result_service import ResultService
from league_backend.standings.services.standing_service import StandingService

logger = logging.getLogger(__name__)

MATCH_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def serialize_fixture(fixture: Fixture) -> dict:
    result = fixture.result
    return {
        "id": fixture.id,
        "league_code": fixture.league_code,
        "round": fixture.round,
        "match_date": fixture.match_date.isoformat() if fixture.match_date else None,
        "match_time": fixture.match_time,
        "group_code": fixture.group_code,
        "phase": fixture.phase,
        "home_team_id": fixture.home_team_id,
        "away_team_id": fixture.away_team_id,
        "home": {"id": fixture.home_team.id, "name": fixture.home_team.name} if fixture.home_team else None,
        "away": {"id": fixture.away_team.id, "name": fixture.away_team.name} if fixture.away_team else None,
        "result": {
            "id": result.id,
            "home_goals": result.home_goals,
            "away_goals": result.away_goals,
        } if result else None,
    }


class FixtureService:
    def __init__(self, db: Session):
        self.db = db
        self.result_service = ResultService(db)
        self.standing_service = StandingService(db)

    def list_fixtures(self, league_code: Optional[str] = None, round_no: Optional[int] = None, team_id: Optional[int] = None):
        """Fixtures with team names and results, ordered by date then time."""
        query = (
            self.db.query(Fixture)
            .options(
                joinedload(Fixture.home_team),
                joinedload(Fixture.away_team),
                joinedload(Fixture.result),
            )
        )

        if league_code:
            query = query.filter(Fixture.league_code == league_code)
        if round_no is not None:
            query = query.filter(Fixture.round == round_no)
        if team_id is not None:
            # home or away equal to the selected team
            query = query.filter(or_(Fixture.home_team_id == team_id, Fixture.away_team_id == team_id))

        query = query.order_by(
            Fixture.match_date.is_(None), Fixture.match_date,
            Fixture.match_time.is_(None), Fixture.match_time,
            Fixture.id,
        )

        try:
            fixtures = query.all()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Error fetching fixtures: {e}")
            raise ReadFailure("Failed to fetch fixtures.") from e

        return [serialize_fixture(f) for f in fixtures]

    def get_fixture(self, fixture_id: int) -> Fixture:
        try:
            fixture = self.db.query(Fixture).filter(Fixture.id == fixture_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ReadFailure("Failed to read fixture.") from e

        if not fixture:
            raise NotFoundError(f"Fixture {fixture_id} not found.")
        return fixture

    def update_fixture(self, fixture_id: int, body: UpdateFixtureBody) -> dict:
        """
        Update schedule fields and/or the result of a fixture.

        The fixture and result changes commit first. When the result changed,
        the league table is rebuilt afterwards; if that fails the save stands
        and StandingsRecalculationError tells the caller the table is stale.
        """
        provided = body.model_fields_set
        if not ({"match_date", "match_time"} & provided) and body.result is None:
            raise ValidationError("Nothing to update.")

        if body.match_time is not None and not MATCH_TIME_PATTERN.match(body.match_time):
            raise ValidationError("match_time must be in HH:MM format.")

        fixture = self.get_fixture(fixture_id)

        result_changed = False
        try:
            if "match_date" in provided:
                fixture.match_date = body.match_date
            if "match_time" in provided:
                fixture.match_time = body.match_time

            if body.result is not None:
                home_goals = body.result.home_goals
                away_goals = body.result.away_goals
                if home_goals is None and away_goals is None:
                    result_changed = self.result_service.stage_delete(fixture.id)
                else:
                    self.result_service.stage_upsert(fixture.id, home_goals, away_goals)
                    result_changed = True

            self.db.commit()
        except ValidationError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Error updating fixture {fixture_id}: {e}")
            raise WriteFailure("Failed to update fixture.") from e

        response = {"success": True, "fixture_id": fixture_id, "league_code": fixture.league_code}
        if result_changed:
            response["standings"] = self._recalculate(fixture.league_code)
        return response

    def delete_result(self, fixture_id: int) -> dict:
        fixture = self.get_fixture(fixture_id)

        try:
            deleted = self.result_service.stage_delete(fixture.id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Error deleting result of fixture {fixture_id}: {e}")
            raise WriteFailure("Failed to delete result.") from e

        if not deleted:
            raise NotFoundError(f"Fixture {fixture_id} has no result.")

        return {
            "success": True,
            "fixture_id": fixture_id,
            "league_code": fixture.league_code,
            "standings": self._recalculate(fixture.league_code),
        }

    def _recalculate(self, league_code: str) -> dict:
        try:
            return self.standing_service.recalculate_league(league_code)
        except LeagueBackendError as e:
            logger.error(f"❌ Result saved but standings for {league_code} are stale: {e.message}")
            raise StandingsRecalculationError(
                f"Result saved, but standings recalculation failed: {e.message}",
                league_code,
            ) from e
