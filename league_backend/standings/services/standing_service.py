import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from league_backend.core.exceptions import NotFoundError, ReadFailure, WriteFailure
from league_backend.core.locks import league_lock
from league_backend.fixtures.models.fixture_model import Fixture
from league_backend.results.models.result_model import Result
from league_backend.standings.models.standings_model import Standing
from league_backend.teams.models.team_model import Team
from league_backend.standings.services.standings_calculator import (
    compute_standings,
    is_real_team,
    sort_standings,
)

logger = logging.getLogger(__name__)


class StandingService:
    def __init__(self, db: Session):
        self.db = db

    def recalculate_for_fixture(self, fixture_id: int) -> dict:
        """Recompute the whole table of the league the fixture belongs to."""
        try:
            fixture = self.db.query(Fixture).filter(Fixture.id == fixture_id).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Could not load fixture {fixture_id}: {e}")
            raise ReadFailure("Failed to read fixture.") from e

        if not fixture:
            raise NotFoundError(f"Fixture {fixture_id} not found.")

        return self.recalculate_league(fixture.league_code)

    def recalculate_league(self, league_code: str) -> dict:
        """
        Rebuild the standings of one league from its teams, fixtures and results.

        Reads happen first; the delete + insert of the standings rows then runs
        in a single transaction so readers never see a half-replaced table and a
        failed insert leaves the previous table in place.
        """
        logger.info(f"🔁 Recalculating standings for league {league_code}")

        with league_lock(league_code):
            teams, fixtures, results = self._load_sources(league_code)

            real_teams = [t for t in teams if is_real_team(t)]
            if not real_teams or not fixtures:
                self._replace_rows(league_code, [])
                logger.info(f"✅ League {league_code} has no real teams or fixtures, standings cleared")
                return {"ok": True, "league_code": league_code, "teamsUpdated": 0}

            aggregates = compute_standings(league_code, real_teams, fixtures, results)
            self._replace_rows(league_code, aggregates)

        logger.info(f"✅ Standings for league {league_code} updated ({len(aggregates)} teams)")
        return {"ok": True, "league_code": league_code, "teamsUpdated": len(aggregates)}

    def _load_sources(self, league_code: str):
        try:
            teams = self.db.query(Team).filter(Team.league_code == league_code).all()
            fixtures = self.db.query(Fixture).filter(Fixture.league_code == league_code).all()

            results = {}
            fixture_ids = [f.id for f in fixtures]
            if fixture_ids:
                rows = self.db.query(Result).filter(Result.fixture_id.in_(fixture_ids)).all()
                results = {r.fixture_id: r for r in rows}
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to read sources for league {league_code}: {e}")
            raise ReadFailure(f"Failed to read teams, fixtures or results for league {league_code}.") from e

        return teams, fixtures, results

    def _replace_rows(self, league_code: str, aggregates) -> None:
        try:
            self.db.query(Standing).filter(Standing.league_code == league_code).delete(synchronize_session=False)
            if aggregates:
                self.db.add_all([Standing(**agg.as_row()) for agg in aggregates])
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to write standings for league {league_code}: {e}")
            raise WriteFailure(f"Failed to write standings for league {league_code}.") from e

    def get_league_table(self, league_code: str) -> list:
        """Stored standings of a league in display order, with team names and positions."""
        try:
            rows = (
                self.db.query(Standing, Team.name)
                .join(Team, Standing.team_id == Team.id)
                .filter(Standing.league_code == league_code)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ReadFailure(f"Failed to read standings for league {league_code}.") from e

        names = {standing.team_id: name for standing, name in rows}
        ordered = sort_standings([standing for standing, _ in rows], names)

        table = []
        for position, standing in enumerate(ordered, start=1):
            table.append({
                "position": position,
                "team_id": standing.team_id,
                "team_name": names.get(standing.team_id),
                "league_code": standing.league_code,
                "played": standing.played,
                "wins": standing.wins,
                "draws": standing.draws,
                "losses": standing.losses,
                "goals_for": standing.goals_for,
                "goals_against": standing.goals_against,
                "goal_difference": standing.goal_difference,
                "points": standing.points,
                "group_code": standing.group_code,
                "phase": standing.phase,
            })
        return table
