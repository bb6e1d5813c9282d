import logging
from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from league_backend.core.config import settings
from league_backend.core.exceptions import NotFoundError, ReadFailure, ValidationError, WriteFailure
from league_backend.fixtures.models.fixture_model import Fixture
from league_backend.fixtures.services.fixture_service import FixtureService
from league_backend.leagues.services.league_service import LeagueService
from league_backend.reports.models.report_model import Report
from league_backend.results.models.result_model import Result
from league_backend.standings.services.standing_service import StandingService

logger = logging.getLogger(__name__)


def format_score(result: Optional[dict]) -> str:
    if not result:
        return "-:-"
    return f"{result['home_goals']}:{result['away_goals']}"


def _team_name(side: Optional[dict]) -> Optional[str]:
    return side["name"] if side else None


def report_summary(report: Report) -> dict:
    return {
        "id": report.id,
        "season": report.season,
        "round": report.round,
        "league_code": report.league_code,
        "created_at": report.created_at.isoformat() if report.created_at else None,
    }


class ReportService:
    def __init__(self, db: Session):
        self.db = db
        self.fixture_service = FixtureService(db)
        self.standing_service = StandingService(db)
        self.league_service = LeagueService(db)

    def latest_played_round(self, league_code: Optional[str] = None) -> int:
        """Highest round with at least one recorded result; 1 when nothing has been played."""
        query = (
            self.db.query(func.max(Fixture.round))
            .select_from(Fixture)
            .join(Result, Result.fixture_id == Fixture.id)
        )
        if league_code:
            query = query.filter(Fixture.league_code == league_code)

        try:
            latest = query.scalar()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ReadFailure("Failed to read played rounds.") from e

        return latest or 1

    def _leagues(self, league_code: Optional[str]):
        try:
            if league_code:
                league = self.league_service.get_league(league_code)
                if not league:
                    raise NotFoundError(f"League {league_code} not found.")
                return [league]
            return self.league_service.list_leagues()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ReadFailure("Failed to read leagues.") from e

    def build_round_report(self, round_no: Optional[int] = None, league_code: Optional[str] = None) -> dict:
        """
        Results of a round, the current table and the next round's schedule, per league.

        :param round_no: Round to report on; defaults to the latest round with a result
        :param league_code: Single league to report on; defaults to every league
        :return: JSON-serializable report content
        """
        if round_no is not None and round_no <= 0:
            raise ValidationError("round must be a positive number.")

        leagues = self._leagues(league_code)
        if round_no is None:
            round_no = self.latest_played_round(league_code)
        next_round = round_no + 1

        sections = []
        for league in leagues:
            code = league.league_code
            results = [
                {
                    "fixture_id": f["id"],
                    "match_date": f["match_date"],
                    "match_time": f["match_time"],
                    "home": _team_name(f["home"]),
                    "away": _team_name(f["away"]),
                    "score": format_score(f["result"]),
                }
                for f in self.fixture_service.list_fixtures(code, round_no)
            ]
            schedule = [
                {
                    "fixture_id": f["id"],
                    "match_date": f["match_date"],
                    "match_time": f["match_time"],
                    "home": _team_name(f["home"]),
                    "away": _team_name(f["away"]),
                }
                for f in self.fixture_service.list_fixtures(code, next_round)
            ]
            sections.append({
                "league_code": code,
                "league_name": league.league_name,
                "results": results,
                "standings": self.standing_service.get_league_table(code),
                "next_round_fixtures": schedule,
            })

        return {
            "season": settings.REPORT_SEASON,
            "round": round_no,
            "next_round": next_round,
            "leagues": sections,
        }

    def generate_report(self, round_no: Optional[int] = None, league_code: Optional[str] = None) -> dict:
        """Build a round report and store it in the archive."""
        content = self.build_round_report(round_no, league_code)

        report = Report(
            season=content["season"],
            round=content["round"],
            league_code=league_code,
            content=content,
        )
        try:
            self.db.add(report)
            self.db.commit()
            self.db.refresh(report)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to archive report for round {content['round']}: {e}")
            raise WriteFailure("Failed to store report.") from e

        logger.info(f"📝 Report for round {report.round} archived (id {report.id})")
        return report_summary(report)

    def list_reports(self) -> list:
        try:
            reports = (
                self.db.query(Report)
                .order_by(Report.season.desc(), Report.round.desc(), Report.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ReadFailure("Failed to read reports.") from e
        return [report_summary(r) for r in reports]

    def get_report(self, report_id: int) -> Report:
        try:
            report = self.db.get(Report, report_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ReadFailure("Failed to read report.") from e

        if not report:
            raise NotFoundError(f"Report {report_id} not found.")
        return report

    def delete_report(self, report_id: int) -> dict:
        report = self.get_report(report_id)
        try:
            self.db.delete(report)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise WriteFailure("Failed to delete report.") from e

        logger.info(f"🗑️ Report {report_id} deleted")
        return {"success": True}
