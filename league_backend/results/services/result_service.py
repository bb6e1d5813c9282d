from typing import Optional
from sqlalchemy.orm import Session
from league_backend.core.exceptions import ValidationError
from league_backend.results.models.result_model import Result
from league_backend.audit.services.audit_service import AuditService


def _snapshot(result: Result) -> dict:
    return {
        "fixture_id": result.fixture_id,
        "home_goals": result.home_goals,
        "away_goals": result.away_goals,
    }


def validate_goals(home_goals, away_goals):
    for label, value in (("home_goals", home_goals), ("away_goals", away_goals)):
        if value is None or isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{label} must be a whole number.")
        if value < 0:
            raise ValidationError(f"{label} cannot be negative.")


class ResultService:
    def __init__(self, db: Session):
        self.db = db
        self.audit_service = AuditService(db)

    def get_result(self, fixture_id: int) -> Optional[Result]:
        return self.db.query(Result).filter(Result.fixture_id == fixture_id).first()

    def stage_upsert(self, fixture_id: int, home_goals: int, away_goals: int) -> Result:
        """Insert or update the result of a fixture without committing."""
        validate_goals(home_goals, away_goals)

        existing = self.get_result(fixture_id)
        if existing:
            old = _snapshot(existing)
            existing.home_goals = home_goals
            existing.away_goals = away_goals
            self.audit_service.record("results", existing.id, "UPDATE", old, _snapshot(existing))
            return existing

        result = Result(fixture_id=fixture_id, home_goals=home_goals, away_goals=away_goals)
        self.db.add(result)
        self.db.flush()
        self.audit_service.record("results", result.id, "INSERT", None, _snapshot(result))
        return result

    def stage_delete(self, fixture_id: int) -> bool:
        existing = self.get_result(fixture_id)
        if not existing:
            return False
        self.audit_service.record("results", existing.id, "DELETE", _snapshot(existing), None)
        self.db.delete(existing)
        return True
