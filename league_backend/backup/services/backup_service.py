import json
import logging
import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional
from sqlalchemy import Date, DateTime, text
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from league_backend.core.config import settings
from league_backend.core.exceptions import NotFoundError, ReadFailure, ValidationError, WriteFailure
from league_backend.fixtures.models.fixture_model import Fixture
from league_backend.leagues.models.league_model import League
from league_backend.results.models.result_model import Result
from league_backend.standings.models.standings_model import Standing
from league_backend.standings.services.standing_service import StandingService
from league_backend.teams.models.team_model import Team

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1
BACKUP_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9._-]*\.json$")

# Insert order; deletes run in reverse
TABLES = [
    ("leagues", League),
    ("teams", Team),
    ("fixtures", Fixture),
    ("results", Result),
    ("standings", Standing),
]

RESTORE_MODES = ("ALL", "ONE_LEAGUE")

# Tables with serial ids that restore inserts explicitly
SERIAL_TABLES = [model.__tablename__ for _, model in TABLES if "id" in model.__table__.primary_key.columns]


def row_to_dict(row) -> dict:
    data = {}
    for column in row.__table__.columns:
        value = getattr(row, column.key)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        data[column.key] = value
    return data


def dict_to_row(model, data: dict):
    values = {}
    for column in model.__table__.columns:
        if column.key not in data:
            continue
        value = data[column.key]
        if value is not None and isinstance(column.type, DateTime):
            value = datetime.fromisoformat(value)
        elif value is not None and isinstance(column.type, Date):
            value = date.fromisoformat(value)
        values[column.key] = value
    return model(**values)


class BackupService:
    def __init__(self, db: Session, backup_dir: Optional[str] = None):
        self.db = db
        self.backup_dir = Path(backup_dir or settings.BACKUP_DIR)
        self.standing_service = StandingService(db)

    def backup_path(self, name: str) -> Path:
        if not name or not BACKUP_NAME_PATTERN.match(name) or ".." in name:
            raise ValidationError("Invalid backup name.")
        return self.backup_dir / name

    def existing_backup_path(self, name: str) -> Path:
        path = self.backup_path(name)
        if not path.is_file():
            raise NotFoundError(f"Backup {name} not found.")
        return path

    def build_snapshot(self) -> dict:
        try:
            data = {key: [row_to_dict(r) for r in self.db.query(model).all()] for key, model in TABLES}
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ReadFailure(f"Failed to read tables for backup: {e}") from e

        return {
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "version": BACKUP_VERSION,
            "data": data,
        }

    def create_backup(self) -> dict:
        payload = self.build_snapshot()
        safe_name = "backup-" + re.sub(r"[:.+]", "-", payload["createdAt"]) + ".json"

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        path = self.backup_dir / safe_name
        if path.exists():
            raise WriteFailure(f"Backup {safe_name} already exists.")

        try:
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            raise WriteFailure(f"Failed to store backup: {e}") from e

        logger.info(f"💾 Backup created: {safe_name}")
        return {"ok": True, "backupName": safe_name}

    def list_backups(self, limit: int = 100) -> list:
        if not self.backup_dir.is_dir():
            return []

        backups = []
        for path in self.backup_dir.glob("*.json"):
            stat = path.stat()
            backups.append({
                "name": path.name,
                "createdAt": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
                "size": stat.st_size,
            })

        backups.sort(key=lambda b: (b["createdAt"], b["name"]), reverse=True)
        return backups[:limit]

    def delete_backup(self, name: str) -> dict:
        path = self.existing_backup_path(name)
        path.unlink()
        logger.info(f"🗑️ Backup deleted: {name}")
        return {"ok": True, "backupName": name}

    def load_backup(self, name: str) -> dict:
        path = self.existing_backup_path(name)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ReadFailure(f"Failed to read backup {name}: {e}") from e

        if payload.get("version") != BACKUP_VERSION or not isinstance(payload.get("data"), dict):
            raise ValidationError(f"Unsupported backup format in {name}.")
        return payload

    def restore_backup(self, name: Optional[str], mode: Optional[str], league_code: Optional[str] = None) -> dict:
        """
        Replace database contents with a backup, either entirely or for one league.

        The wipe and reload share one transaction. Standings are then rebuilt
        from the restored teams, fixtures and results.
        """
        if not name:
            raise ValidationError("backupName is required.")
        if mode not in RESTORE_MODES:
            raise ValidationError("mode must be 'ALL' or 'ONE_LEAGUE'.")
        if mode == "ONE_LEAGUE" and not league_code:
            raise ValidationError("leagueCode is required for ONE_LEAGUE.")

        payload = self.load_backup(name)
        data = {key: payload["data"].get(key) or [] for key, _ in TABLES}

        if mode == "ONE_LEAGUE":
            data = self._filter_league(data, league_code)

        # Rows loaded earlier in this session would clash with restored primary keys
        self.db.expunge_all()

        try:
            if mode == "ALL":
                for _, model in reversed(TABLES):
                    self.db.query(model).delete(synchronize_session=False)
            else:
                self._delete_league(league_code)

            for key, model in TABLES:
                if mode == "ONE_LEAGUE" and key == "leagues":
                    for row in data[key]:
                        self.db.merge(dict_to_row(model, row))
                    continue
                self.db.add_all([dict_to_row(model, row) for row in data[key]])
                self.db.flush()

            self.db.commit()
        except (SQLAlchemyError, ValueError, TypeError) as e:
            self.db.rollback()
            logger.error(f"❌ Restore of {name} failed: {e}")
            raise WriteFailure(f"Failed to restore backup {name}: {e}") from e

        self.sync_sequences()
        logger.info(f"♻️ Backup {name} restored ({mode})")

        if mode == "ALL":
            league_codes = sorted({t["league_code"] for t in data["teams"] if t.get("league_code")})
        else:
            league_codes = [league_code]

        standings = [self.standing_service.recalculate_league(code) for code in league_codes]

        response = {"ok": True, "mode": mode, "standings": standings}
        if mode == "ONE_LEAGUE":
            response["leagueCode"] = league_code
        return response

    def sync_sequences(self) -> None:
        """
        Move PostgreSQL id sequences past the restored ids.

        Restored rows keep their original primary keys, so without this the
        next insert would reuse an id. SQLite derives new ids from MAX(id)
        and needs nothing.
        """
        if self.db.get_bind().dialect.name != "postgresql":
            return

        try:
            for table in SERIAL_TABLES:
                self.db.execute(text(
                    f"SELECT setval(pg_get_serial_sequence('{table}', 'id'), "
                    f"COALESCE(MAX(id), 1), MAX(id) IS NOT NULL) FROM {table}"
                ))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to resync id sequences: {e}")
            raise WriteFailure(f"Backup restored but id sequences could not be updated: {e}") from e

    def _filter_league(self, data: dict, league_code: str) -> dict:
        fixtures = [f for f in data["fixtures"] if f.get("league_code") == league_code]
        fixture_ids = {f.get("id") for f in fixtures}
        return {
            "leagues": [l for l in data["leagues"] if l.get("league_code") == league_code],
            "teams": [t for t in data["teams"] if t.get("league_code") == league_code],
            "fixtures": fixtures,
            "results": [r for r in data["results"] if r.get("fixture_id") in fixture_ids],
            "standings": [s for s in data["standings"] if s.get("league_code") == league_code],
        }

    def _delete_league(self, league_code: str) -> None:
        fixture_ids = [
            fid for (fid,) in self.db.query(Fixture.id).filter(Fixture.league_code == league_code).all()
        ]
        if fixture_ids:
            self.db.query(Result).filter(Result.fixture_id.in_(fixture_ids)).delete(synchronize_session=False)
        self.db.query(Standing).filter(Standing.league_code == league_code).delete(synchronize_session=False)
        self.db.query(Fixture).filter(Fixture.league_code == league_code).delete(synchronize_session=False)
        self.db.query(Team).filter(Team.league_code == league_code).delete(synchronize_session=False)
