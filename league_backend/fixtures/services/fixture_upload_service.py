import logging
from datetime import datetime
from io import StringIO
import pandas as pd
from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool
from rapidfuzz import fuzz, process
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from league_backend.core.config import settings
from league_backend.core.exceptions import ValidationError, WriteFailure
from league_backend.core.utils import safe_int, safe_str
from league_backend.fixtures.models.fixture_model import Fixture
from league_backend.leagues.services.league_service import LeagueService
from league_backend.results.services.result_service import ResultService
from league_backend.standings.services.standing_service import StandingService
from league_backend.teams.models.team_model import Team

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"league_code", "round", "home_team", "away_team"}


class FixtureUploadService:
    def __init__(self, db: Session):
        self.db = db
        self.league_service = LeagueService(db)
        self.result_service = ResultService(db)
        self.standing_service = StandingService(db)
        self._team_cache = {}

    def resolve_team(self, league_code: str, team_name: str):
        """Match a CSV team name to a team of the league: exact first, then fuzzy."""
        if league_code not in self._team_cache:
            self._team_cache[league_code] = self.db.query(Team).filter(Team.league_code == league_code).all()
        teams = self._team_cache[league_code]

        for team in teams:
            if team.name.lower() == team_name.lower():
                return team

        names = {team.id: team.name.lower() for team in teams}
        match = process.extractOne(
            team_name.lower(),
            names,
            scorer=fuzz.ratio,
            score_cutoff=settings.TEAM_MATCH_THRESHOLD,
        )
        if match:
            _, _, team_id = match
            return next(team for team in teams if team.id == team_id)
        return None

    def parse_date(self, value):
        text = safe_str(value)
        if not text:
            return None
        for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d.%m.%Y"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        raise ValidationError(f"Invalid date: {text}")

    async def process_csv(self, file: UploadFile):
        contents = await file.read()
        return await run_in_threadpool(self.import_csv, contents)

    def import_csv(self, contents: bytes):
        """Reads the CSV, stores fixtures and results, then rebuilds touched tables."""
        try:
            df = pd.read_csv(StringIO(contents.decode("utf-8")))
        except (UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise ValidationError(f"Failed to read CSV: {e}")

        df.columns = [col.strip().lower().replace(' ', '_') for col in df.columns]
        missing = REQUIRED_COLUMNS - set(df.columns)
        if missing:
            raise ValidationError(f"Missing columns: {', '.join(sorted(missing))}")

        # Normalize: blank strings → NaN → None
        df = df.replace(r'^\s*$', float("nan"), regex=True)
        df = df.astype(object).where(pd.notnull(df), None)

        created, updated, skipped = 0, 0, []
        touched_leagues = set()

        try:
            for index, row in df.iterrows():
                line = index + 2  # header is line 1
                league_code = safe_str(row.get("league_code"))
                round_no = safe_int(row.get("round"))
                home_name = safe_str(row.get("home_team"))
                away_name = safe_str(row.get("away_team"))

                if not league_code or round_no is None or not home_name or not away_name:
                    skipped.append({"line": line, "reason": "league_code, round, home_team and away_team are required"})
                    continue

                home = self.resolve_team(league_code, home_name)
                away = self.resolve_team(league_code, away_name)
                if home is None or away is None:
                    unknown = home_name if home is None else away_name
                    skipped.append({"line": line, "reason": f"Unknown team '{unknown}' in league {league_code}"})
                    continue

                try:
                    match_date = self.parse_date(row.get("date"))
                except ValidationError as e:
                    skipped.append({"line": line, "reason": e.message})
                    continue

                self.league_service.get_or_create_league(league_code)

                # Prevent duplicate insertion
                fixture = (
                    self.db.query(Fixture)
                    .filter(
                        Fixture.league_code == league_code,
                        Fixture.round == round_no,
                        Fixture.home_team_id == home.id,
                        Fixture.away_team_id == away.id,
                    )
                    .first()
                )
                if fixture:
                    updated += 1
                else:
                    fixture = Fixture(
                        league_code=league_code,
                        round=round_no,
                        home_team_id=home.id,
                        away_team_id=away.id,
                    )
                    self.db.add(fixture)
                    created += 1

                fixture.group_code = safe_str(row.get("group_code"))
                fixture.phase = safe_str(row.get("phase"))
                fixture.match_date = match_date
                fixture.match_time = safe_str(row.get("time"))
                self.db.flush()

                home_goals = safe_int(row.get("home_goals"))
                away_goals = safe_int(row.get("away_goals"))
                if home_goals is not None and away_goals is not None:
                    self.result_service.stage_upsert(fixture.id, home_goals, away_goals)

                touched_leagues.add(league_code)

            self.db.commit()
        except ValidationError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Fixture CSV import failed: {e}")
            raise WriteFailure(f"Failed to import fixtures: {e}") from e

        logger.info(f"📥 Fixture CSV imported: {created} created, {updated} updated, {len(skipped)} skipped")

        standings = [self.standing_service.recalculate_league(code) for code in sorted(touched_leagues)]

        return {
            "message": "Fixtures CSV uploaded and processed successfully",
            "created": created,
            "updated": updated,
            "skipped": skipped,
            "standings": standings,
        }
