"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database; HTTP tests go through
FastAPI's TestClient with ``get_db`` overridden to use that database.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from league_backend.core.database import get_db, init_db
from league_backend.fixtures.models.fixture_model import Fixture
from league_backend.leagues.models.league_model import League
from league_backend.results.models.result_model import Result
from league_backend.teams.models.team_model import Team


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    from league_backend.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def backup_dir(tmp_path, monkeypatch):
    from league_backend.core.config import settings

    path = tmp_path / "backups"
    monkeypatch.setattr(settings, "BACKUP_DIR", str(path))
    return path


def add_league(db, code, team_names, placeholders=()):
    """Create a league with real teams and placeholder teams; returns {name: Team}."""
    db.add(League(league_code=code, league_name=f"League {code}"))
    teams = {}
    for name in team_names:
        teams[name] = Team(name=name, league_code=code, is_placeholder=False)
    for name in placeholders:
        teams[name] = Team(name=name, league_code=code, is_placeholder=True)
    db.add_all(teams.values())
    db.commit()
    return teams


def add_fixture(db, code, home, away, round_no=1, score=None, group_code=None, phase=None, match_date=None, match_time=None):
    fixture = Fixture(
        league_code=code,
        round=round_no,
        home_team_id=home.id,
        away_team_id=away.id,
        group_code=group_code,
        phase=phase,
        match_date=match_date,
        match_time=match_time,
    )
    db.add(fixture)
    db.flush()
    if score is not None:
        db.add(Result(fixture_id=fixture.id, home_goals=score[0], away_goals=score[1]))
    db.commit()
    return fixture


@pytest.fixture
def league_l(db):
    """League L from the reference scenario: A, B, C real, P placeholder."""
    teams = add_league(db, "L", ["A", "B", "C"], placeholders=["P"])
    fixtures = {
        "AB": add_fixture(db, "L", teams["A"], teams["B"], round_no=1, score=(2, 1)),
        "AP": add_fixture(db, "L", teams["A"], teams["P"], round_no=2),
        "BC": add_fixture(db, "L", teams["B"], teams["C"], round_no=1, score=(0, 0)),
    }
    return teams, fixtures
