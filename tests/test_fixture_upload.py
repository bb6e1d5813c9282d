import asyncio

from league_backend.fixtures.models.fixture_model import Fixture
from league_backend.results.models.result_model import Result
from league_backend.standings.models.standings_model import Standing
from league_backend.standings.services.standing_service import StandingService
from tests.conftest import add_league

CSV = """League Code,Round,Home Team,Away Team,Group Code,Phase,Date,Time,Home Goals,Away Goals
U11,1,NK Dinamo,HNK Hajduk,A,groups,2026-03-07,10:00,2,0
U11,1,HNK Rijeka,NK Dinamo,A,groups,07/03/2026,12:00,,
U11,2,HNK Hajdukk,HNK Rijeka,A,groups,,,1,1
U11,2,NK Osijek,NK Dinamo,A,groups,,,0,1
"""


def upload(client, content, filename="fixtures.csv"):
    return client.post(
        "/admin/fixtures/upload-fixtures-csv/",
        files={"file": (filename, content.encode("utf-8"), "text/csv")},
    )


def test_csv_import_creates_fixtures_and_recalculates(client, db):
    teams = add_league(db, "U11", ["NK Dinamo", "HNK Hajduk", "HNK Rijeka"])

    response = upload(client, CSV)

    assert response.status_code == 200
    body = response.json()
    assert body["created"] == 3
    assert body["updated"] == 0
    # NK Osijek is not a team of the league
    assert [s["line"] for s in body["skipped"]] == [5]
    assert body["standings"] == [{"ok": True, "league_code": "U11", "teamsUpdated": 3}]

    db.expire_all()
    assert db.query(Fixture).count() == 3
    assert db.query(Result).count() == 2

    fuzzy = db.query(Fixture).filter(Fixture.round == 2).one()
    assert fuzzy.home_team_id == teams["HNK Hajduk"].id

    dinamo = db.query(Standing).filter(Standing.team_id == teams["NK Dinamo"].id).one()
    assert (dinamo.points, dinamo.group_code, dinamo.phase) == (3, "A", "groups")


def test_csv_import_updates_existing_fixtures(client, db):
    add_league(db, "U11", ["NK Dinamo", "HNK Hajduk", "HNK Rijeka"])
    upload(client, CSV)

    changed = CSV.replace("U11,1,NK Dinamo,HNK Hajduk,A,groups,2026-03-07,10:00,2,0",
                          "U11,1,NK Dinamo,HNK Hajduk,A,groups,2026-03-07,10:00,0,1")
    body = upload(client, changed).json()

    assert body["created"] == 0
    assert body["updated"] == 3
    db.expire_all()
    assert db.query(Fixture).count() == 3
    assert db.query(Result).count() == 2


def test_csv_missing_columns_is_rejected(client):
    response = upload(client, "Round,Home Team\n1,NK Dinamo\n")

    assert response.status_code == 400
    assert "league_code" in response.json()["error"]


def test_csv_import_recalculates_off_the_event_loop(client, db, monkeypatch):
    add_league(db, "U11", ["NK Dinamo", "HNK Hajduk", "HNK Rijeka"])
    original = StandingService.recalculate_league
    loop_running = []

    def spy(self, league_code):
        try:
            asyncio.get_running_loop()
            loop_running.append(True)
        except RuntimeError:
            loop_running.append(False)
        return original(self, league_code)

    monkeypatch.setattr(StandingService, "recalculate_league", spy)

    response = upload(client, CSV)

    assert response.status_code == 200
    assert loop_running == [False]
