from datetime import date

import pytest

from league_backend.reports.models.report_model import Report
from league_backend.reports.services.report_service import ReportService, format_score
from league_backend.standings.services.standing_service import StandingService
from tests.conftest import add_fixture, add_league


@pytest.fixture
def played_league(db, league_l):
    StandingService(db).recalculate_league("L")
    return league_l


def test_format_score():
    assert format_score({"home_goals": 2, "away_goals": 1}) == "2:1"
    assert format_score(None) == "-:-"


def test_latest_played_round(db, league_l):
    teams, _ = league_l
    service = ReportService(db)

    assert service.latest_played_round("L") == 1
    assert service.latest_played_round("EMPTY") == 1

    add_fixture(db, "L", teams["C"], teams["A"], round_no=3, score=(1, 1))
    assert service.latest_played_round("L") == 3


def test_round_report_defaults_to_latest_played_round(client, played_league):
    response = client.get("/reports/round", params={"leagueCode": "L"})

    assert response.status_code == 200
    report = response.json()
    assert (report["season"], report["round"], report["next_round"]) == ("2025/26", 1, 2)

    [section] = report["leagues"]
    assert section["league_name"] == "League L"
    assert [(r["home"], r["away"], r["score"]) for r in section["results"]] == [("A", "B", "2:1"), ("B", "C", "0:0")]
    assert [row["team_name"] for row in section["standings"]] == ["A", "C", "B"]
    assert [(f["home"], f["away"]) for f in section["next_round_fixtures"]] == [("A", "P")]


def test_round_report_orders_results_by_date_and_shows_unplayed(client, db):
    teams = add_league(db, "M", ["X", "Y", "Z"])
    add_fixture(db, "M", teams["Y"], teams["Z"], round_no=4, match_date=date(2026, 3, 8), match_time="09:00")
    add_fixture(db, "M", teams["X"], teams["Y"], round_no=4, score=(0, 3), match_date=date(2026, 3, 7), match_time="11:00")

    report = client.get("/reports/round", params={"round": "4"}).json()

    [section] = report["leagues"]
    assert [r["score"] for r in section["results"]] == ["0:3", "-:-"]
    assert section["results"][0]["match_date"] == "2026-03-07"
    assert section["next_round_fixtures"] == []


def test_round_report_covers_every_league(client, db, played_league):
    add_league(db, "M", ["X"])

    report = client.get("/reports/round").json()

    assert [s["league_code"] for s in report["leagues"]] == ["L", "M"]


@pytest.mark.parametrize("params, status", [
    ({"round": "0"}, 400),
    ({"round": "abc"}, 400),
    ({"leagueCode": "NOPE"}, 404),
])
def test_round_report_rejects_bad_input(client, params, status):
    response = client.get("/reports/round", params=params)

    assert response.status_code == status
    assert "error" in response.json()


def test_generate_list_get_delete(client, db, played_league):
    generated = client.post("/reports/generate", json={"leagueCode": "L"})

    assert generated.status_code == 200
    summary = generated.json()
    assert (summary["season"], summary["round"], summary["league_code"]) == ("2025/26", 1, "L")
    assert summary["created_at"]

    listed = client.get("/reports").json()["reports"]
    assert [r["id"] for r in listed] == [summary["id"]]

    stored = client.get(f"/reports/{summary['id']}").json()
    assert stored["content"]["leagues"][0]["results"][0]["score"] == "2:1"

    deleted = client.delete("/reports", params={"id": summary["id"]})
    assert deleted.json() == {"success": True}
    db.expire_all()
    assert db.query(Report).count() == 0


def test_archived_report_is_a_snapshot(client, db, played_league):
    _, fixtures = played_league
    report_id = client.post("/reports/generate", json={"round": 1}).json()["id"]

    client.put(f"/admin/fixtures/{fixtures['AB'].id}", json={"result": {"home_goals": 0, "away_goals": 5}})

    stored = client.get(f"/reports/{report_id}").json()
    assert stored["content"]["leagues"][0]["results"][0]["score"] == "2:1"


def test_reports_are_listed_by_season_and_round(client, db):
    db.add_all([
        Report(season="2024/25", round=9, content={}),
        Report(season="2025/26", round=1, content={}),
        Report(season="2025/26", round=2, content={}),
    ])
    db.commit()

    listed = client.get("/reports").json()["reports"]

    assert [(r["season"], r["round"]) for r in listed] == [("2025/26", 2), ("2025/26", 1), ("2024/25", 9)]


@pytest.mark.parametrize("params", [{}, {"id": "x"}, {"id": "-1"}])
def test_delete_report_requires_valid_id(client, params):
    response = client.delete("/reports", params=params)

    assert response.status_code == 400


def test_unknown_report_returns_404(client):
    assert client.get("/reports/99").status_code == 404
    assert client.delete("/reports", params={"id": 99}).status_code == 404
    assert client.get("/reports/abc").status_code == 400
