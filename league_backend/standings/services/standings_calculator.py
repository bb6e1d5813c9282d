from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Mapping, Optional

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1


@dataclass
class TeamAggregate:
    team_id: int
    league_code: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    group_code: Optional[str] = None
    phase: Optional[str] = None

    def as_row(self) -> dict:
        return asdict(self)


def is_real_team(team) -> bool:
    # is_placeholder may be NULL in the database; only an explicit True excludes a team
    return team.is_placeholder is not True


def _backfill_tags(agg: TeamAggregate, fixture) -> None:
    # First fixture wins: a tag already set is never overwritten.
    if agg.group_code is None:
        agg.group_code = fixture.group_code
    if agg.phase is None:
        agg.phase = fixture.phase


def _apply_result(home: TeamAggregate, away: TeamAggregate, home_goals: int, away_goals: int) -> None:
    home.played += 1
    away.played += 1

    home.goals_for += home_goals
    home.goals_against += away_goals
    away.goals_for += away_goals
    away.goals_against += home_goals

    if home_goals > away_goals:
        home.wins += 1
        home.points += POINTS_FOR_WIN
        away.losses += 1
    elif home_goals < away_goals:
        away.wins += 1
        away.points += POINTS_FOR_WIN
        home.losses += 1
    else:
        home.draws += 1
        away.draws += 1
        home.points += POINTS_FOR_DRAW
        away.points += POINTS_FOR_DRAW


def compute_standings(league_code: str, teams: Iterable, fixtures: Iterable, results: Mapping[int, object]) -> List[TeamAggregate]:
    """
    Fold a league's fixtures and results into one aggregate per real team.

    The output depends only on the arguments, never on previously stored
    standings, so it can replace the stored table wholesale.

    :param league_code: League the aggregates belong to
    :param teams: Team rows of the league (placeholders are filtered out here)
    :param fixtures: Fixture rows of the league
    :param results: Result rows keyed by fixture id
    :return: Aggregates in team insertion order (not display order)
    """
    aggs: Dict[int, TeamAggregate] = {}
    for team in teams:
        if is_real_team(team):
            aggs[team.id] = TeamAggregate(team_id=team.id, league_code=league_code)

    for fixture in fixtures:
        result = results.get(fixture.id)
        if result is None:
            continue

        home = aggs.get(fixture.home_team_id)
        away = aggs.get(fixture.away_team_id)
        # placeholder or a team from another league
        if home is None or away is None:
            continue

        _apply_result(home, away, result.home_goals or 0, result.away_goals or 0)
        _backfill_tags(home, fixture)
        _backfill_tags(away, fixture)

    for agg in aggs.values():
        agg.goal_difference = agg.goals_for - agg.goals_against

    return list(aggs.values())


def standing_sort_key(row, team_name: str):
    """Points desc, goal difference desc, goals for desc, then name asc.
    Team id settles identical names so the order never depends on input order."""
    return (-row.points, -row.goal_difference, -row.goals_for, team_name or "", row.team_id)


def sort_standings(rows: Iterable, team_names: Mapping[int, str]) -> list:
    """Return rows in display order. Works on TeamAggregate or Standing rows."""
    return sorted(rows, key=lambda row: standing_sort_key(row, team_names.get(row.team_id, "")))
