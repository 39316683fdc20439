"""Head-to-head standings calculation."""

import logging
from typing import Any, Mapping, Optional

from .constants import POINTS_DRAW, POINTS_WIN
from .models import LineupSnapshot, Match, Player, Round, Team, TeamStanding
from .names import resolve_team_name
from .rules import lineup_score

logger = logging.getLogger('fuentmondo.standings')

HistoricalRankings = Mapping[str, Mapping[str, Any]]


def _historical_index(historical_rankings: Optional[HistoricalRankings]) -> dict[str, tuple[float, float]]:
    """Key season totals by resolved team name."""
    index = {}
    for name, totals in (historical_rankings or {}).items():
        index[resolve_team_name(name)] = (
            totals.get('pts_totales', 0) or 0,
            totals.get('pts_generales', 0) or 0,
        )
    return index


def _ranking_map(round_: Round) -> dict[int, Team]:
    return {idx: team for idx, team in enumerate(round_.ranking, 1) if team is not None}


def _resolve_match(match: Match, teams_by_pos: dict[int, Team]) -> Optional[tuple[Team, Team]]:
    if not match.participants or len(match.participants) != 2:
        return None
    team_a = teams_by_pos.get(match.participants[0])
    team_b = teams_by_pos.get(match.participants[1])
    if team_a is None or team_b is None:
        return None
    return team_a, team_b


def match_scores(match: Match) -> tuple[float, float]:
    """Return the supplied score, or lineup totals when none was supplied."""
    if match.score is not None:
        return match.score[0], match.score[1]
    return lineup_score(match.lineup_a), lineup_score(match.lineup_b)


def _update_team_stats(
    stats: dict[str, TeamStanding],
    team: Team,
    goals_for: float,
    goals_against: float,
    historical: dict[str, tuple[float, float]],
) -> None:
    if team.id not in stats:
        hist_points, hist_goals = historical.get(resolve_team_name(team.name), (0, 0))
        stats[team.id] = TeamStanding(
            id=team.id,
            name=team.name or 'Unknown',
            historical_points=hist_points,
            historical_goals=hist_goals,
        )

    s = stats[team.id]
    s.played += 1
    s.goals_for += goals_for
    s.goals_against += goals_against

    if goals_for > goals_against:
        s.won += 1
        s.points += POINTS_WIN
    elif goals_for < goals_against:
        s.lost += 1
    else:
        s.drawn += 1
        s.points += POINTS_DRAW


def calculate_standings(
    rounds: list[Round],
    historical_rankings: Optional[HistoricalRankings] = None,
) -> list[TeamStanding]:
    """
    Calculate head-to-head standings from a list of rounds.

    Live results are merged with pre-loaded season totals. Teams are
    sorted by total points (live + historical), then total goals
    (live + historical). Teams equal on both keep the order in which
    they were first seen.

    Args:
        rounds: Rounds with ranking and matches
        historical_rankings: Raw team name -> {'pts_totales', 'pts_generales'}

    Returns:
        Sorted list of TeamStanding objects

    Raises:
        TypeError: If rounds is not a list
    """
    if not isinstance(rounds, list):
        raise TypeError(f'rounds must be a list, got {type(rounds).__name__}')

    historical = _historical_index(historical_rankings)
    stats: dict[str, TeamStanding] = {}

    for round_ in rounds:
        if not round_.matches or not round_.ranking:
            continue
        teams_by_pos = _ranking_map(round_)

        for match in round_.matches:
            pair = _resolve_match(match, teams_by_pos)
            if pair is None:
                logger.debug(f'Round {round_.number}: skipping unresolvable match {match.participants}')
                continue

            team_a, team_b = pair
            score_a, score_b = match_scores(match)
            _update_team_stats(stats, team_a, score_a, score_b, historical)
            _update_team_stats(stats, team_b, score_b, score_a, historical)

    return sorted(stats.values(), key=lambda s: (s.total_points, s.total_goals), reverse=True)


def last_match_snapshots(rounds: list[Round]) -> dict[str, LineupSnapshot]:
    """
    Find the most recent match each team played.

    Args:
        rounds: Rounds with ranking and matches

    Returns:
        Dict mapping team id to the snapshot of its latest resolvable match
    """
    snapshots: dict[str, LineupSnapshot] = {}

    for round_ in sorted(rounds, key=lambda r: r.number):
        teams_by_pos = _ranking_map(round_)
        for match in round_.matches:
            pair = _resolve_match(match, teams_by_pos)
            if pair is None:
                continue

            team_a, team_b = pair
            score_a, score_b = match_scores(match)
            sides: list[tuple[Team, Team, float, list[Player]]] = [
                (team_a, team_b, score_a, match.lineup_a),
                (team_b, team_a, score_b, match.lineup_b),
            ]
            for team, opponent, score, lineup in sides:
                snapshots[team.id] = LineupSnapshot(
                    round=round_.number,
                    score=score,
                    lineup=list(lineup),
                    opponent_id=opponent.id,
                    opponent_name=opponent.name,
                )

    return snapshots
