"""Sanction rules shared by the league and cup engines.

Each rule is a pure function returning the Charge objects it produces.
The engines book those charges on the round being processed.
"""

from collections import Counter
from typing import Iterable, Optional

from .constants import (
    COST_H2H_CAPTAIN,
    COST_H2H_PLAYER,
    COST_RIVAL_CAPTAIN,
    COST_SAME_CLUB_CAPTAIN,
    COST_WORST_CAPTAIN,
    COST_WORST_PLAYER,
    TYPE_H2H_CAPTAIN,
    TYPE_H2H_PLAYER,
    TYPE_RIVAL_CAPTAIN,
    TYPE_SAME_CLUB,
    TYPE_WORST_CAPTAIN,
    TYPE_WORST_PLAYER,
    TYPE_WORST_TEAM,
    WORST_TEAM_TIERS,
)
from .models import Charge, Player, RoundScore
from .names import normalize_name


def captain_of(lineup: list[Player]) -> Optional[Player]:
    """Return the first player flagged as captain, if any."""
    return next((p for p in lineup if p.is_captain), None)


def lineup_score(lineup: list[Player]) -> float:
    return sum(p.points for p in lineup)


def format_points(points: float) -> str:
    """Render points without a trailing .0 (10.0 -> '10')."""
    return f'{points:g}'


def same_club_charge(team_id: str, lineup: list[Player]) -> Optional[Charge]:
    """
    Charge a team whose captain shares a club with another fielded player.

    Args:
        team_id: Team fielding the lineup
        lineup: Canonical lineup

    Returns:
        Charge of COST_SAME_CLUB_CAPTAIN, or None
    """
    captain = captain_of(lineup)
    if captain is None or not captain.club:
        return None

    clubs = Counter(p.club for p in lineup if p.club)
    if clubs[captain.club] >= 2:
        return Charge(team_id, TYPE_SAME_CLUB, f'Club: {captain.club}', COST_SAME_CLUB_CAPTAIN)
    return None


def _side_h2h_charges(
    team_id: str, lineup: list[Player], rival_lineup: list[Player]
) -> list[Charge]:
    charges = []
    rival_names = {normalize_name(p.name) for p in rival_lineup}

    for player in lineup:
        if normalize_name(player.name) in rival_names:
            charges.append(Charge(team_id, TYPE_H2H_PLAYER, player.name, COST_H2H_PLAYER))

    captain = captain_of(lineup)
    rival_captain = captain_of(rival_lineup)
    if captain is None or rival_captain is None:
        return charges

    rival_captain_name = normalize_name(rival_captain.name)
    if normalize_name(captain.name) == rival_captain_name:
        charges.append(Charge(team_id, TYPE_H2H_CAPTAIN, captain.name, COST_H2H_CAPTAIN))
    else:
        regulars = {normalize_name(p.name) for p in lineup if not p.is_captain}
        if rival_captain_name in regulars:
            charges.append(
                Charge(team_id, TYPE_RIVAL_CAPTAIN, rival_captain.name, COST_RIVAL_CAPTAIN)
            )

    return charges


def head_to_head_charges(
    team_a: str, lineup_a: list[Player], team_b: str, lineup_b: list[Player]
) -> list[Charge]:
    """
    Compare two opposing lineups.

    Rules (only evaluated when both lineups are known):
    - Every player fielded by both sides costs each side COST_H2H_PLAYER
    - Both sides captaining the same player costs each side COST_H2H_CAPTAIN
    - Fielding the rival's captain as a regular player costs COST_RIVAL_CAPTAIN
      to the side that fielded him, not to the side that captained him

    Players are identified by normalized name.

    Returns:
        List of charges for both sides (side A first)
    """
    if not lineup_a or not lineup_b:
        return []
    return _side_h2h_charges(team_a, lineup_a, lineup_b) + _side_h2h_charges(
        team_b, lineup_b, lineup_a
    )


def worst_team_charges(scores: Iterable[RoundScore]) -> list[Charge]:
    """
    Charge the three worst teams of a round.

    The lowest distinct total pays WORST_TEAM_TIERS[0], the next one
    WORST_TEAM_TIERS[1] and so on. Every tied team pays the full amount,
    but a total only counts while its position in the ascending table
    (1 + teams strictly below it) is within the number of tiers.

    Example:
        scores 10, 10, 15, 20 -> both 10s pay 2, the 15 pays 1.5, the 20 pays 0
    """
    scores = list(scores)
    distinct = sorted({s.score for s in scores})
    charges = []

    for tier, (value, cost) in enumerate(zip(distinct, WORST_TEAM_TIERS), 1):
        position = 1 + sum(1 for s in scores if s.score < value)
        if position > len(WORST_TEAM_TIERS):
            break
        for entry in scores:
            if entry.score == value:
                charges.append(
                    Charge(
                        entry.team_id,
                        TYPE_WORST_TEAM.format(tier=tier),
                        f'{format_points(value)} pts',
                        cost,
                    )
                )

    return charges


def worst_captain_charges(captains: Iterable[tuple[str, Player]]) -> list[Charge]:
    """Charge every team whose captain tied for the lowest score of the round."""
    captains = list(captains)
    if not captains:
        return []

    lowest = min(p.points for _, p in captains)
    return [
        Charge(
            team_id,
            TYPE_WORST_CAPTAIN,
            f'{p.name} ({format_points(p.points)} pts)',
            COST_WORST_CAPTAIN,
        )
        for team_id, p in captains
        if p.points == lowest
    ]


def worst_player_charges(players: Iterable[tuple[str, Player]]) -> list[Charge]:
    """
    Charge every team fielding a player tied for the lowest score of the round.

    A team with several lowest scorers is only charged once.
    """
    players = list(players)
    if not players:
        return []

    lowest = min(p.points for _, p in players)
    charged: set[str] = set()
    charges = []

    for team_id, p in players:
        if p.points != lowest or team_id in charged:
            continue
        charged.add(team_id)
        charges.append(
            Charge(
                team_id,
                TYPE_WORST_PLAYER,
                f'{p.name} ({format_points(p.points)} pts)',
                COST_WORST_PLAYER,
            )
        )

    return charges
