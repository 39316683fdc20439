"""Translate raw Futmondo API payloads into engine models.

This is the only module that knows the several shapes a lineup payload
can take or the several ways a captain can be flagged. Everything past
this boundary works with Player, Match, Round and CupRound.
"""

import logging
from typing import Any, Optional

from .models import CupLeg, CupMatch, CupRound, Match, Player, Round, Team

logger = logging.getLogger('fuentmondo.adapters')


def _first(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None or value == '' else str(value)


def extract_lineup(payload: Any) -> list[dict[str, Any]]:
    """
    Find the list of raw players inside a lineup payload.

    Accepted shapes:
        [...]
        {'lineup': [...]}
        {'players': {'initial': [...]}}
        {'players': [...]}

    Returns:
        List of raw player dicts ([] for anything else)
    """
    if not payload:
        return []
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    if isinstance(payload.get('lineup'), list):
        return payload['lineup']
    players = payload.get('players')
    if isinstance(players, dict) and isinstance(players.get('initial'), list):
        return players['initial']
    if isinstance(players, list):
        return players
    return []


def is_captain(raw: dict[str, Any]) -> bool:
    """Collapse the API's captain flags (captain, cpt, role) into one boolean."""
    if not raw:
        return False
    return raw.get('captain') is True or bool(raw.get('cpt')) or raw.get('role') == 'captain'


def _points(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        logger.debug(f'Unreadable points {value!r}, counting 0')
        return 0.0


def player_from_api(raw: dict[str, Any]) -> Player:
    """Build a Player from a raw lineup entry (unreadable points count as 0)."""
    return Player(
        name=str(_first(raw, 'name', 'playerName') or ''),
        points=_points(raw.get('points')),
        is_captain=is_captain(raw),
        club=_optional_str(_first(raw, 'club', 'clubId', 'teamId', 'team')),
        player_id=_optional_str(_first(raw, 'id', '_id', 'player_id', 'playerId')),
    )


def lineup_from_api(payload: Any) -> list[Player]:
    """Build a canonical lineup from any accepted lineup payload."""
    return [player_from_api(raw) for raw in extract_lineup(payload) if isinstance(raw, dict)]


def team_from_api(raw: Optional[dict[str, Any]]) -> Optional[Team]:
    """Build a Team from a ranking/bracket entry (None when it has no id)."""
    if not raw:
        return None
    team_id = _first(raw, 'id', '_id')
    if team_id is None:
        return None
    return Team(id=str(team_id), name=str(raw.get('name') or 'Unknown'))


def match_from_api(raw: dict[str, Any]) -> Optional[Match]:
    """
    Build a Match from a raw round match.

    Raw keys: 'p' (participant positions), 'm' (scores),
    'lineupA'/'lineupB' (lineup payloads).
    """
    participants = raw.get('p')
    if not isinstance(participants, (list, tuple)) or len(participants) != 2:
        logger.debug(f'Skipping match without participants: {raw!r}')
        return None

    try:
        positions = (int(participants[0]), int(participants[1]))
    except (TypeError, ValueError):
        logger.debug(f'Skipping match with unreadable participants: {participants!r}')
        return None

    scores = raw.get('m')
    score = None
    if isinstance(scores, (list, tuple)) and len(scores) == 2:
        score = (_points(scores[0]), _points(scores[1]))

    return Match(
        participants=positions,
        score=score,
        lineup_a=lineup_from_api(raw.get('lineupA')),
        lineup_b=lineup_from_api(raw.get('lineupB')),
    )


def round_from_api(raw: dict[str, Any]) -> Round:
    """Build a Round from a raw round payload (number, ranking, matches)."""
    # Entries without an id stay as None so 1-based positions still line up
    ranking = [team_from_api(entry) for entry in raw.get('ranking') or []]

    matches = [m for m in (match_from_api(r) for r in raw.get('matches') or []) if m is not None]
    return Round(number=int(raw.get('number') or 0), matches=matches, ranking=ranking)


def rounds_from_api(raw_rounds: list[dict[str, Any]]) -> list[Round]:
    return [round_from_api(r) for r in raw_rounds]


def _cup_leg_from_api(raw: Any) -> CupLeg:
    if not isinstance(raw, dict):
        return CupLeg()
    return CupLeg(
        home_lineup=lineup_from_api(raw.get('home')),
        away_lineup=lineup_from_api(raw.get('away')),
    )


def cup_from_api(raw: dict[str, Any]) -> list[CupRound]:
    """
    Build cup rounds from a raw cup payload.

    Raw shape:
        {'rounds': [{'number': 1, 'matches': [
            {'home': {'team': {...}}, 'away': {'team': {...}},
             'legs': [{'home': <lineup payload>, 'away': <lineup payload>}, ...]}
        ]}]}
    """
    cup_rounds = []
    for raw_round in raw.get('rounds') or []:
        matches = []
        for raw_match in raw_round.get('matches') or []:
            home = team_from_api((raw_match.get('home') or {}).get('team'))
            away = team_from_api((raw_match.get('away') or {}).get('team'))
            legs = [_cup_leg_from_api(leg) for leg in raw_match.get('legs') or []]
            matches.append(CupMatch(home=home, away=away, legs=legs))
        cup_rounds.append(CupRound(number=int(raw_round.get('number') or 0), matches=matches))
    return cup_rounds


def teams_from_api(raw_teams: list[dict[str, Any]]) -> list[Team]:
    """Build the championship team list, dropping entries without an id."""
    return [t for t in (team_from_api(r) for r in raw_teams) if t is not None]
