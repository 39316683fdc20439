"""Sanctions for the Copa knockout bracket.

The cup keeps its own ledger and captain history; it never reads or
writes the league suspension state. Pairing rules (same club, head to
head) are evaluated per leg, round rules (worst team, captain, player)
across every pairing of a cup round.
"""

import logging
from typing import Optional

from .constants import COST_MISSED_FIRST_ROUND, TYPE_MISSED_FIRST_ROUND
from .models import (
    CaptainHistoryEntry,
    Charge,
    CupReport,
    CupRound,
    CupTeamStats,
    LineupSnapshot,
    Player,
    RoundScore,
    Team,
    TeamLedger,
)
from .names import normalize_name
from .rules import (
    captain_of,
    head_to_head_charges,
    lineup_score,
    same_club_charge,
    worst_captain_charges,
    worst_player_charges,
    worst_team_charges,
)
from .schemas import SanctionRules

logger = logging.getLogger('fuentmondo.copa')


class _CupScan:
    """Accumulator for one scan_cup_and_calculate call."""

    def __init__(self, rules: SanctionRules):
        self.rules = rules
        self.ledger: dict[str, TeamLedger] = {}
        self.team_stats: dict[str, CupTeamStats] = {}
        self.captain_counts: dict[tuple[str, str], int] = {}
        self.round_scores: dict[int, list[RoundScore]] = {}

    def register(self, team: Team) -> None:
        if team.id in self.ledger:
            return
        self.ledger[team.id] = TeamLedger(id=team.id, name=team.name)
        self.team_stats[team.id] = CupTeamStats(id=team.id, name=team.name)

    def book(self, round_number: int, charge: Charge) -> None:
        ledger = self.ledger.get(charge.team_id)
        if ledger is not None:
            ledger.charge(round_number, charge.type, charge.detail, charge.cost)

    def record_captain(self, team_id: str, captain: Player, label: str) -> None:
        key = (team_id, normalize_name(captain.name))
        count = self.captain_counts.get(key, 0) + 1
        self.captain_counts[key] = count

        threshold = self.rules.captaincy_threshold
        self.ledger[team_id].captain_history.append(
            CaptainHistoryEntry(
                round=label,
                player=captain.name,
                count=count,
                warning=count == threshold - 1,
                alert=count >= threshold,
            )
        )

    def record_lineup(self, team_id: str, lineup: list[Player], round_number: int, score: float) -> None:
        stats = self.team_stats[team_id]
        if stats.last_match is None or round_number >= stats.last_match.round:
            stats.last_match = LineupSnapshot(round=round_number, score=score, lineup=list(lineup))


def _participants(cup_rounds: list[CupRound]) -> list[Team]:
    """Every team that appears on either side of any pairing, in order of appearance."""
    seen: dict[str, Team] = {}
    for cup_round in cup_rounds:
        for match in cup_round.matches:
            for team in (match.home, match.away):
                if team is not None and team.id not in seen:
                    seen[team.id] = team
    return list(seen.values())


def _first_round_players(cup_rounds: list[CupRound]) -> set[str]:
    played = set()
    for cup_round in cup_rounds:
        if cup_round.number != 1:
            continue
        for match in cup_round.matches:
            if match.home is not None and match.away is not None:
                played.update((match.home.id, match.away.id))
    return played


def _scan_round(scan: _CupScan, cup_round: CupRound) -> None:
    round_number = cup_round.number
    scores = scan.round_scores.setdefault(round_number, [])
    captains: list[tuple[str, Player]] = []
    players: list[tuple[str, Player]] = []

    for match in cup_round.matches:
        if match.home is None or match.away is None:
            logger.debug(f'Cup round {round_number}: skipping bye/placeholder pairing')
            continue

        for leg_number, leg in enumerate(match.legs, 1):
            label = f'{round_number}.{leg_number}'
            sides = [(match.home, leg.home_lineup), (match.away, leg.away_lineup)]

            for team, lineup in sides:
                if not lineup:
                    continue
                score = lineup_score(lineup)
                scores.append(RoundScore(team.id, team.name, score))
                players.extend((team.id, p) for p in lineup)
                scan.record_lineup(team.id, lineup, round_number, score)

                captain = captain_of(lineup)
                if captain is not None:
                    captains.append((team.id, captain))
                    scan.record_captain(team.id, captain, label)

                club_charge = same_club_charge(team.id, lineup)
                if club_charge is not None:
                    scan.book(round_number, club_charge)

            for charge in head_to_head_charges(
                match.home.id, leg.home_lineup, match.away.id, leg.away_lineup
            ):
                scan.book(round_number, charge)

    for charge in worst_team_charges(scores):
        scan.book(round_number, charge)
    for charge in worst_captain_charges(captains):
        scan.book(round_number, charge)
    for charge in worst_player_charges(players):
        scan.book(round_number, charge)


def scan_cup_and_calculate(
    cup_rounds: list[CupRound],
    rules: Optional[SanctionRules] = None,
) -> CupReport:
    """
    Scan every round and leg of the cup and calculate its sanctions.

    Args:
        cup_rounds: Bracket rounds (any order, processed by number)
        rules: Captaincy threshold for history flags (defaults to SanctionRules())

    Returns:
        CupReport with ledger, captain history and last-lineup stats keyed
        by team id, and the fielded scores of each cup round

    Raises:
        TypeError: If cup_rounds is not a list
    """
    if not isinstance(cup_rounds, list):
        raise TypeError(f'cup_rounds must be a list, got {type(cup_rounds).__name__}')

    scan = _CupScan(rules or SanctionRules())
    ordered = sorted(cup_rounds, key=lambda r: r.number)

    participants = _participants(ordered)
    for team in participants:
        scan.register(team)

    for cup_round in ordered:
        _scan_round(scan, cup_round)

    played_first_round = _first_round_players(ordered)
    for team in participants:
        if team.id not in played_first_round:
            scan.book(
                1,
                Charge(
                    team.id,
                    TYPE_MISSED_FIRST_ROUND,
                    'Recibe sanción por empezar más tarde',
                    COST_MISSED_FIRST_ROUND,
                ),
            )

    logger.info(f'Cup scanned: {len(participants)} teams, {len(ordered)} rounds')

    return CupReport(
        ledger=scan.ledger,
        captain_history={tid: ledger.captain_history for tid, ledger in scan.ledger.items()},
        team_stats=scan.team_stats,
        round_scores={r: scores for r, scores in scan.round_scores.items() if scores},
    )
