"""Financial sanctions for the Fuentmondo league.

Rounds are folded in chronological order: the historical captain archive
(rounds 1-19) first, then the live rounds. Captain counts and suspension
windows live in a single SanctionState that is threaded through the fold,
so counts continue across the archive/live boundary.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .constants import (
    CAPTAIN_PLACEHOLDERS,
    COST_INFRACTION,
    COST_REGISTRATION_FEE,
    CUP_NAME,
    INFRACTION_HISTORICAL_CAPTAIN,
    INFRACTION_HISTORICAL_OUT,
    INFRACTION_NO_CAPTAIN,
    INFRACTION_OUT_OF_TEAM,
    TYPE_INFRACTION,
    TYPE_REGISTRATION_FEE,
    TYPE_REPEATED_CAPTAIN,
)
from .models import (
    CaptainHistoryEntry,
    Charge,
    Infraction,
    Player,
    Round,
    RoundScore,
    SanctionLedgerEntry,
    SanctionsReport,
    SuspensionRecord,
    Team,
    TeamLedger,
)
from .names import normalize_name, resolve_team_name
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

logger = logging.getLogger('fuentmondo.sanctions')

HistoricalCaptains = Mapping[Any, Mapping[str, Optional[str]]]


@dataclass
class SanctionState:
    """Mutable accumulator for one calculate_sanctions call."""
    rules: SanctionRules
    ledger: dict[str, TeamLedger] = field(default_factory=dict)
    captain_counts: dict[tuple[str, str], int] = field(default_factory=dict)
    suspensions: dict[tuple[str, str], SuspensionRecord] = field(default_factory=dict)
    infractions: list[Infraction] = field(default_factory=list)

    def team(self, team_id: str, name: str) -> TeamLedger:
        if team_id not in self.ledger:
            self.ledger[team_id] = TeamLedger(id=team_id, name=name)
        return self.ledger[team_id]

    def book(self, round_number: int, charge: Charge) -> None:
        ledger = self.ledger.get(charge.team_id)
        if ledger is None:
            return
        ledger.charge(round_number, charge.type, charge.detail, charge.cost)

    def register_infraction(
        self, team_id: str, player: str, round_number: int, kind: str, cost: float = COST_INFRACTION
    ) -> None:
        ledger = self.ledger[team_id]
        self.infractions.append(
            Infraction(
                team_id=team_id,
                team_name=ledger.name,
                player=player,
                round=round_number,
                kind=kind,
                cost=cost,
            )
        )
        ledger.charge(round_number, TYPE_INFRACTION.format(kind=kind), player, cost)

    def count_captaincy(
        self, team_id: str, player: str, round_number: int, is_historical: bool = False
    ) -> int:
        """
        Record one captaincy and return the running count for (team, player).

        Appends the captain history entry and opens a new suspension window
        whenever the count reaches a multiple of the captaincy threshold.
        """
        key = (team_id, normalize_name(player))
        count = self.captain_counts.get(key, 0) + 1
        self.captain_counts[key] = count

        threshold = self.rules.captaincy_threshold
        ledger = self.ledger[team_id]
        ledger.captain_history.append(
            CaptainHistoryEntry(
                round=round_number,
                player=player,
                count=count,
                warning=count % threshold == threshold - 1,
                alert=count % threshold == 0,
                is_historical=is_historical,
            )
        )

        if count % threshold == 0:
            self.suspensions[key] = SuspensionRecord(
                team_id=team_id,
                team_name=ledger.name,
                player=player,
                out_team_until=round_number + self.rules.matches_out,
                no_captain_until=round_number + self.rules.matches_no_captain,
            )
            logger.debug(
                f'{ledger.name}: {player} suspended until round {round_number + self.rules.matches_out} '
                f'(no captaincy until {round_number + self.rules.matches_no_captain})'
            )

        return count

    def active_suspension(self, team_id: str, player: str) -> Optional[SuspensionRecord]:
        return self.suspensions.get((team_id, normalize_name(player)))


def _validate_inputs(rounds: Any, teams: Any) -> None:
    if not isinstance(rounds, list):
        raise TypeError(f'rounds must be a list, got {type(rounds).__name__}')
    if not isinstance(teams, list):
        raise TypeError(f'teams must be a list, got {type(teams).__name__}')
    for team in teams:
        if not getattr(team, 'id', None) or not getattr(team, 'name', None):
            raise ValueError(f'Team is missing id or name: {team!r}')


def _process_historical(
    state: SanctionState,
    historical_captains: HistoricalCaptains,
    team_ids_by_name: dict[str, str],
) -> None:
    """Fold the archived captain choices (no lineups, captain only)."""
    for round_number in sorted(historical_captains, key=int):
        r_num = int(round_number)
        for raw_team, player in historical_captains[round_number].items():
            team_id = team_ids_by_name.get(resolve_team_name(raw_team))
            if team_id is None:
                logger.debug(f'Historical round {r_num}: unknown team {raw_team!r}')
                continue
            if not player or player.strip() in CAPTAIN_PLACEHOLDERS:
                continue

            suspension = state.active_suspension(team_id, player)
            if suspension is not None:
                if r_num <= suspension.out_team_until:
                    state.register_infraction(team_id, player, r_num, INFRACTION_HISTORICAL_OUT)
                elif r_num <= suspension.no_captain_until:
                    state.register_infraction(team_id, player, r_num, INFRACTION_HISTORICAL_CAPTAIN)

            state.count_captaincy(team_id, player, r_num, is_historical=True)


def _check_suspended_players(
    state: SanctionState, team_id: str, lineup: list[Player], round_number: int
) -> None:
    for player in lineup:
        suspension = state.active_suspension(team_id, player.name)
        if suspension is None:
            continue
        if round_number <= suspension.out_team_until:
            state.register_infraction(team_id, player.name, round_number, INFRACTION_OUT_OF_TEAM)
        elif player.is_captain and round_number <= suspension.no_captain_until:
            state.register_infraction(team_id, player.name, round_number, INFRACTION_NO_CAPTAIN)


def _process_round(state: SanctionState, round_: Round) -> None:
    round_number = round_.number
    teams_by_pos = {idx: team for idx, team in enumerate(round_.ranking, 1) if team is not None}
    for team in teams_by_pos.values():
        state.team(team.id, team.name)

    scores: list[RoundScore] = []
    captains: list[tuple[str, Player]] = []
    players: list[tuple[str, Player]] = []

    for match in round_.matches:
        if not match.participants or len(match.participants) != 2:
            logger.debug(f'Round {round_number}: malformed match {match!r}')
            continue
        team_a = teams_by_pos.get(match.participants[0])
        team_b = teams_by_pos.get(match.participants[1])
        if team_a is None or team_b is None:
            logger.debug(f'Round {round_number}: unresolvable match {match.participants}')
            continue

        sides: list[tuple[Team, list[Player]]] = [(team_a, match.lineup_a), (team_b, match.lineup_b)]
        for team, lineup in sides:
            if not lineup:
                continue
            ledger = state.ledger[team.id]
            if round_number not in ledger.round_activity:
                ledger.round_activity.append(round_number)

            scores.append(RoundScore(team.id, team.name, lineup_score(lineup)))
            players.extend((team.id, p) for p in lineup)

            _check_suspended_players(state, team.id, lineup, round_number)

            captain = captain_of(lineup)
            if captain is None:
                continue
            captains.append((team.id, captain))

            count = state.count_captaincy(team.id, captain.name, round_number)
            if count > 1:
                ledger.charge(
                    round_number, TYPE_REPEATED_CAPTAIN, f'{captain.name} ({count}ª vez)', count - 1
                )

            club_charge = same_club_charge(team.id, lineup)
            if club_charge is not None:
                state.book(round_number, club_charge)

        for charge in head_to_head_charges(team_a.id, match.lineup_a, team_b.id, match.lineup_b):
            state.book(round_number, charge)

    for charge in worst_team_charges(scores):
        state.book(round_number, charge)
    for charge in worst_captain_charges(captains):
        state.book(round_number, charge)
    for charge in worst_player_charges(players):
        state.book(round_number, charge)


def _apply_registration_fees(state: SanctionState, championship_name: Optional[str], cup_name: str) -> None:
    """Charge late entrants of the cup (teams exempted from the qualifying rounds)."""
    if not championship_name or cup_name.upper() not in championship_name.upper():
        return

    for ledger in state.ledger.values():
        if not ledger.round_activity:
            continue
        first_round = min(ledger.round_activity)
        if first_round > 2:
            ledger.total += COST_REGISTRATION_FEE
            ledger.breakdown.insert(
                0,
                SanctionLedgerEntry(
                    round=first_round,
                    type=TYPE_REGISTRATION_FEE,
                    detail='Exención Fase Previa',
                    cost=COST_REGISTRATION_FEE,
                ),
            )


def calculate_sanctions(
    rounds: list[Round],
    teams: list[Team],
    championship_name: Optional[str] = None,
    historical_captains: Optional[HistoricalCaptains] = None,
    rules: Optional[SanctionRules] = None,
    cup_name: str = CUP_NAME,
) -> SanctionsReport:
    """
    Calculate the league sanctions ledger.

    Per live round and fielded lineup, in order: suspended-player
    infractions, captain repetition (cost count - 1, suspension on every
    multiple of the threshold), same-club captain and head-to-head
    duplicates. Worst team, captain and player penalties are applied once
    all lineups of the round are processed.

    Args:
        rounds: Live rounds (any order, processed by number)
        teams: Teams of the championship (id and name required)
        championship_name: Championship display name (cup registration fees)
        historical_captains: Archive {round: {raw_team_name: captain}}
        rules: Suspension windows and threshold (defaults to SanctionRules())
        cup_name: Proper name that identifies the cup championship

    Returns:
        SanctionsReport with ledger by team id, infractions and the final
        suspension registry (not filtered by round)

    Raises:
        TypeError: If rounds or teams is not a list
        ValueError: If a team is missing its id or name
    """
    _validate_inputs(rounds, teams)

    state = SanctionState(rules=rules or SanctionRules())
    team_ids_by_name = {}
    for team in teams:
        state.team(team.id, team.name)
        team_ids_by_name[resolve_team_name(team.name)] = team.id

    if historical_captains:
        _process_historical(state, historical_captains, team_ids_by_name)

    for round_ in sorted(rounds, key=lambda r: r.number or 0):
        if not round_.matches:
            continue
        _process_round(state, round_)

    _apply_registration_fees(state, championship_name, cup_name)

    logger.info(
        f'Sanctions calculated: {len(state.ledger)} teams, {len(state.infractions)} infractions, '
        f'{len(state.suspensions)} suspensions'
    )

    return SanctionsReport(
        ledger=state.ledger,
        infractions=state.infractions,
        active_suspensions=list(state.suspensions.values()),
    )


def partition_suspensions(
    suspensions: list[SuspensionRecord], current_round: int
) -> tuple[list[SuspensionRecord], list[SuspensionRecord]]:
    """
    Split suspensions into (still running, expired) as of current_round.

    A suspension is still running while its no-captain window has not
    ended (no_captain_until >= current_round).
    """
    current = [s for s in suspensions if s.no_captain_until >= current_round]
    past = [s for s in suspensions if s.no_captain_until < current_round]
    return current, past
