"""Data models for the Fuentmondo sanctions engine."""

from dataclasses import dataclass, field
from typing import Optional, Union

RoundLabel = Union[int, str]  # league round number or cup "round.leg"


@dataclass(frozen=True)
class Team:
    """A fantasy team as seen in a ranking or bracket."""
    id: str
    name: str


@dataclass(frozen=True)
class Player:
    """One lineup entry."""
    name: str
    points: float = 0.0
    is_captain: bool = False
    club: Optional[str] = None
    player_id: Optional[str] = None


@dataclass
class Match:
    """A league fixture; participants are 1-based positions in the round ranking."""
    participants: tuple[int, int]
    score: Optional[tuple[float, float]] = None
    lineup_a: list[Player] = field(default_factory=list)
    lineup_b: list[Player] = field(default_factory=list)


@dataclass
class Round:
    """A league round (jornada)."""
    number: int
    matches: list[Match] = field(default_factory=list)
    ranking: list[Optional[Team]] = field(default_factory=list)  # None keeps an empty slot


@dataclass
class CaptainHistoryEntry:
    round: RoundLabel
    player: str
    count: int
    warning: bool = False
    alert: bool = False
    is_historical: bool = False


@dataclass
class SuspensionRecord:
    """Restriction window opened by a repeated captaincy."""
    team_id: str
    team_name: str
    player: str
    out_team_until: int
    no_captain_until: int

    def rounds_left(self, current_round: int) -> tuple[int, int]:
        """
        Remaining (out of team, without captaincy) rounds seen from current_round.

        The window starts two rounds before out_team_until, so a round
        earlier than that counts the full window.
        """
        start_round = self.out_team_until - 2
        reference = max(current_round, start_round)
        out_left = max(0, self.out_team_until - reference + 1)
        no_captain_left = max(0, self.no_captain_until - reference + 1)
        return out_left, no_captain_left


@dataclass
class Infraction:
    team_id: str
    team_name: str
    player: str
    round: int
    kind: str
    cost: float


@dataclass
class SanctionLedgerEntry:
    round: RoundLabel
    type: str
    detail: str
    cost: float


@dataclass
class TeamLedger:
    """Accumulated sanctions for one team."""
    id: str
    name: str
    total: float = 0.0
    breakdown: list[SanctionLedgerEntry] = field(default_factory=list)
    captain_history: list[CaptainHistoryEntry] = field(default_factory=list)
    round_activity: list[int] = field(default_factory=list)

    def charge(self, round: RoundLabel, type: str, detail: str, cost: float) -> None:
        self.total += cost
        self.breakdown.append(SanctionLedgerEntry(round, type, detail, cost))


@dataclass
class TeamStanding:
    """Head-to-head table row."""
    id: str
    name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    points: int = 0
    goals_for: float = 0.0
    goals_against: float = 0.0
    historical_points: float = 0.0
    historical_goals: float = 0.0

    @property
    def total_points(self) -> float:
        return self.points + self.historical_points

    @property
    def total_goals(self) -> float:
        return self.goals_for + self.historical_goals


@dataclass
class LineupSnapshot:
    """Last lineup a team fielded."""
    round: int
    score: float
    lineup: list[Player] = field(default_factory=list)
    opponent_id: Optional[str] = None
    opponent_name: Optional[str] = None


@dataclass
class Charge:
    """A penalty produced by a rule, before it is booked on a round."""
    team_id: str
    type: str
    detail: str
    cost: float


@dataclass
class SanctionsReport:
    ledger: dict[str, TeamLedger]
    infractions: list[Infraction]
    active_suspensions: list[SuspensionRecord]


# Cup shapes

@dataclass
class CupLeg:
    home_lineup: list[Player] = field(default_factory=list)
    away_lineup: list[Player] = field(default_factory=list)


@dataclass
class CupMatch:
    """A bracket pairing; either side may be empty (bye or placeholder)."""
    home: Optional[Team]
    away: Optional[Team]
    legs: list[CupLeg] = field(default_factory=list)


@dataclass
class CupRound:
    number: int
    matches: list[CupMatch] = field(default_factory=list)


@dataclass
class RoundScore:
    team_id: str
    team_name: str
    score: float


@dataclass
class CupTeamStats:
    id: str
    name: str
    last_match: Optional[LineupSnapshot] = None


@dataclass
class CupReport:
    ledger: dict[str, TeamLedger]
    captain_history: dict[str, list[CaptainHistoryEntry]]
    team_stats: dict[str, CupTeamStats]
    round_scores: dict[int, list[RoundScore]]
