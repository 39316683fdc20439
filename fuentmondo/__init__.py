from .models import (
    CaptainHistoryEntry,
    CupLeg,
    CupMatch,
    CupReport,
    CupRound,
    Infraction,
    LineupSnapshot,
    Match,
    Player,
    Round,
    SanctionLedgerEntry,
    SanctionsReport,
    SuspensionRecord,
    Team,
    TeamLedger,
    TeamStanding,
)
from .names import normalize_name, resolve_team_name
from .standings import calculate_standings, last_match_snapshots
from .sanctions import calculate_sanctions, partition_suspensions
from .copa import scan_cup_and_calculate
from .adapters import (
    cup_from_api,
    extract_lineup,
    is_captain,
    lineup_from_api,
    round_from_api,
    rounds_from_api,
    teams_from_api,
)
from .archive import (
    load_historical_captains,
    load_historical_rankings,
    parse_historical_captains_from_excel,
)
from .schemas import SanctionRules

__all__ = [
    # Models
    'CaptainHistoryEntry',
    'CupLeg',
    'CupMatch',
    'CupReport',
    'CupRound',
    'Infraction',
    'LineupSnapshot',
    'Match',
    'Player',
    'Round',
    'SanctionLedgerEntry',
    'SanctionsReport',
    'SuspensionRecord',
    'Team',
    'TeamLedger',
    'TeamStanding',
    'SanctionRules',
    # Name resolution
    'normalize_name',
    'resolve_team_name',
    # Engines
    'calculate_standings',
    'last_match_snapshots',
    'calculate_sanctions',
    'partition_suspensions',
    'scan_cup_and_calculate',
    # API payload adapters
    'cup_from_api',
    'extract_lineup',
    'is_captain',
    'lineup_from_api',
    'round_from_api',
    'rounds_from_api',
    'teams_from_api',
    # Historical archive
    'load_historical_captains',
    'load_historical_rankings',
    'parse_historical_captains_from_excel',
]
