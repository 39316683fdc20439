"""Season settings read from the packaged data/league_config.json."""

from functools import lru_cache
from pathlib import Path

from .schemas import Championship, LeagueConfig, SanctionRules
from .utils import load_json

CONFIG_PATH = Path(__file__).parent / 'data' / 'league_config.json'


@lru_cache(maxsize=1)
def get_config() -> LeagueConfig:
    """
    Return the validated league config, reading the file once per process.

    Raises:
        FileNotFoundError: If fuentmondo/data/league_config.json is missing
        ValueError: If it does not match LeagueConfig

    Example:
        rules = get_config().sanction_rules
        report = calculate_sanctions(rounds, teams, rules=rules)
    """
    return load_json(CONFIG_PATH, schema=LeagueConfig)


def get_sanction_rules() -> SanctionRules:
    return get_config().sanction_rules


def get_cup_name() -> str:
    return get_config().cup_name


def get_historical_rounds() -> int:
    """Last league round that only exists in the captain archive."""
    return get_config().historical_rounds


def get_championship(championship_id: str) -> Championship | None:
    return next((c for c in get_config().championships if c.id == championship_id), None)


def clear_config_cache() -> None:
    """Forget the cached config so the next get_config() rereads the file."""
    get_config.cache_clear()
