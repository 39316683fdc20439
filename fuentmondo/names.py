"""Team and player name normalization."""

import re
import unicodedata
from functools import lru_cache

from .constants import TEAM_REDIRECTS

_WHITESPACE = re.compile(r'\s+')


def _keep_char(char: str) -> bool:
    # Letters, numbers, punctuation and space separators survive; emoji,
    # symbols and control characters do not ('^' and '$' excepted).
    return char in '^$' or unicodedata.category(char)[0] in ('L', 'N', 'P', 'Z')


@lru_cache(maxsize=4096)
def normalize_name(name: str | None) -> str:
    """
    Normalize a name for cross-source matching.

    Strips accents, removes emoji and symbols, collapses whitespace
    and converts to lowercase.

    Args:
        name: Raw team or player name (None is accepted)

    Returns:
        Normalized name ('' for empty input)

    Example:
        normalize_name('Samba Rovinha 🇧🇷')  # 'samba rovinha'
    """
    if not name:
        return ''
    decomposed = unicodedata.normalize('NFD', str(name))
    stripped = ''.join(
        c for c in decomposed if not unicodedata.combining(c) and _keep_char(c)
    )
    return _WHITESPACE.sub(' ', stripped).strip().lower()


@lru_cache(maxsize=1024)
def resolve_team_name(name: str | None) -> str:
    """
    Resolve a team name to its canonical normalized form.

    Applies normalize_name and then the historical rename table, so a team
    that changed its display name mid-season is recognized under one key.
    """
    normalized = normalize_name(name)
    return TEAM_REDIRECTS.get(normalized, normalized)
