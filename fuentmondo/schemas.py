"""Pydantic schemas for JSON data validation."""

from typing import Optional

from pydantic import BaseModel, Field, RootModel, field_validator


class SanctionRules(BaseModel):
    """Captain suspension windows."""

    matches_out: int = Field(default=3, ge=0)
    matches_no_captain: int = Field(default=6, ge=0)
    captaincy_threshold: int = Field(default=3, ge=2)

    @field_validator('matches_no_captain')
    @classmethod
    def validate_windows(cls, v, info):
        """Ensure the no-captain window does not end before the out-of-team window."""
        matches_out = info.data.get('matches_out')
        if matches_out is not None and v < matches_out:
            raise ValueError(f'matches_no_captain ({v}) must be >= matches_out ({matches_out})')
        return v

    class Config:
        extra = 'forbid'


class Championship(BaseModel):
    """Championship metadata."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    type: str = Field(default='league', pattern=r'^(league|copa)$')

    class Config:
        extra = 'allow'


class LeagueConfig(BaseModel):
    """League configuration settings."""

    current_season: str = Field(..., min_length=1)
    historical_rounds: int = Field(..., ge=0, le=38)
    live_rounds: list[int]
    cup_name: str = Field(..., min_length=1)
    sanction_rules: SanctionRules = Field(default_factory=SanctionRules)
    championships: list[Championship] = Field(default_factory=list)

    @field_validator('live_rounds')
    @classmethod
    def validate_live_rounds(cls, v):
        """Ensure live rounds are a [first, last] pair."""
        if len(v) != 2 or v[0] > v[1]:
            raise ValueError(f'live_rounds must be [first, last], got {v}')
        return v

    class Config:
        extra = 'forbid'


class Team(BaseModel):
    """Team metadata."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)

    class Config:
        extra = 'allow'


class TeamsFile(BaseModel):
    """Complete teams.json file structure."""

    teams: list[Team]

    class Config:
        extra = 'forbid'


class HistoricalCaptainsFile(RootModel[dict[int, dict[str, Optional[str]]]]):
    """historical_captains.json: {round: {raw team name: captain name}}."""


class HistoricalTotals(BaseModel):
    """Season totals for one team before the live rounds."""

    pts_totales: float = 0
    pts_generales: float = 0

    class Config:
        extra = 'allow'


class HistoricalRankingsFile(RootModel[dict[str, HistoricalTotals]]):
    """historical_rankings.json: {raw team name: totals}."""
