"""Shared test fixtures."""

import pytest

from fuentmondo.models import Match, Player, Round, Team


def _player(name, points=5.0, captain=False, club=None):
    return Player(name=name, points=points, is_captain=captain, club=club)


@pytest.fixture
def player():
    """Factory for lineup entries: player('Name', points, captain=True, club='RMA')."""
    return _player


@pytest.fixture
def teams():
    """Four league teams; positions 1-4 in every round ranking."""
    return [
        Team(id='t1', name='Samba Rovinha 🇧🇷'),
        Team(id='t2', name='Real Bailarines F.C'),
        Team(id='t3', name='Atlético Pirañas'),
        Team(id='t4', name='Los Cuñados'),
    ]


@pytest.fixture
def make_round(teams):
    """
    Factory for league rounds.

    make_round(number, [(pos_a, pos_b, lineup_a, lineup_b), ...])
    make_round(number, [(pos_a, pos_b, lineup_a, lineup_b, (score_a, score_b)), ...])
    """

    def _make(number, fixtures):
        matches = []
        for fixture in fixtures:
            pos_a, pos_b, lineup_a, lineup_b = fixture[:4]
            score = fixture[4] if len(fixture) > 4 else None
            matches.append(
                Match(
                    participants=(pos_a, pos_b),
                    score=score,
                    lineup_a=list(lineup_a),
                    lineup_b=list(lineup_b),
                )
            )
        return Round(number=number, matches=matches, ranking=list(teams))

    return _make


@pytest.fixture
def entries():
    """Ledger entries of one team, optionally filtered by type prefix."""

    def _entries(report, team_id, type_prefix=''):
        return [e for e in report.ledger[team_id].breakdown if e.type.startswith(type_prefix)]

    return _entries
