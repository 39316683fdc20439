"""Tests for the league sanctions engine."""

import pytest

from fuentmondo.constants import (
    INFRACTION_HISTORICAL_CAPTAIN,
    INFRACTION_HISTORICAL_OUT,
    INFRACTION_NO_CAPTAIN,
    INFRACTION_OUT_OF_TEAM,
)
from fuentmondo.models import SuspensionRecord, Team
from fuentmondo.sanctions import calculate_sanctions, partition_suspensions
from fuentmondo.schemas import SanctionRules


@pytest.fixture
def solo_round(make_round, player):
    """Round where t1 fields a lineup against an unknown t2 lineup."""

    def _solo(number, captain='Pedri', regulars=('Filler',)):
        lineup = [player(captain, captain=True)] + [player(name) for name in regulars]
        return make_round(number, [(1, 2, lineup, [])])

    return _solo


def _infractions(report, team_id='t1'):
    return [(i.round, i.player, i.kind) for i in report.infractions if i.team_id == team_id]


class TestCaptainRepetition:
    """Captain counting, repeat costs and suspension windows."""

    def test_repeat_cost_grows_with_count(self, solo_round, teams, entries):
        """Test the n-th captaincy of the same player costs n - 1."""
        rounds = [solo_round(20), solo_round(21)]
        report = calculate_sanctions(rounds, teams)

        repeated = entries(report, 't1', 'Capitán Repetido')
        assert [(e.round, e.detail, e.cost) for e in repeated] == [(21, 'Pedri (2ª vez)', 1)]

    def test_third_captaincy_opens_window(self, solo_round, teams):
        """Test captaining in rounds 1, 5 and 9 suspends until 12 and 15."""
        report = calculate_sanctions([solo_round(1), solo_round(5), solo_round(9)], teams)

        assert len(report.active_suspensions) == 1
        suspension = report.active_suspensions[0]
        assert suspension.team_id == 't1'
        assert suspension.player == 'Pedri'
        assert suspension.out_team_until == 12
        assert suspension.no_captain_until == 15

        history = report.ledger['t1'].captain_history
        assert [h.count for h in history] == [1, 2, 3]
        assert [h.warning for h in history] == [False, True, False]
        assert [h.alert for h in history] == [False, False, True]

    def test_window_infractions(self, solo_round, teams):
        """Test fielding in the out window and captaining in the no-captain window."""
        rounds = [
            solo_round(1),
            solo_round(5),
            solo_round(9),
            solo_round(11, captain='Other', regulars=('Pedri',)),
            solo_round(14),
            solo_round(16),
        ]
        report = calculate_sanctions(rounds, teams)

        assert _infractions(report) == [
            (11, 'Pedri', INFRACTION_OUT_OF_TEAM),
            (14, 'Pedri', INFRACTION_NO_CAPTAIN),
        ]
        assert all(i.cost == 5 for i in report.infractions)

        pedri = [h for h in report.ledger['t1'].captain_history if h.player == 'Pedri']
        assert [(h.round, h.count) for h in pedri] == [(1, 1), (5, 2), (9, 3), (14, 4), (16, 5)]

    def test_regular_in_no_captain_window_is_allowed(self, solo_round, teams):
        """Test a suspended captain may play as a regular once the out window ends."""
        rounds = [
            solo_round(1),
            solo_round(2),
            solo_round(3),
            solo_round(7, captain='Other', regulars=('Pedri',)),
        ]
        report = calculate_sanctions(rounds, teams)

        assert report.infractions == []

    def test_sixth_captaincy_reopens_window(self, solo_round, teams):
        """Test every multiple of the threshold opens a new window."""
        rounds = [solo_round(n) for n in range(1, 7)]
        report = calculate_sanctions(rounds, teams)

        assert len(report.active_suspensions) == 1
        suspension = report.active_suspensions[0]
        assert suspension.out_team_until == 9
        assert suspension.no_captain_until == 12
        assert [r for r, _, _ in _infractions(report)] == [4, 5, 6]

    def test_custom_rules(self, solo_round, teams):
        """Test windows and threshold follow the supplied rules."""
        rules = SanctionRules(matches_out=1, matches_no_captain=2, captaincy_threshold=2)
        report = calculate_sanctions([solo_round(1), solo_round(4)], teams, rules=rules)

        suspension = report.active_suspensions[0]
        assert (suspension.out_team_until, suspension.no_captain_until) == (5, 6)

    def test_counts_keyed_by_normalized_name(self, solo_round, teams):
        """Test accents and case do not split a player's count."""
        rounds = [solo_round(1, captain='Pédri'), solo_round(2, captain='PEDRI'), solo_round(3)]
        report = calculate_sanctions(rounds, teams)

        assert report.ledger['t1'].captain_history[-1].count == 3
        assert len(report.active_suspensions) == 1


class TestHistoricalArchive:
    """Archive rounds folded before the live rounds."""

    def test_archive_counts_carry_into_live_rounds(self, solo_round, teams, entries):
        """Test two archived captaincies make the live one the third."""
        historical = {
            1: {'Samba Rovinha': 'Pedri'},
            2: {'SAMBA ROVINHA 🇧🇷': 'Pedri'},
        }
        report = calculate_sanctions([solo_round(10)], teams, historical_captains=historical)

        repeated = entries(report, 't1', 'Capitán Repetido')
        assert [(e.round, e.detail, e.cost) for e in repeated] == [(10, 'Pedri (3ª vez)', 2)]

        suspension = report.active_suspensions[0]
        assert (suspension.out_team_until, suspension.no_captain_until) == (13, 16)

        history = report.ledger['t1'].captain_history
        assert [h.is_historical for h in history] == [True, True, False]

    def test_archive_charges_no_repeat_cost(self, teams, entries):
        """Test archived captaincies build history without repeat charges."""
        historical = {str(n): {'Samba Rovinha': 'Pedri'} for n in (1, 2)}
        report = calculate_sanctions([], teams, historical_captains=historical)

        assert entries(report, 't1') == []
        assert len(report.ledger['t1'].captain_history) == 2

    def test_archive_infractions(self, teams):
        """Test archived rounds inside a window register historical infractions."""
        historical = {n: {'Samba Rovinha': 'Pedri'} for n in (1, 2, 3, 4, 8)}
        report = calculate_sanctions([], teams, historical_captains=historical)

        assert _infractions(report) == [
            (4, 'Pedri', INFRACTION_HISTORICAL_OUT),
            (8, 'Pedri', INFRACTION_HISTORICAL_CAPTAIN),
        ]
        assert report.ledger['t1'].total == 10

    def test_placeholders_and_unknown_teams_skipped(self, teams):
        """Test empty captains and teams outside the league are ignored."""
        historical = {
            1: {'Samba Rovinha': 'N/A', 'Los Cuñados': '', 'Nobody FC': 'Pedri'},
            2: {'Los Cuñados': None},
        }
        report = calculate_sanctions([], teams, historical_captains=historical)

        assert all(not ledger.captain_history for ledger in report.ledger.values())


class TestRoundRules:
    """Per-lineup, head-to-head and worst-of-round penalties."""

    def test_same_club_captain(self, make_round, player, teams, entries):
        """Test captain sharing a club with a teammate costs 2."""
        lineup = [player('Cap', captain=True, club='RMA'), player('Mate', club='RMA')]
        report = calculate_sanctions([make_round(20, [(1, 2, lineup, [])])], teams)

        club = entries(report, 't1', '2 Jugadores')
        assert [(e.detail, e.cost) for e in club] == [('Club: RMA', 2)]

    def test_head_to_head_same_captain(self, make_round, player, teams, entries):
        """Test both sides pay when they captain the same player."""
        lineup_a = [player('Pedri', captain=True), player('A')]
        lineup_b = [player('Pedri', captain=True), player('B')]
        report = calculate_sanctions([make_round(20, [(1, 2, lineup_a, lineup_b)])], teams)

        for team_id in ('t1', 't2'):
            assert [e.cost for e in entries(report, team_id, 'Capitán Repetido H2H')] == [2]
            assert [e.cost for e in entries(report, team_id, 'Jugador Repetido H2H')] == [0.5]

    def test_missing_lineup_skips_head_to_head(self, make_round, player, teams, entries):
        """Test an unknown lineup charges nothing head-to-head and records no activity."""
        lineup = [player('Pedri', captain=True)]
        report = calculate_sanctions([make_round(20, [(1, 2, lineup, [])])], teams)

        assert entries(report, 't1', 'Capitán Repetido H2H') == []
        assert report.ledger['t2'].breakdown == []
        assert report.ledger['t2'].round_activity == []
        assert report.ledger['t1'].round_activity == [20]

    def test_worst_team_tiers(self, make_round, player, teams, entries):
        """Test totals 10, 10, 15, 20 pay 2, 2, 1.5 and nothing."""
        rounds = [
            make_round(
                20,
                [
                    (1, 2, [player('A', 10)], [player('B', 10)]),
                    (3, 4, [player('C', 15)], [player('D', 20)]),
                ],
            )
        ]
        report = calculate_sanctions(rounds, teams)

        costs = {
            team_id: [e.cost for e in entries(report, team_id, 'Peor Equipo')]
            for team_id in ('t1', 't2', 't3', 't4')
        }
        assert costs == {'t1': [2], 't2': [2], 't3': [1.5], 't4': []}

    def test_worst_captain_and_player(self, make_round, player, teams, entries):
        """Test the lowest captain and the lowest player of the round pay 1."""
        lineup_a = [player('CapA', 1, captain=True), player('A', 8)]
        lineup_b = [player('CapB', 9, captain=True), player('B', -3)]
        report = calculate_sanctions([make_round(20, [(1, 2, lineup_a, lineup_b)])], teams)

        assert [e.detail for e in entries(report, 't1', 'Peor Capitán')] == ['CapA (1 pts)']
        assert entries(report, 't2', 'Peor Capitán') == []
        assert [e.detail for e in entries(report, 't2', 'Peor Jugador')] == ['B (-3 pts)']
        assert entries(report, 't1', 'Peor Jugador') == []


class TestRegistrationFee:
    """Cup registration fee for teams exempted from the qualifying rounds."""

    def _rounds(self, make_round, player):
        return [
            make_round(1, [(1, 2, [player('A')], [player('B')])]),
            make_round(3, [(3, 4, [player('C')], [player('D')])]),
        ]

    def test_late_entrants_pay(self, make_round, player, teams):
        """Test teams first active after round 2 pay 5 as their first entry."""
        report = calculate_sanctions(
            self._rounds(make_round, player), teams, championship_name='Copa Piraña 2026'
        )

        for team_id in ('t3', 't4'):
            first = report.ledger[team_id].breakdown[0]
            assert first.type == 'Tasa Inscripción (Acceso directo)'
            assert first.round == 3
            assert first.cost == 5
        for team_id in ('t1', 't2'):
            assert all(e.type != 'Tasa Inscripción (Acceso directo)' for e in report.ledger[team_id].breakdown)

    def test_not_applied_to_league(self, make_round, player, teams):
        """Test other championships never charge the fee."""
        report = calculate_sanctions(self._rounds(make_round, player), teams, championship_name='Liga')

        for ledger in report.ledger.values():
            assert all(e.type != 'Tasa Inscripción (Acceso directo)' for e in ledger.breakdown)


class TestContract:
    """Input validation and report shape."""

    def test_rejects_non_list_rounds(self, teams):
        with pytest.raises(TypeError):
            calculate_sanctions({'rounds': []}, teams)

    def test_rejects_non_list_teams(self):
        with pytest.raises(TypeError):
            calculate_sanctions([], 'teams')

    def test_rejects_team_without_id(self):
        with pytest.raises(ValueError):
            calculate_sanctions([], [Team(id='', name='Nameless')])

    def test_every_team_has_a_ledger(self, teams):
        """Test teams that never play still get an empty ledger."""
        report = calculate_sanctions([], teams)

        assert set(report.ledger) == {'t1', 't2', 't3', 't4'}
        assert all(ledger.total == 0 for ledger in report.ledger.values())

    def test_totals_match_breakdown(self, make_round, player, teams):
        """Test each total is the sum of its breakdown."""
        rounds = [
            make_round(20, [(1, 2, [player('Pedri', 3, captain=True)], [player('Pedri', 4, captain=True)])]),
            make_round(21, [(1, 2, [player('Pedri', 2, captain=True)], [player('Vini', 4, captain=True)])]),
        ]
        report = calculate_sanctions(rounds, teams)

        for ledger in report.ledger.values():
            assert ledger.total == pytest.approx(sum(e.cost for e in ledger.breakdown))

    def test_deterministic(self, make_round, player, teams):
        """Test identical input gives an identical report."""
        rounds = [make_round(20, [(1, 2, [player('Pedri', 3, captain=True)], [player('X', 1)])])]

        first = calculate_sanctions(rounds, teams)
        second = calculate_sanctions(rounds, teams)

        assert first == second

    def test_rounds_processed_by_number(self, solo_round, teams):
        """Test rounds supplied out of order are folded chronologically."""
        report = calculate_sanctions([solo_round(9), solo_round(1), solo_round(5)], teams)

        assert [h.round for h in report.ledger['t1'].captain_history] == [1, 5, 9]


class TestSuspensionQueries:
    """partition_suspensions and SuspensionRecord.rounds_left."""

    def _record(self, out_until, no_captain_until):
        return SuspensionRecord('t1', 'Samba', 'Pedri', out_until, no_captain_until)

    def test_partition(self):
        running = self._record(12, 15)
        expired = self._record(5, 8)

        current, past = partition_suspensions([running, expired], 15)

        assert current == [running]
        assert past == [expired]

    @pytest.mark.parametrize(
        'current_round,expected',
        [
            (5, (3, 6)),
            (11, (2, 5)),
            (13, (0, 3)),
            (20, (0, 0)),
        ],
    )
    def test_rounds_left(self, current_round, expected):
        assert self._record(12, 15).rounds_left(current_round) == expected
