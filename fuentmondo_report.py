#!/usr/bin/env python3
"""
Fuentmondo Report CLI

Calculates standings, league sanctions and (optionally) cup sanctions from
exported Futmondo API data and writes them as JSON for the dashboard.

Usage:
    python fuentmondo_report.py --rounds data/rounds.json
    python fuentmondo_report.py --rounds data/rounds.json --teams data/teams.json --current-round 27
    python fuentmondo_report.py --rounds data/rounds.json --cup data/cup.json --championship 697663371311f0fd5379a446
"""

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from fuentmondo import (
    calculate_sanctions,
    calculate_standings,
    cup_from_api,
    last_match_snapshots,
    load_historical_captains,
    load_historical_rankings,
    parse_historical_captains_from_excel,
    partition_suspensions,
    rounds_from_api,
    scan_cup_and_calculate,
    teams_from_api,
)
from fuentmondo.config import (
    get_championship,
    get_cup_name,
    get_historical_rounds,
    get_sanction_rules,
)
from fuentmondo.logging_config import get_logger, setup_logging
from fuentmondo.models import Round, SuspensionRecord, Team
from fuentmondo.schemas import TeamsFile
from fuentmondo.utils import load_json, save_report

logger = get_logger('fuentmondo.report')


def teams_from_rounds(rounds: list[Round]) -> list[Team]:
    """Collect every team seen in any round ranking, in order of appearance."""
    seen: dict[str, Team] = {}
    for round_ in rounds:
        for team in round_.ranking:
            if team is not None and team.id not in seen:
                seen[team.id] = team
    return list(seen.values())


def build_standings_rows(rounds: list[Round], historical_rankings: dict) -> list[dict]:
    """Standings table rows with position, totals and last match for the dashboard."""
    standings = calculate_standings(rounds, historical_rankings)
    snapshots = last_match_snapshots(rounds)

    rows = []
    for position, standing in enumerate(standings, 1):
        row = asdict(standing)
        row['position'] = position
        row['total_points'] = standing.total_points
        row['total_goals'] = standing.total_goals
        snapshot = snapshots.get(standing.id)
        row['last_match'] = asdict(snapshot) if snapshot else None
        rows.append(row)

    return rows


def suspension_row(suspension: SuspensionRecord, current_round: int) -> dict:
    row = asdict(suspension)
    row['out_team_left'], row['no_captain_left'] = suspension.rounds_left(current_round)
    return row


def main():
    parser = argparse.ArgumentParser(description="Fuentmondo standings and sanctions report")
    parser.add_argument(
        "--rounds", "-r",
        required=True,
        help="Path to exported league rounds JSON (list of API round payloads)",
    )
    parser.add_argument(
        "--teams", "-t",
        default=None,
        help="Path to teams.json (defaults to the teams found in the round rankings)",
    )
    parser.add_argument(
        "--historical-captains",
        default="data/historical_captains.json",
        help="Path to the captain archive for rounds 1-19 (.json or .xlsx)",
    )
    parser.add_argument(
        "--historical-rankings",
        default="data/historical_rankings.json",
        help="Path to the season totals archive",
    )
    parser.add_argument(
        "--championship", "-c",
        default=None,
        help="Championship id from league_config.json or a championship name (enables cup registration fees when it names the cup)",
    )
    parser.add_argument(
        "--cup",
        default=None,
        help="Path to exported cup JSON (enables the Copa report)",
    )
    parser.add_argument(
        "--current-round",
        type=int,
        default=None,
        help="Round used to split running and expired suspensions",
    )
    parser.add_argument(
        "--output-dir", "-o",
        default="reports",
        help="Directory for the JSON reports",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Also write a log file to this directory",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress detailed output",
    )

    args = parser.parse_args()

    setup_logging(
        level=logging.WARNING if args.quiet else logging.INFO,
        log_dir=Path(args.log_dir) if args.log_dir else None,
    )

    rounds_path = Path(args.rounds)
    if not rounds_path.exists():
        print(f"❌ Rounds file not found: {rounds_path}")
        sys.exit(1)

    rules = get_sanction_rules()
    rounds = rounds_from_api(load_json(rounds_path))

    if args.teams:
        teams_path = Path(args.teams)
        if not teams_path.exists():
            print(f"❌ Teams file not found: {teams_path}")
            sys.exit(1)
        teams_file = load_json(teams_path, schema=TeamsFile)
        teams = teams_from_api([t.model_dump() for t in teams_file.teams])
    else:
        teams = teams_from_rounds(rounds)

    historical_captains = {}
    captains_path = Path(args.historical_captains)
    if captains_path.exists():
        if captains_path.suffix.lower() == ".xlsx":
            historical_captains = parse_historical_captains_from_excel(captains_path)
        else:
            historical_captains = load_historical_captains(captains_path)
        last_archived = get_historical_rounds()
        late = sorted(r for r in historical_captains if r > last_archived)
        if late:
            logger.warning(f"Captain archive has rounds past {last_archived}: {late}")
    else:
        logger.warning(f"Captain archive not found: {args.historical_captains}")

    historical_rankings = {}
    if Path(args.historical_rankings).exists():
        historical_rankings = load_historical_rankings(args.historical_rankings)
    else:
        logger.warning(f"Season totals archive not found: {args.historical_rankings}")

    championship_name = args.championship
    if championship_name:
        championship = get_championship(championship_name)
        if championship is not None:
            championship_name = championship.name

    output_dir = Path(args.output_dir)

    # Standings
    standings_rows = build_standings_rows(rounds, historical_rankings)
    save_report(output_dir / "standings.json", standings=standings_rows)

    # League sanctions
    report = calculate_sanctions(
        rounds,
        teams,
        championship_name=championship_name,
        historical_captains=historical_captains,
        rules=rules,
        cup_name=get_cup_name(),
    )
    sanctions_payload = {
        'ledger': report.ledger,
        'infractions': report.infractions,
        'active_suspensions': report.active_suspensions,
    }
    if args.current_round is not None:
        current, past = partition_suspensions(report.active_suspensions, args.current_round)
        sanctions_payload['current_suspensions'] = [
            suspension_row(s, args.current_round) for s in current
        ]
        sanctions_payload['past_suspensions'] = past
    save_report(output_dir / "sanctions.json", **sanctions_payload)

    # Copa
    cup_report = None
    if args.cup:
        cup_path = Path(args.cup)
        if not cup_path.exists():
            print(f"❌ Cup file not found: {cup_path}")
            sys.exit(1)
        cup_report = scan_cup_and_calculate(cup_from_api(load_json(cup_path)), rules=rules)
        save_report(
            output_dir / "copa.json",
            ledger=cup_report.ledger,
            captain_history=cup_report.captain_history,
            team_stats=cup_report.team_stats,
            round_scores=cup_report.round_scores,
        )

    if args.quiet:
        return

    print("\n" + "="*60)
    print("STANDINGS")
    print("="*60)
    for row in standings_rows:
        print(f"  {row['position']}. {row['name']}: {row['total_points']:g} pts ({row['total_goals']:g} gen)")

    print("\n" + "="*60)
    print("SANCTIONS")
    print("="*60)
    for ledger in sorted(report.ledger.values(), key=lambda t: t.total, reverse=True):
        print(f"  {ledger.name}: {ledger.total:g} € ({len(ledger.breakdown)} entries)")
    print(f"\n  Infractions: {len(report.infractions)}")
    print(f"  Suspensions: {len(report.active_suspensions)}")

    if cup_report is not None:
        print("\n" + "="*60)
        print("COPA")
        print("="*60)
        for ledger in sorted(cup_report.ledger.values(), key=lambda t: t.total, reverse=True):
            print(f"  {ledger.name}: {ledger.total:g} €")

    print(f"\nReports saved to {output_dir}")


if __name__ == "__main__":
    main()
