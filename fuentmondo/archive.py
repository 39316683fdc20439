"""Historical archive loading (rounds played before the live API)."""

import logging
from pathlib import Path
from typing import Optional

import openpyxl

from .schemas import HistoricalCaptainsFile, HistoricalRankingsFile
from .utils import load_json

logger = logging.getLogger('fuentmondo.archive')


def load_historical_captains(path: str | Path) -> dict[int, dict[str, Optional[str]]]:
    """
    Load the per-round captain archive.

    Args:
        path: Path to historical_captains.json ({round: {team name: captain}})

    Returns:
        Dict mapping round number to {raw team name: captain name}
    """
    return load_json(path, schema=HistoricalCaptainsFile).root


def load_historical_rankings(path: str | Path) -> dict[str, dict[str, float]]:
    """
    Load season totals accumulated before the live rounds.

    Args:
        path: Path to historical_rankings.json ({team name: {pts_totales, pts_generales}})

    Returns:
        Dict mapping raw team name to its totals
    """
    rankings = load_json(path, schema=HistoricalRankingsFile).root
    return {name: totals.model_dump() for name, totals in rankings.items()}


def _round_number(header) -> Optional[int]:
    """Parse a header cell such as 7, '7' or 'J7' into a round number."""
    if header is None:
        return None
    if isinstance(header, (int, float)):
        return int(header)
    text = str(header).strip().upper().lstrip('J').strip()
    return int(text) if text.isdigit() else None


def parse_historical_captains_from_excel(
    filepath: str | Path, sheet_name: Optional[str] = None
) -> dict[int, dict[str, Optional[str]]]:
    """
    Parse the captain archive from a spreadsheet export.

    Layout: team names in column A from row 2 down, round numbers in the
    header row (e.g. 1, 2 ... or J1, J2 ...), captain names in the grid.
    Empty cells are skipped.

    Args:
        filepath: Path to the .xlsx file
        sheet_name: Sheet to read (default: active sheet)

    Returns:
        Dict mapping round number to {raw team name: captain name}
    """
    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    ws = wb[sheet_name] if sheet_name else wb.active

    rows = ws.iter_rows(values_only=True)
    header = next(rows, None)
    if header is None:
        wb.close()
        return {}

    columns = {}
    for col_idx, cell in enumerate(header[1:], 1):
        round_number = _round_number(cell)
        if round_number is not None:
            columns[col_idx] = round_number

    archive: dict[int, dict[str, Optional[str]]] = {}
    for row in rows:
        if not row or not row[0]:
            continue
        team_name = str(row[0]).strip()
        for col_idx, round_number in columns.items():
            value = row[col_idx] if col_idx < len(row) else None
            if value is None or not str(value).strip():
                continue
            archive.setdefault(round_number, {})[team_name] = str(value).strip()

    wb.close()
    logger.info(f'Parsed captain archive from {filepath}: {len(archive)} rounds')
    return dict(sorted(archive.items()))
