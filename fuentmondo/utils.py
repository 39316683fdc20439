"""JSON helpers for archive files, league config and generated reports."""

import json
import logging
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('fuentmondo.utils')


def load_json(path: Path | str, schema: type[T] | None = None) -> Any | T:
    """
    Read a JSON file, validating it against a Pydantic model when given.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the file is not valid JSON
        ValueError: If schema validation fails

    Example:
        captains = load_json('data/historical_captains.json', schema=HistoricalCaptainsFile)
    """
    path = Path(path)
    if not path.exists():
        logger.error(f'File not found: {path}')
        raise FileNotFoundError(f'File not found: {path}')

    with open(path, encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f'Invalid JSON in {path}: {e.msg} at position {e.pos}')
            raise json.JSONDecodeError(f'Invalid JSON in {path}: {e.msg}', e.doc, e.pos) from e

    if schema is None:
        return data

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'{path} does not match {schema.__name__}: {e}')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def to_jsonable(data: Any) -> Any:
    """Turn engine output (dataclasses, models, int-keyed dicts) into plain JSON data."""
    if isinstance(data, BaseModel):
        return data.model_dump()
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, dict):
        return {str(k): to_jsonable(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [to_jsonable(v) for v in data]
    return data


def save_json(path: Path | str, data: Any, indent: int = 2) -> None:
    """
    Write data as UTF-8 JSON, creating parent directories.

    Team names keep their accents and emoji (ensure_ascii=False).

    Raises:
        TypeError: If data holds something to_jsonable cannot convert
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        payload = json.dumps(to_jsonable(data), indent=indent, ensure_ascii=False)
    except TypeError as e:
        logger.error(f'Cannot serialize data for {path}: {e}')
        raise TypeError(f'Data is not JSON-serializable: {e}') from e

    path.write_text(payload, encoding='utf-8')
    logger.debug(f'Wrote {path}')


def save_report(path: Path | str, **sections: Any) -> None:
    """Write a dashboard report: the given sections plus an 'updated_at' UTC timestamp."""
    save_json(path, {'updated_at': datetime.now(timezone.utc).isoformat(), **sections})
