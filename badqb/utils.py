"""File helpers shared by the league data loaders and stats stores."""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar('T', bound=BaseModel)
logger = logging.getLogger('badqb.utils')

WEEK_FILE = re.compile(r'^week_(\d+)\.json$')


def week_file(directory: Path | str, week: int) -> Path:
    """Path of a per-week file (lineups/week_3.json, stats/week_3.json)."""
    return Path(directory) / f'week_{week}.json'


def week_from_filename(path: Path | str) -> Optional[int]:
    """Week number encoded in a week_N.json file name, or None for other names."""
    match = WEEK_FILE.match(Path(path).name)
    return int(match.group(1)) if match else None


def list_week_files(directory: Path | str) -> dict[int, Path]:
    """Map week number to file for every week_N.json in a directory (empty if missing)."""
    directory = Path(directory)
    if not directory.is_dir():
        return {}
    files = {}
    for path in directory.iterdir():
        week = week_from_filename(path)
        if week is not None:
            files[week] = path
    return dict(sorted(files.items()))


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp for imported_at / updated_at fields."""
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


def load_json(path: Path | str, schema: type[T] | None = None) -> Any | T:
    """
    Read a league JSON file, optionally validating it against a pydantic schema.

    Raises:
        FileNotFoundError: If the file doesn't exist
        json.JSONDecodeError: If the file isn't valid JSON
        ValueError: If schema validation fails (message includes the path)

    Example:
        from badqb.schemas import TeamsFile
        teams = load_json('data/teams.json', schema=TeamsFile)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'League data file not found: {path}')

    with open(path, encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f'{path} is not valid JSON: {e.msg} (line {e.lineno})')
            raise json.JSONDecodeError(f'{path}: {e.msg}', e.doc, e.pos) from e

    if schema is None:
        return data

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f'{path} failed {schema.__name__} validation ({e.error_count()} errors)')
        raise ValueError(f'Schema validation failed for {path}:\n{e}') from e


def save_json(path: Path | str, data: Any, indent: int = 2) -> None:
    """
    Write JSON, creating parent directories and replacing any existing file.

    Pydantic models are dumped with model_dump(). The file is written to a
    temporary sibling first and renamed into place, so readers never see a
    half-written week.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = data.model_dump() if isinstance(data, BaseModel) else data
    tmp_path = path.with_name(path.name + '.tmp')
    try:
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(payload, f, indent=indent, ensure_ascii=False)
            f.write('\n')
    except (TypeError, OSError) as e:
        logger.error(f'Failed to write {path}: {e}')
        tmp_path.unlink(missing_ok=True)
        raise
    tmp_path.replace(path)
    logger.debug(f'Wrote {path}')
