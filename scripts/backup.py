"""Dump every table to a timestamped JSON file under ``settings.backup_dir``.

Usage:
    python -m scripts.backup [--output-dir DIR]
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any

from sqlalchemy import select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from config.database import Database
from config.settings import Settings, settings as default_settings
from models import Base

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    raise TypeError(f"Cannot serialise {type(value).__name__}")


def dump_tables(connection: Connection) -> dict[str, list[dict[str, Any]]]:
    """Read every mapped table, parents before children."""
    tables: dict[str, list[dict[str, Any]]] = {}
    for table in Base.metadata.sorted_tables:
        try:
            rows = connection.execute(select(table)).mappings().all()
        except SQLAlchemyError:
            logger.warning("Could not back up table %s", table.name, exc_info=True)
            continue
        tables[table.name] = [dict(row) for row in rows]
        logger.info("Backed up table %s (%s rows)", table.name, len(rows))
    return tables


def create_backup(database: Database, output_dir: Path) -> Path:
    """Write the backup file.

    Returns:
        Path of the file written.
    """
    created_at = datetime.now(timezone.utc)
    output_dir.mkdir(parents=True, exist_ok=True)
    backup_file = output_dir / f"backup-{created_at.strftime('%Y-%m-%dT%H-%M-%S')}.json"

    with database.engine.connect() as connection:
        payload = {"created_at": created_at.isoformat(), "tables": dump_tables(connection)}

    backup_file.write_text(json.dumps(payload, default=_json_default, indent=2), encoding="utf-8")
    logger.info("Backup created: %s", backup_file)
    return backup_file


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    settings = settings or default_settings
    parser = argparse.ArgumentParser(description="Back up the employee management database")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path(settings.backup_dir),
        help="directory receiving the backup file (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    database = Database(settings)
    try:
        create_backup(database, args.output_dir)
    finally:
        database.dispose()
    return 0


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    sys.exit(main())
