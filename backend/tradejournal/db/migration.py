from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from tradejournal.core.config import settings

logger = logging.getLogger(__name__)


def _candidate_roots(start: Path) -> Iterable[Path]:
    current = start.resolve()
    for candidate in (current, *current.parents):
        yield candidate


def _find_project_root() -> Path:
    """Locate the directory containing ``alembic.ini``.

    The package may run from a source checkout or from an editable install,
    so every parent of this module is searched.
    """

    for candidate in _candidate_roots(Path(__file__).parent):
        if (candidate / "alembic.ini").exists():
            return candidate

    raise RuntimeError("Unable to locate alembic.ini. Ensure it is bundled with the backend.")


def build_config(database_url: str | None = None) -> Config:
    project_root = _find_project_root()
    config = Config(str(project_root / "alembic.ini"))
    config.set_main_option("script_location", str(project_root / "alembic"))
    config.set_main_option("sqlalchemy.url", database_url or settings.database_url)
    return config


def run_migrations(database_url: str | None = None) -> None:
    """Apply the latest Alembic migrations to the configured database."""

    url = database_url or settings.database_url
    config = build_config(url)

    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    engine = create_engine(url, connect_args=connect_args)

    try:
        with engine.connect() as connection:
            inspector = inspect(connection)
            has_alembic_version = inspector.has_table("alembic_version")
            has_trades = inspector.has_table("trades")

        # Databases created through metadata.create_all predate versioning.
        if not has_alembic_version and has_trades:
            logger.info("Stamping unversioned trades database at revision 0001")
            command.stamp(config, "0001")
    finally:
        engine.dispose()

    command.upgrade(config, "head")
