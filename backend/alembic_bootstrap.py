#!/usr/bin/env python3
"""Stamp the baseline revision on databases created by ``init_db``.

The app runs ``create_all`` on start-up, so a database can hold the panel
tables without an ``alembic_version`` row. Such a database is stamped at the
baseline before ``alembic upgrade head`` runs.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

BASELINE_REVISION = os.getenv("ALEMBIC_BASELINE_REVISION", "001")
PANEL_TABLES = ("users", "projects", "project_inquiries")
ALEMBIC_INI = Path(__file__).resolve().parent / "alembic.ini"


def needs_baseline_stamp(engine: Engine) -> bool:
    inspector = inspect(engine)
    if inspector.has_table("alembic_version"):
        return False
    return any(inspector.has_table(table) for table in PANEL_TABLES)


def main() -> int:
    from damon_panel.database import engine

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    if needs_baseline_stamp(engine):
        logger.info("Panel tables found without alembic_version, stamping %s", BASELINE_REVISION)
        config = Config(str(ALEMBIC_INI))
        config.set_main_option("script_location", str(ALEMBIC_INI.parent / "alembic"))
        command.stamp(config, BASELINE_REVISION)
    else:
        logger.info("No baseline stamp required")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
