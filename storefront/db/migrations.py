"""Run Alembic migrations from application code at startup."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory

from storefront.core.config import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _alembic_config() -> Config:
    """Build an Alembic config pointing at the runtime database URL."""

    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    return alembic_cfg


def _current_revision() -> str | None:
    from alembic.runtime.migration import MigrationContext

    from storefront.db.session import engine

    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def run_migrations() -> None:
    """Upgrade the schema to head unless the database is already there.

    Pooled application connections are disposed first so the upgrade does not
    wait on locks they hold.
    """
    from storefront.db.session import engine

    engine.dispose()
    cfg = _alembic_config()

    heads = list(ScriptDirectory.from_config(cfg).get_heads() or [])
    try:
        current = _current_revision()
    except Exception as exc:
        logger.warning("Unable to read current revision (%s); upgrading anyway", exc)
        current = None

    logger.info("Schema revision: current=%s heads=%s", current, ",".join(heads))
    if current is not None and current in heads:
        logger.info("Schema already at head, nothing to apply")
        return

    try:
        command.upgrade(cfg, "heads")
    except Exception:
        logger.exception("Alembic upgrade failed")
        raise
    logger.info("Schema upgraded to %s", ",".join(heads))


__all__ = ["run_migrations"]
