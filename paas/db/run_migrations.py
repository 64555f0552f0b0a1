"""
Programmatic Alembic migration runner.

Allows running migrations without an alembic.ini by configuring the script location
to this package's migrations directory.

Usage examples:
    python -m paas.db.run_migrations upgrade head
    python -m paas.db.run_migrations downgrade -1
    python -m paas.db.run_migrations current
"""

import logging
import sys
from pathlib import Path
from typing import List

from alembic import command
from alembic.config import Config

from paas.db.config import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def build_config() -> Config:
    """Return an Alembic Config pointing at the bundled migrations directory."""
    cfg = Config()
    # Script location is the migrations folder next to this file.
    here = Path(__file__).resolve()
    cfg.set_main_option("script_location", str(here.parent / "migrations"))

    # Set DB URL for offline usage; env.py will use the async URL online.
    settings = get_settings()
    cfg.set_main_option("sqlalchemy.url", settings.sync_database_url)
    return cfg


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run Alembic command with programmatic configuration."""
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    cfg = build_config()

    # Dispatch to Alembic CLI command
    cmd = args[0]
    other = args[1:]
    logger.info("Running alembic %s %s", cmd, " ".join(other))

    if cmd == "upgrade":
        command.upgrade(cfg, *(other or ["head"]))
    elif cmd == "downgrade":
        command.downgrade(cfg, *(other or ["-1"]))
    elif cmd == "current":
        command.current(cfg, *other)
    else:
        print(f"Unsupported Alembic command: {cmd}")
        sys.exit(2)


if __name__ == "__main__":
    main()
