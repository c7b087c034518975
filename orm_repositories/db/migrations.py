"""
Programmatic Alembic migration runner.

Allows running migrations without an alembic.ini by configuring the script location
directly. When a live connection is passed, it is handed to env.py through
Config.attributes["connection"] so the migration runs inside the caller's
transaction instead of opening a new engine.

Usage examples:
    python -m orm_repositories.db.migrations upgrade head
    python -m orm_repositories.db.migrations downgrade -1
    python -m orm_repositories.db.migrations history
"""

from __future__ import annotations

import sys
from typing import List, Optional

from alembic import command
from alembic.config import Config
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncConnection

from .config import get_settings
from orm_repositories.core.settings import get_repository_options


# PUBLIC_INTERFACE
def build_config(script_location: str, url: Optional[str] = None) -> Config:
    """Return an Alembic Config pointing at script_location (and url, if given)."""
    if not script_location:
        raise ValueError(
            "Migrations are enabled but no script location is configured. Set MIGRATIONS_PATH."
        )
    cfg = Config()
    cfg.set_main_option("script_location", str(script_location))
    if url:
        cfg.set_main_option("sqlalchemy.url", url)
    return cfg


def _upgrade(connection: Connection, cfg: Config, revision: str) -> None:
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, revision)


# PUBLIC_INTERFACE
async def upgrade(connection: AsyncConnection, cfg: Config, revision: str = "head") -> None:
    """Apply pending migrations up to revision on an open async connection."""
    await connection.run_sync(_upgrade, cfg, revision)


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None) -> None:
    """Run Alembic command with programmatic configuration."""
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    options = get_repository_options()
    settings = get_settings()
    # Set DB URL for offline usage; env.py may override for online async usage.
    cfg = build_config(options.MIGRATIONS_PATH, settings.sync_database_url)

    # Dispatch to Alembic CLI command
    cmd = args[0]
    other = args[1:]

    if cmd == "upgrade":
        command.upgrade(cfg, *(other or ["head"]))
    elif cmd == "downgrade":
        command.downgrade(cfg, *(other or ["-1"]))
    elif cmd == "stamp":
        command.stamp(cfg, *(other or ["head"]))
    elif cmd == "history":
        command.history(cfg, *other)
    elif cmd == "current":
        command.current(cfg, *other)
    elif cmd == "heads":
        command.heads(cfg, *other)
    elif cmd == "show":
        if not other:
            print("Usage: show <revision>")
            sys.exit(2)
        command.show(cfg, other[0])
    else:
        print(f"Unsupported Alembic command: {cmd}")
        sys.exit(2)


if __name__ == "__main__":
    main()
