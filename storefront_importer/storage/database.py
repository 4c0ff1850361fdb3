"""
SQLite database access.

Opens the store database and applies the SQL files in migrations/ in
filename order, recording each one so it runs only once.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any, List, Optional, Sequence

logger = logging.getLogger(__name__)


def _get_migrations_dir() -> Path:
    """Get the migrations directory path."""
    module_dir = Path(__file__).parent.parent.parent
    migrations_dir = module_dir / 'migrations'

    if migrations_dir.exists():
        return migrations_dir

    cwd_migrations = Path.cwd() / 'migrations'
    if cwd_migrations.exists():
        return cwd_migrations

    raise FileNotFoundError(
        f"Migrations directory not found. Tried: {migrations_dir}, {cwd_migrations}"
    )


class Database:
    """
    Thin wrapper around a sqlite3 connection.

    Usage:
        with Database("importer.db") as db:
            row = db.query_one("SELECT * FROM store_settings WHERE shop = ?", (shop,))
    """

    def __init__(self, path: str = ":memory:", migrate: bool = True):
        """
        Open the database.

        Args:
            path: SQLite file path (":memory:" for a throwaway database)
            migrate: Apply pending migrations on open
        """
        self.path = path
        self.conn = sqlite3.connect(path)
        self.conn.row_factory = sqlite3.Row
        if migrate:
            self.migrate()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        self.conn.close()

    def migrate(self, migrations_dir: Optional[Path] = None) -> List[str]:
        """
        Apply migrations that have not run yet.

        Returns:
            Names of the files applied in this call
        """
        migrations_dir = migrations_dir or _get_migrations_dir()
        self.conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_migrations (name TEXT PRIMARY KEY)"
        )
        applied = {row["name"] for row in self.conn.execute("SELECT name FROM schema_migrations")}

        newly_applied = []
        for path in sorted(migrations_dir.glob("*.sql")):
            if path.name in applied:
                continue
            self.conn.executescript(path.read_text(encoding="utf-8"))
            self.conn.execute("INSERT INTO schema_migrations (name) VALUES (?)", (path.name,))
            newly_applied.append(path.name)

        self.conn.commit()
        if newly_applied:
            logger.debug("Applied migrations: %s", ", ".join(newly_applied))
        return newly_applied

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Execute a write statement and commit."""
        cursor = self.conn.execute(sql, params)
        self.conn.commit()
        return cursor

    def query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        return self.conn.execute(sql, params).fetchone()

    def query_all(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        return self.conn.execute(sql, params).fetchall()
