"""
Schema versioning and migrations.

The schema version lives in the SQLite database header (PRAGMA user_version),
which is written inside the same transaction as the migration statements.
Migrations are numbered by their position in MIGRATIONS and are always
applied in order, starting at the stored version. There are no downgrades.
"""

import logging
import sqlite3
from typing import Sequence

from .errors import MigrationFailed, VersionUnavailable

logger = logging.getLogger(__name__)


# One statement per step; the index of a step is the version it upgrades from.
MIGRATIONS = [
    """
    CREATE TABLE config (
        key VARCHAR PRIMARY KEY,
        value VARCHAR
    )
    """,
    """
    CREATE TABLE documents (
        id INTEGER PRIMARY KEY,
        path TEXT
    )
    """,
    """
    CREATE TABLE word_count (
        id INTEGER PRIMARY KEY,
        path TEXT NOT NULL,
        words INTEGER NOT NULL,
        timestamp INTEGER NOT NULL,
        UNIQUE (path, timestamp)
    )
    """,
]


def current_version(conn: sqlite3.Connection) -> int:
    """Read the schema version stored in the database header.

    Args:
        conn: Open database connection

    Returns:
        Stored schema version (0 for a fresh database)

    Raises:
        VersionUnavailable: If the database cannot report its version,
            e.g. because the file is corrupt or not a SQLite database
    """
    try:
        row = conn.execute("PRAGMA user_version").fetchone()
    except sqlite3.Error as e:
        raise VersionUnavailable(f"Cannot read schema version: {e}") from e
    if row is None:
        raise VersionUnavailable("Cannot read schema version: no result")
    return int(row[0])


def migrate(conn: sqlite3.Connection, steps: Sequence[str] = MIGRATIONS) -> int:
    """Apply all pending migration steps as a single atomic unit.

    Steps [current_version, len(steps)) are executed in order inside one
    transaction, and the stored version is advanced to len(steps) in that
    same transaction. If any step fails the whole batch is rolled back and
    the stored version is left unchanged.

    Args:
        conn: Open database connection in autocommit mode
        steps: Ordered migration statements

    Returns:
        Schema version after the call

    Raises:
        VersionUnavailable: If the current version cannot be read
        MigrationFailed: If a step fails; chained to the underlying cause
    """
    version = current_version(conn)
    target = len(steps)

    if version == target:
        logger.debug("Schema is up to date at version %d", version)
        return version
    if version > target:
        logger.warning(
            "Database schema version %d is newer than supported version %d",
            version, target
        )
        return version

    logger.info("Migrating schema from version %d to %d", version, target)
    step = version
    try:
        conn.execute("BEGIN")
        for step in range(version, target):
            conn.execute(steps[step])
        # PRAGMA does not accept bound parameters
        conn.execute(f"PRAGMA user_version = {int(target)}")
        conn.execute("COMMIT")
    except sqlite3.Error as e:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise MigrationFailed(f"Migration step {step} failed: {e}", step=step) from e

    return target
