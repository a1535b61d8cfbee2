"""
Database connection management.

Provides the SQLite connection shared by the schema manager and the ledger.
"""

import sqlite3
from pathlib import Path

from .errors import StoreError

DEFAULT_DB_PATH = "wc.db"


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Create and return a SQLite database connection in autocommit mode.
    
    Transactions are opened explicitly with BEGIN where several statements
    must succeed or fail together (schema migrations).
    
    Args:
        db_path: Path to SQLite database file
        
    Returns:
        SQLite connection with isolation_level=None
        
    Raises:
        StoreError: If the database file cannot be opened
    """
    path = Path(db_path)
    try:
        conn = sqlite3.connect(str(path), isolation_level=None)
    except sqlite3.Error as e:
        raise StoreError(f"Cannot open database {db_path}: {e}") from e
    return conn
