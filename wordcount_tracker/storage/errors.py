"""
Error taxonomy for the word-count ledger.

Schema-level errors are fatal to a run; entry-level errors only affect the
document being processed.
"""

from typing import Optional


class LedgerError(Exception):
    """Base class for all ledger failures."""


class VersionUnavailable(LedgerError):
    """Raised when the schema version cannot be read from the database."""


class MigrationFailed(LedgerError):
    """Raised when a migration step fails and the batch is rolled back."""
    def __init__(self, message: str, step: Optional[int] = None):
        super().__init__(message)
        self.step = step


class DuplicateEntry(LedgerError):
    """Raised when an entry already exists for the same path and timestamp."""
    def __init__(self, path: str, timestamp: int):
        super().__init__(
            f"Word count for '{path}' already recorded at timestamp {timestamp}"
        )
        self.path = path
        self.timestamp = timestamp


class StoreError(LedgerError):
    """Raised for any other failure of the backing store."""
