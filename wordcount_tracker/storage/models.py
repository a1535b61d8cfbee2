"""
Data models for storage layer.

Defines database entities and data structures.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerEntry:
    """Immutable point-in-time word count for one document.
    
    Entries are only ever appended to the ledger; once written they are
    never modified or deleted.
    """
    path: str
    words: int
    timestamp: int
    
    def __post_init__(self):
        """Validate path is set and word count is non-negative."""
        if not isinstance(self.path, str) or not self.path:
            raise ValueError("path must be a non-empty string")
        if self.words < 0:
            raise ValueError("words cannot be negative")
