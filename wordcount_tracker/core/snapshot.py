"""
Document snapshots.

Combines a document's current word count with its ledger history.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from wordcount_tracker.storage.repository import WordCountRepository, as_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentSnapshot:
    """Current, previous and previous-day word counts of one document.
    
    Built once per report cycle and never persisted.
    """
    path: str
    words: int
    previous: int
    yesterday: int
    
    @property
    def today(self) -> int:
        """Words written since the end of the previous UTC day."""
        return self.words - self.yesterday
    
    @property
    def changed(self) -> bool:
        """Whether the current count differs from the previous one."""
        return self.words != self.previous


def build_snapshot(
    repository: WordCountRepository,
    path: str,
    current_words: int,
    now: Optional[datetime] = None
) -> DocumentSnapshot:
    """Build a snapshot for a document, recording the count if it changed.
    
    History is read before anything is written, so the returned snapshot
    never includes the entry appended by this call. Repeated identical
    counts are not recorded.
    
    Args:
        repository: Word-count ledger
        path: Document path relative to the ledger base directory
        current_words: Word count observed now
        now: Observation time; defaults to the current UTC instant
        
    Returns:
        DocumentSnapshot reflecting history before the append
        
    Raises:
        DuplicateEntry: If a count for this path was already written this second
        StoreError: On any other ledger failure
    """
    now = as_utc(now)
    
    previous = repository.previous_count(path)
    yesterday = repository.previous_day_count(path, now=now)
    
    if current_words != previous:
        repository.append(path, current_words, int(now.timestamp()))
    else:
        logger.debug("Word count for %s unchanged at %d", path, current_words)
    
    return DocumentSnapshot(
        path=path,
        words=current_words,
        previous=previous,
        yesterday=yesterday
    )
