"""
Document scanning.

Walks the requested paths, counts each document and builds its snapshot.
One failing document never stops the others from being reported.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from wordcount_tracker.config.loader import TrackerConfig
from wordcount_tracker.storage.errors import DuplicateEntry, StoreError
from wordcount_tracker.storage.repository import WordCountRepository
from .hooks import run_update_hook
from .snapshot import DocumentSnapshot, build_snapshot
from .word_counter import count_words

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Snapshots of all counted documents plus per-document failures."""
    snapshots: List[DocumentSnapshot] = field(default_factory=list)
    errors: List[Tuple[str, str]] = field(default_factory=list)


def ledger_path(path: str, base: str) -> str:
    """Return the ledger key for a file: its slash path relative to base.
    
    The same document maps to the same key whatever the working directory.
    """
    return Path(os.path.relpath(os.path.abspath(path), base)).as_posix()


def iter_files(
    path: str,
    onerror: Optional[Callable[[OSError], None]] = None
) -> Iterator[str]:
    """Yield a file path, or every file below a directory in sorted order.
    
    Directories that cannot be listed are passed to onerror and skipped.
    """
    if not os.path.isdir(path):
        yield path
        return
    for root, dirs, files in os.walk(path, onerror=onerror):
        dirs.sort()
        for name in sorted(files):
            yield os.path.join(root, name)


def _is_selected(path: str, config: TrackerConfig) -> bool:
    regex = config.file_regex
    if regex is None:
        return True
    matched = regex.search(Path(path).as_posix()) is not None
    return matched if config.file_pattern_is_whitelist else not matched


def scan_documents(
    paths: Iterable[str],
    config: TrackerConfig,
    repository: WordCountRepository,
    database_path: str,
    now: Optional[datetime] = None
) -> ScanResult:
    """Count every selected document and build its snapshot.
    
    Ledger keys are relative to the directory holding the database. The
    database file itself is never counted. When a document's count changes
    the configured update hook is run.
    
    Args:
        paths: Files or directories to count
        config: Tracker configuration
        repository: Word-count ledger
        database_path: Path of the ledger database
        now: Observation time; defaults to the current UTC instant
        
    Returns:
        ScanResult with one snapshot per successfully processed document
    """
    result = ScanResult()
    database_path = os.path.abspath(database_path)
    base = os.path.dirname(database_path)
    annotation_regex = config.annotation_regex
    
    def _unreadable_directory(error: OSError) -> None:
        logger.warning("Skipping %s: %s", error.filename, error.strerror or error)
        result.errors.append((str(error.filename), str(error)))
    
    for path in paths:
        if not os.path.exists(path):
            logger.warning("Skipping %s: no such file or directory", path)
            result.errors.append((path, "no such file or directory"))
            continue
        
        for file_path in iter_files(path, onerror=_unreadable_directory):
            if not _is_selected(file_path, config):
                continue
            if os.path.abspath(file_path) == database_path:
                continue
            
            key = ledger_path(file_path, base)
            try:
                words = count_words(file_path, annotation_regex)
                snapshot = build_snapshot(repository, key, words, now=now)
            except (OSError, DuplicateEntry, StoreError) as e:
                logger.warning("Skipping %s: %s", key, e)
                result.errors.append((key, str(e)))
                continue
            
            if snapshot.changed:
                run_update_hook(config.update_hook, key, snapshot.words, snapshot.previous)
            result.snapshots.append(snapshot)
    
    return result
