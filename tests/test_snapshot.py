"""
Unit tests for document snapshots.

Tests history lookup, conditional appends and error propagation.
"""

import os
import tempfile
import time
from datetime import datetime, timezone

import pytest

from wordcount_tracker.core.snapshot import DocumentSnapshot, build_snapshot
from wordcount_tracker.storage.db import get_connection
from wordcount_tracker.storage.errors import DuplicateEntry
from wordcount_tracker.storage.repository import WordCountRepository, start_of_utc_day
from wordcount_tracker.storage.schema import migrate

DOC = "docs/250.txt"
NOW = datetime(2024, 6, 1, 15, 30, tzinfo=timezone.utc)


class TestDocumentSnapshot:
    """Test derived snapshot values."""
    
    def test_today_is_delta_from_yesterday(self):
        """Today's progress is measured against the previous day."""
        snapshot = DocumentSnapshot(path=DOC, words=250, previous=150, yesterday=200)
        assert snapshot.today == 50
    
    def test_changed(self):
        """A snapshot changed when words differ from the previous count."""
        assert DocumentSnapshot(path=DOC, words=250, previous=150, yesterday=0).changed
        assert not DocumentSnapshot(path=DOC, words=150, previous=150, yesterday=0).changed
    
    def test_snapshot_is_immutable(self):
        """Snapshots cannot be modified."""
        snapshot = DocumentSnapshot(path=DOC, words=1, previous=0, yesterday=0)
        with pytest.raises(Exception):
            snapshot.words = 2


class TestBuildSnapshot:
    """Test building snapshots against a real ledger."""
    
    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.conn = get_connection(os.path.join(self.temp_dir.name, "test.db"))
        migrate(self.conn)
        self.repo = WordCountRepository(self.conn)
    
    def teardown_method(self):
        """Clean up test environment."""
        self.conn.close()
        self.temp_dir.cleanup()
    
    def _seed_history(self):
        for timestamp, words in enumerate([50, 100, 150, 200], start=1):
            self.repo.append(DOC, words, timestamp)
    
    def test_end_to_end(self):
        """The snapshot reflects history before the new entry is written."""
        self._seed_history()
        
        snapshot = build_snapshot(self.repo, DOC, 250, now=NOW)
        
        assert snapshot == DocumentSnapshot(path=DOC, words=250, previous=150, yesterday=200)
        assert self.repo.count_entries(DOC) == 5
        latest = self.repo.history(DOC)[0]
        assert latest.words == 250
        assert latest.timestamp == int(NOW.timestamp())
    
    def test_new_document(self):
        """A document without history is recorded with zero previous counts."""
        snapshot = build_snapshot(self.repo, DOC, 120, now=NOW)
        
        assert snapshot.previous == 0
        assert snapshot.yesterday == 0
        assert snapshot.today == 120
        assert self.repo.count_entries(DOC) == 1
    
    def test_unchanged_count_is_not_recorded(self):
        """When the previous count already equals the current one nothing is appended."""
        self.repo.append(DOC, 150, 1)
        self.repo.append(DOC, 200, 2)
        self.repo.append(DOC, 200, 3)
        
        snapshot = build_snapshot(self.repo, DOC, 200, now=NOW)
        
        assert snapshot.previous == 200
        assert not snapshot.changed
        assert self.repo.count_entries(DOC) == 3
    
    def test_repeated_observations_stop_growing_ledger(self):
        """Observing the same count repeatedly settles after one repeat.
        
        previous_count skips the latest entry, so the first repeat of a count
        is compared against the entry before it and is still recorded.
        """
        for second in range(5):
            build_snapshot(self.repo, DOC, 300, now=NOW.replace(second=second))
        
        assert self.repo.count_entries(DOC) == 2
    
    def test_duplicate_entry_propagates(self):
        """A same-second write aborts the snapshot."""
        self.repo.append(DOC, 10, 1)
        self.repo.append(DOC, 20, int(NOW.timestamp()))
        
        with pytest.raises(DuplicateEntry):
            build_snapshot(self.repo, DOC, 99, now=NOW)
        
        assert self.repo.count_entries(DOC) == 2
    
    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="requires time.tzset")
    def test_naive_now_is_recorded_as_utc(self, monkeypatch):
        """A naive observation time is UTC for both the lookup and the append."""
        monkeypatch.setenv("TZ", "America/New_York")
        time.tzset()
        try:
            now = datetime(2024, 6, 1, 23, 30)
            build_snapshot(self.repo, DOC, 10, now=now)
            
            timestamp = self.repo.history(DOC)[0].timestamp
            expected = int(datetime(2024, 6, 1, 23, 30, tzinfo=timezone.utc).timestamp())
            assert timestamp == expected
            assert 0 <= timestamp - start_of_utc_day(now) < 86400
        finally:
            monkeypatch.undo()
            time.tzset()
