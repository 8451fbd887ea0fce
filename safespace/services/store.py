"""
Store
Durable CRUD over mood entries, journal entries and preferences, plus the
statistical queries the statistics screen needs.
"""

from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import List, Dict, Any, Optional
from safespace.models.journal import JournalEntry
from safespace.models.mood import MoodEntry, MoodKind
from safespace.models.preference import DARK_MODE, encode_bool
from safespace.utils.config import settings
from safespace.utils.database import Database
from safespace.utils.logger import logger
from safespace.utils.timeutil import day_of, from_storage, local_naive, now_local, to_storage


class Store:
    """Local store backed by SQLite"""

    def __init__(self, db_url: str = None, default_dark_mode: bool = None):
        """
        Args:
            db_url: database URL or path; "sqlite:///:memory:" gives a throwaway store
            default_dark_mode: darkMode value seeded when the database is created
        """
        if default_dark_mode is None:
            default_dark_mode = settings.default_dark_mode
        self.db = Database(db_url, seed={DARK_MODE: encode_bool(default_dark_mode)})

    def initialize(self) -> Database:
        """
        Open the store. Safe to call more than once.

        Returns:
            the live database handle

        Raises:
            StorageUnavailable: the database could not be opened
        """
        self.db.open()
        return self.db

    def close(self):
        self.db.close()

    def __enter__(self) -> "Store":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @contextmanager
    def transaction(self):
        """Commit every store call made inside the block together, or none of them"""
        with self.db.transaction():
            yield self

    # moods

    def insert_mood(self, entry: MoodEntry) -> int:
        """
        Insert a mood entry. Several entries may share a day.

        Args:
            entry: the entry; its id is used when set, assigned otherwise

        Returns:
            id of the stored entry
        """
        return self.db.insert(
            "INSERT INTO moods (id, mood, date, note, intensity) VALUES (?, ?, ?, ?, ?)",
            (entry.id, entry.mood.value, to_storage(entry.date), entry.note, entry.intensity),
        )

    def get_all_moods(self) -> List[MoodEntry]:
        rows = self.db.fetch_all("SELECT * FROM moods ORDER BY id")
        return [self._format_mood(r) for r in rows]

    def get_moods_in_last_n_days(self, n: int, now: Optional[datetime] = None) -> List[MoodEntry]:
        """
        Mood entries recorded at or after `now - n days`.

        Args:
            n: window length in days
            now: end of the window, defaults to the current time

        Returns:
            matching entries in insertion order
        """
        if n < 0:
            raise ValueError(f"n must not be negative: {n}")
        cutoff = (local_naive(now) if now else now_local()) - timedelta(days=n)
        rows = self.db.fetch_all(
            "SELECT * FROM moods WHERE date >= ? ORDER BY id",
            (to_storage(cutoff),)
        )
        return [self._format_mood(r) for r in rows]

    def delete_moods_on_date(self, day) -> int:
        """
        Delete every mood entry recorded on the calendar day of `day`.

        Args:
            day: a date or datetime; the time of day is ignored

        Returns:
            number of deleted entries
        """
        deleted = self.db.execute(
            "DELETE FROM moods WHERE date LIKE ?",
            (f"{day_of(day).isoformat()}%",)
        )
        logger.info(f"Deleted {deleted} mood entries on {day_of(day)}")
        return deleted

    def get_mood_frequency(self) -> Dict[MoodKind, int]:
        """
        Count entries per mood.

        Returns:
            every MoodKind, in declaration order, mapped to its count (0 when absent)
        """
        rows = self.db.fetch_all("SELECT mood, COUNT(*) AS count FROM moods GROUP BY mood")
        frequency = {kind: 0 for kind in MoodKind}
        for row in rows:
            frequency[MoodKind(row["mood"])] = row["count"]
        return frequency

    # journal

    def insert_journal(self, entry: JournalEntry):
        self.db.execute(
            "INSERT INTO journal (id, date, content, mood) VALUES (?, ?, ?, ?)",
            (entry.id, to_storage(entry.date), entry.content,
             entry.mood.value if entry.mood else None)
        )

    def get_all_journals(self) -> List[JournalEntry]:
        rows = self.db.fetch_all("SELECT * FROM journal ORDER BY date, id")
        return [self._format_journal(r) for r in rows]

    def delete_journal(self, journal_id: str) -> int:
        """
        Delete a journal entry. An unknown id is not an error.

        Returns:
            number of deleted entries (0 or 1)
        """
        deleted = self.db.execute("DELETE FROM journal WHERE id = ?", (journal_id,))
        if deleted:
            logger.info(f"Journal entry deleted: {journal_id}")
        else:
            logger.warning(f"Journal entry not found: {journal_id}")
        return deleted

    # preferences

    def set_preference(self, key: str, value: str):
        self.db.execute(
            "INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)",
            (key, value)
        )

    def get_preference(self, key: str) -> Optional[str]:
        row = self.db.fetch_one("SELECT value FROM preferences WHERE key = ?", (key,))
        return row["value"] if row else None

    def clear_all(self):
        """Delete every mood and journal entry; preferences are kept"""
        with self.db.transaction():
            moods = self.db.execute("DELETE FROM moods")
            journals = self.db.execute("DELETE FROM journal")
        logger.info(f"Store cleared: {moods} mood entries, {journals} journal entries")

    def _format_mood(self, row: Dict[str, Any]) -> MoodEntry:
        return MoodEntry(
            id=row["id"],
            mood=MoodKind(row["mood"]),
            date=from_storage(row["date"]),
            note=row["note"],
            intensity=row["intensity"],
        )

    def _format_journal(self, row: Dict[str, Any]) -> JournalEntry:
        return JournalEntry(
            id=row["id"],
            date=from_storage(row["date"]),
            content=row["content"],
            mood=MoodKind(row["mood"]) if row["mood"] else None,
        )
