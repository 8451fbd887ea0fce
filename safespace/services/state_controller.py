"""
State controller
In-memory snapshot of moods, journal and preferences for the UI. Every
mutation goes through the store, the cache is reloaded from the store
afterwards and subscribers are notified.
"""

import asyncio
from datetime import datetime
from typing import Callable, Dict, List, Optional
from safespace.models.journal import JournalEntry
from safespace.models.mood import MoodEntry, MoodKind
from safespace.models.preference import DARK_MODE, decode_bool, encode_bool
from safespace.services.affirmations import pick_affirmation
from safespace.services.store import Store
from safespace.utils.errors import StorageError
from safespace.utils.logger import logger
from safespace.utils.timeutil import now_local

Listener = Callable[[], None]

LAST_WEEK_DAYS = 7


class StateController:
    """Observable application state"""

    def __init__(self, store: Store, clock: Callable[[], datetime] = now_local):
        """
        Args:
            store: an initialized store
            clock: returns the current time; decides what "today" is
        """
        self.store = store
        self._clock = clock
        self._listeners: List[Listener] = []

        self._mood_entries: List[MoodEntry] = []
        self._journal_entries: List[JournalEntry] = []
        self._dark_mode = False
        self.loaded = False
        self._lock: Optional[asyncio.Lock] = None

    @property
    def mood_entries(self) -> List[MoodEntry]:
        return list(self._mood_entries)

    @property
    def journal_entries(self) -> List[JournalEntry]:
        return list(self._journal_entries)

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    # subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called after every successful mutation.

        Args:
            listener: zero-argument callable; registering it twice has no effect

        Returns:
            a callable that unsubscribes the listener
        """
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self):
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception(f"State listener {listener!r} failed")

    async def _call(self, fn, *args):
        # store calls block on disk I/O and share one connection: one at a time
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            return await asyncio.to_thread(fn, *args)

    # mutations

    async def load_all(self) -> bool:
        """Read moods, journal and the darkMode preference from the store"""
        try:
            moods = await self._call(self.store.get_all_moods)
            journals = await self._call(self.store.get_all_journals)
            dark_mode = await self._call(self.store.get_preference, DARK_MODE)
        except StorageError as e:
            logger.error(f"Failed to load data: {e}")
            return False

        self._mood_entries = moods
        self._journal_entries = journals
        self._dark_mode = decode_bool(dark_mode)
        self.loaded = True
        self._notify()
        return True

    async def add_mood(self, entry: MoodEntry) -> bool:
        try:
            await self._call(self.store.insert_mood, entry)
            self._mood_entries = await self._call(self.store.get_all_moods)
        except StorageError as e:
            logger.error(f"Failed to add mood entry: {e}")
            return False

        self._notify()
        return True

    async def update_todays_mood(self, entry: MoodEntry) -> bool:
        """
        Replace today's mood with `entry`.

        The delete and the insert run in one transaction, so a failure leaves
        the previous mood in place.
        """
        today = self._clock()
        try:
            await self._call(self._replace_moods_on, today, entry)
            self._mood_entries = await self._call(self.store.get_all_moods)
        except StorageError as e:
            logger.error(f"Failed to update today's mood: {e}")
            return False

        self._notify()
        return True

    def _replace_moods_on(self, day: datetime, entry: MoodEntry):
        with self.store.transaction():
            self.store.delete_moods_on_date(day)
            self.store.insert_mood(entry)

    async def add_journal(self, entry: JournalEntry) -> bool:
        try:
            await self._call(self.store.insert_journal, entry)
            self._journal_entries = await self._call(self.store.get_all_journals)
        except StorageError as e:
            logger.error(f"Failed to add journal entry: {e}")
            return False

        self._notify()
        return True

    async def save_journal(self, content: str) -> Optional[JournalEntry]:
        """
        Save a new journal entry tagged with today's mood.

        Args:
            content: entry text; blank text is ignored

        Returns:
            the saved entry, or None when nothing was saved
        """
        content = content.strip()
        if not content:
            return None

        todays = self.todays_mood()
        entry = JournalEntry.compose(
            content,
            mood=todays.mood if todays else None,
            now=self._clock(),
        )
        if await self.add_journal(entry):
            return entry
        return None

    async def delete_journal(self, journal_id: str) -> bool:
        try:
            await self._call(self.store.delete_journal, journal_id)
            self._journal_entries = await self._call(self.store.get_all_journals)
        except StorageError as e:
            logger.error(f"Failed to delete journal entry {journal_id}: {e}")
            return False

        self._notify()
        return True

    async def toggle_dark_mode(self) -> bool:
        """
        Flip the dark mode flag and persist it.

        The cached flag is flipped before the write; when the write fails it
        stays flipped and listeners are not notified.
        """
        self._dark_mode = not self._dark_mode
        try:
            await self._call(self.store.set_preference, DARK_MODE, encode_bool(self._dark_mode))
        except StorageError as e:
            logger.error(f"Failed to save dark mode: {e}")
            return False

        self._notify()
        return True

    async def clear_all(self) -> bool:
        """Delete every mood and journal entry"""
        try:
            await self._call(self.store.clear_all)
        except StorageError as e:
            logger.error(f"Failed to clear data: {e}")
            return False

        self._mood_entries = []
        self._journal_entries = []
        self._notify()
        return True

    # derived state

    def todays_mood(self) -> Optional[MoodEntry]:
        today = self._clock()
        for entry in self._mood_entries:
            if entry.is_on(today):
                return entry
        return None

    def check_in_days(self) -> int:
        return len(self._mood_entries)

    async def mood_frequency(self) -> Dict[MoodKind, int]:
        return await self._call(self.store.get_mood_frequency)

    async def most_frequent_mood(self) -> Optional[MoodKind]:
        """
        Mood with the highest count; ties go to the kind declared first in
        MoodKind. None when there are no entries.
        """
        frequency = await self.mood_frequency()
        most_frequent = None
        max_count = 0
        for kind in MoodKind:
            if frequency.get(kind, 0) > max_count:
                max_count = frequency[kind]
                most_frequent = kind
        return most_frequent

    async def last_week_entries(self) -> List[MoodEntry]:
        return await self._call(self.store.get_moods_in_last_n_days, LAST_WEEK_DAYS, self._clock())

    def random_affirmation(self) -> str:
        return pick_affirmation(self._clock())
