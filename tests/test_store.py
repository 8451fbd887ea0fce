"""
Store tests: CRUD over moods, journal and preferences, and the statistical queries.
"""
from datetime import date, datetime, timedelta

import pytest

from safespace.models.journal import JournalEntry
from safespace.models.mood import MoodEntry, MoodKind
from safespace.services.store import Store
from safespace.utils.errors import StorageIOError, StorageUnavailable


def mood(kind=MoodKind.HAPPY, when=datetime(2024, 1, 1, 9, 0), **kwargs):
    return MoodEntry(mood=kind, date=when, **kwargs)


# =============================================================================
# Lifecycle
# =============================================================================

class TestLifecycle:
    """initialize / close"""

    def test_initialize_is_idempotent(self, store):
        conn = store.db.get_connection()
        store.initialize()
        assert store.db.get_connection() is conn

    def test_initialize_seeds_dark_mode(self, store):
        assert store.get_preference("darkMode") == "false"

    def test_seed_only_on_first_creation(self, db_file):
        with Store(db_file, default_dark_mode=False) as first:
            first.set_preference("darkMode", "true")

        with Store(db_file, default_dark_mode=False) as second:
            assert second.get_preference("darkMode") == "true"

    def test_seed_uses_default_dark_mode(self):
        with Store("sqlite:///:memory:", default_dark_mode=True) as s:
            assert s.get_preference("darkMode") == "true"

    def test_data_survives_reopen(self, db_file):
        with Store(db_file) as first:
            first.insert_mood(mood())
            first.insert_journal(JournalEntry(id="1", date=datetime(2024, 1, 1), content="hello"))

        with Store(db_file) as second:
            assert len(second.get_all_moods()) == 1
            assert [j.id for j in second.get_all_journals()] == ["1"]

    def test_operations_after_close_fail(self, store):
        store.close()
        with pytest.raises(StorageUnavailable):
            store.get_all_moods()
        with pytest.raises(StorageUnavailable):
            store.insert_mood(mood())

    def test_open_failure_is_unavailable(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")
        s = Store(f"sqlite:///{blocker / 'safespace.db'}")
        with pytest.raises(StorageUnavailable):
            s.initialize()


# =============================================================================
# Moods
# =============================================================================

class TestMoods:
    """insert_mood / get_all_moods / delete_moods_on_date"""

    def test_insert_assigns_increasing_ids(self, store):
        first = store.insert_mood(mood())
        second = store.insert_mood(mood())
        assert second > first

    def test_round_trip_keeps_every_field_but_id(self, store):
        entry = mood(MoodKind.STRESSED, datetime(2024, 3, 5, 22, 15, 30, 123456),
                     note="deadline", intensity=0.8)
        new_id = store.insert_mood(entry)

        stored = store.get_all_moods()
        assert len(stored) == 1
        assert stored[0].id == new_id
        assert stored[0].model_copy(update={"id": None}) == entry

    def test_missing_intensity_defaults(self, store):
        store.insert_mood(mood(intensity=None))
        assert store.get_all_moods()[0].intensity == 0.5

    def test_get_all_keeps_insertion_order(self, store):
        kinds = [MoodKind.SAD, MoodKind.HAPPY, MoodKind.CALM]
        for i, kind in enumerate(kinds):
            # later entries dated earlier
            store.insert_mood(mood(kind, datetime(2024, 1, 10 - i)))
        assert [m.mood for m in store.get_all_moods()] == kinds

    def test_same_day_entries_are_allowed(self, store):
        store.insert_mood(mood(when=datetime(2024, 1, 1, 8)))
        store.insert_mood(mood(when=datetime(2024, 1, 1, 20)))
        assert len(store.get_all_moods()) == 2

    def test_delete_on_date_ignores_time_of_day(self, store):
        store.insert_mood(mood(when=datetime(2024, 1, 1, 0, 0)))
        store.insert_mood(mood(when=datetime(2024, 1, 1, 23, 59, 59)))
        store.insert_mood(mood(MoodKind.SAD, datetime(2024, 1, 2, 0, 0)))

        deleted = store.delete_moods_on_date(datetime(2024, 1, 1, 15, 30))

        assert deleted == 2
        assert [m.mood for m in store.get_all_moods()] == [MoodKind.SAD]

    def test_delete_on_date_accepts_date(self, store):
        store.insert_mood(mood(when=datetime(2024, 1, 1, 9)))
        assert store.delete_moods_on_date(date(2024, 1, 1)) == 1

    def test_delete_on_empty_day(self, store):
        store.insert_mood(mood())
        assert store.delete_moods_on_date(date(2023, 12, 31)) == 0
        assert len(store.get_all_moods()) == 1


class TestLastNDays:
    """get_moods_in_last_n_days"""

    NOW = datetime(2024, 1, 8, 12, 0, 0)

    def test_exact_boundary_is_included(self, store):
        store.insert_mood(mood(when=self.NOW - timedelta(days=7)))
        assert len(store.get_moods_in_last_n_days(7, self.NOW)) == 1

    def test_one_second_past_boundary_is_excluded(self, store):
        store.insert_mood(mood(when=self.NOW - timedelta(days=7, seconds=1)))
        assert store.get_moods_in_last_n_days(7, self.NOW) == []

    def test_sub_second_precision(self, store):
        store.insert_mood(mood(when=self.NOW - timedelta(days=7, microseconds=1)))
        store.insert_mood(mood(MoodKind.CALM, self.NOW - timedelta(days=7) + timedelta(microseconds=1)))
        assert [m.mood for m in store.get_moods_in_last_n_days(7, self.NOW)] == [MoodKind.CALM]

    def test_no_upper_bound(self, store):
        store.insert_mood(mood(when=self.NOW + timedelta(days=1)))
        assert len(store.get_moods_in_last_n_days(7, self.NOW)) == 1

    def test_negative_window_rejected(self, store):
        with pytest.raises(ValueError):
            store.get_moods_in_last_n_days(-1, self.NOW)


class TestFrequency:
    """get_mood_frequency"""

    def test_empty_store_has_every_kind(self, store):
        assert store.get_mood_frequency() == {kind: 0 for kind in MoodKind}

    def test_counts_sum_to_total(self, store):
        kinds = [MoodKind.HAPPY] * 3 + [MoodKind.SAD, MoodKind.CALM]
        for kind in kinds:
            store.insert_mood(mood(kind))

        frequency = store.get_mood_frequency()

        assert sum(frequency.values()) == len(kinds)
        assert frequency[MoodKind.HAPPY] == 3
        assert frequency[MoodKind.NEUTRAL] == 0
        assert list(frequency) == list(MoodKind)


# =============================================================================
# Journal
# =============================================================================

class TestJournal:
    """insert_journal / get_all_journals / delete_journal"""

    def test_round_trip(self, store):
        entry = JournalEntry(id="42", date=datetime(2024, 1, 1, 10), content="hello",
                             mood=MoodKind.CALM)
        store.insert_journal(entry)
        assert store.get_all_journals() == [entry]

    def test_mood_is_optional(self, store):
        store.insert_journal(JournalEntry(id="1", date=datetime(2024, 1, 1), content="hi"))
        assert store.get_all_journals()[0].mood is None

    def test_duplicate_id_is_io_error(self, store):
        entry = JournalEntry(id="1", date=datetime(2024, 1, 1), content="hi")
        store.insert_journal(entry)
        with pytest.raises(StorageIOError):
            store.insert_journal(entry)
        assert len(store.get_all_journals()) == 1

    def test_delete_twice_is_noop(self, store):
        store.insert_journal(JournalEntry(id="1", date=datetime(2024, 1, 1), content="hi"))
        assert store.delete_journal("1") == 1
        assert store.delete_journal("1") == 0
        assert store.get_all_journals() == []

    def test_delete_unknown_id(self, store):
        assert store.delete_journal("missing") == 0


# =============================================================================
# Preferences and reset
# =============================================================================

class TestPreferences:

    def test_unknown_key_is_none(self, store):
        assert store.get_preference("language") is None

    def test_set_is_upsert(self, store):
        store.set_preference("language", "fr")
        store.set_preference("language", "en")
        assert store.get_preference("language") == "en"


class TestClearAll:

    def test_clears_moods_and_journal_but_keeps_preferences(self, store):
        store.insert_mood(mood())
        store.insert_journal(JournalEntry(id="1", date=datetime(2024, 1, 1), content="hi"))
        store.set_preference("darkMode", "true")

        store.clear_all()

        assert store.get_all_moods() == []
        assert store.get_all_journals() == []
        assert store.get_preference("darkMode") == "true"


class TestTransaction:

    def test_rolls_back_every_statement(self, store):
        store.insert_mood(mood(MoodKind.SAD))

        with pytest.raises(RuntimeError):
            with store.transaction():
                store.delete_moods_on_date(date(2024, 1, 1))
                store.insert_mood(mood(MoodKind.HAPPY))
                raise RuntimeError("boom")

        assert [m.mood for m in store.get_all_moods()] == [MoodKind.SAD]

    def test_commits_on_success(self, db_file):
        with Store(db_file) as s:
            with s.transaction():
                s.insert_mood(mood())
                s.insert_mood(mood())
        with Store(db_file) as s:
            assert len(s.get_all_moods()) == 2
