"""Property-based tests for the record stores.

**Feature: tradeflow**
"""

import tempfile
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradeflow.db.store import (
    ACCOUNT_BALANCE,
    CHECKLIST_LOGS,
    JOURNAL_ENTRIES,
    LEGACY_TRADES,
    DataStore,
    MemoryStore,
)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        db_path = Path(tmpdir) / "test.db"
        yield DataStore(db_path)


json_records = st.lists(
    st.dictionaries(
        keys=st.text(min_size=1, max_size=10),
        values=st.one_of(
            st.none(),
            st.booleans(),
            st.integers(min_value=-10**6, max_value=10**6),
            st.text(max_size=20),
        ),
        max_size=5,
    ),
    max_size=10,
)


class TestDatabaseSchema:
    """
    **Feature: tradeflow, Property 25: Database Schema**
    **Validates: Requirements 10.4**

    *For any* fresh database, the collections table exists.
    """

    def test_schema(self, temp_db: DataStore):
        assert "collections" in temp_db.get_tables()

    def test_nested_directory_created(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            db_path = Path(tmpdir) / "a" / "b" / "test.db"
            DataStore(db_path)

            assert db_path.exists()


class TestCollectionRoundTrip:
    """
    **Feature: tradeflow, Property 26: Collection Save/Load Consistency**
    **Validates: Requirements 10.4**

    *For any* list of JSON records, saving then loading returns them in
    the same order, in both store implementations.
    """

    @given(records=json_records)
    @settings(max_examples=50)
    def test_sqlite_round_trip(self, records):
        with tempfile.TemporaryDirectory() as tmpdir:
            store = DataStore(Path(tmpdir) / "test.db")
            store.save(JOURNAL_ENTRIES, records)

            assert store.load(JOURNAL_ENTRIES) == records

    @given(records=json_records)
    @settings(max_examples=50)
    def test_memory_round_trip(self, records):
        store = MemoryStore()
        store.save(LEGACY_TRADES, records)

        assert store.load(LEGACY_TRADES) == records

    def test_save_overwrites(self, temp_db: DataStore):
        temp_db.save(JOURNAL_ENTRIES, [{"id": "1"}])
        temp_db.save(JOURNAL_ENTRIES, [{"id": "2"}])

        assert temp_db.load(JOURNAL_ENTRIES) == [{"id": "2"}]


class TestDegradedData:
    """
    **Feature: tradeflow, Property 27: Unreadable Data Degrades To Empty**
    **Validates: Requirements 10.4**
    """

    def test_missing_collection(self, temp_db: DataStore):
        assert temp_db.load(JOURNAL_ENTRIES) == []
        assert temp_db.load_object("missing") is None

    def test_unparseable_collection(self):
        store = MemoryStore({JOURNAL_ENTRIES: "{not json"})

        assert store.load(JOURNAL_ENTRIES) == []

    def test_non_list_collection(self):
        store = MemoryStore({JOURNAL_ENTRIES: {"id": "1"}})

        assert store.load(JOURNAL_ENTRIES) == []

    def test_delete(self, temp_db: DataStore):
        temp_db.save_object("pending", {"a": 1})
        temp_db.delete("pending")

        assert temp_db.load_object("pending") is None


class TestPreferences:
    """
    **Feature: tradeflow, Property 28: Scalar Preferences**
    **Validates: Requirements 10.4**
    """

    def test_value_round_trip(self, temp_db: DataStore):
        assert temp_db.get_value(ACCOUNT_BALANCE) is None

        temp_db.set_value(ACCOUNT_BALANCE, "10000")

        assert temp_db.get_value(ACCOUNT_BALANCE) == "10000"

    def test_stats(self, temp_db: DataStore):
        temp_db.save(JOURNAL_ENTRIES, [{"id": "1"}, {"id": "2"}])
        temp_db.save(CHECKLIST_LOGS, [{"id": "1"}])

        stats = temp_db.get_stats()

        assert stats[JOURNAL_ENTRIES] == 2
        assert stats[LEGACY_TRADES] == 0
        assert stats[CHECKLIST_LOGS] == 1
