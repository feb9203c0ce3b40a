"""
Tests for the session log store backends, record parsing, and export/import.
"""

from __future__ import annotations

import json
import threading

import pytest

from flowstate.analytics.metrics import breaks_on, session_history
from flowstate.storage.errors import DataImportError
from flowstate.storage.log_store import (
    ACTIVITY_SESSIONS,
    BREAK_HISTORY,
    CATEGORIES,
    FOCUS_SESSIONS,
    TIMER_SETTINGS,
    USER_PROFILE,
    InMemoryLogStore,
    SQLiteLogStore,
)
from flowstate.storage.records import (
    parse_activity_sessions,
    parse_breaks,
    parse_focus_sessions,
)


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, tmp_path):
    if request.param == "memory":
        return InMemoryLogStore()
    return SQLiteLogStore(tmp_path / "store.db")


def _seed(store):
    store.put(TIMER_SETTINGS, {"focusDuration": 30, "shortBreakDuration": 5,
                               "longBreakDuration": 15, "sessionsUntilLongBreak": 4})
    store.append(FOCUS_SESSIONS, {"date": "2024-01-15T10:00:00+00:00", "duration": 30, "completed": True})
    store.append(FOCUS_SESSIONS, {"date": "2024-01-15T11:00:00+00:00", "duration": 30, "completed": False})
    store.append(ACTIVITY_SESSIONS, {"startTime": 1705312800000, "endTime": 1705314300000,
                                     "finalFocusScore": 92, "totalDistractions": 1})
    store.append(BREAK_HISTORY, {"timestamp": 1705315000000, "type": "Eye Rest"})
    store.put(USER_PROFILE, {"name": "Sam", "studyGoal": 180})


# ── Read / write ─────────────────────────────────────────────────────────────


class TestReadWrite:
    def test_missing_categories_are_empty(self, any_store):
        assert any_store.get(FOCUS_SESSIONS) == []
        assert any_store.get(USER_PROFILE) == {}

    def test_put_get_roundtrip(self, any_store):
        any_store.put(USER_PROFILE, {"name": "Ada"})
        assert any_store.get(USER_PROFILE) == {"name": "Ada"}

    def test_append_preserves_order(self, any_store):
        for i in range(3):
            assert any_store.append(BREAK_HISTORY, {"timestamp": i, "type": "x"}) == i + 1
        assert [b["timestamp"] for b in any_store.get(BREAK_HISTORY)] == [0, 1, 2]

    def test_corrupt_category_read_as_empty(self, any_store):
        any_store._write(FOCUS_SESSIONS, "{not json")
        assert any_store.get(FOCUS_SESSIONS) == []

    def test_wrong_type_read_as_empty(self, any_store):
        any_store.put(FOCUS_SESSIONS, {"oops": 1})
        assert any_store.get(FOCUS_SESSIONS) == []

    def test_append_over_corrupt_category_starts_fresh(self, any_store):
        any_store._write(FOCUS_SESSIONS, "garbage")
        any_store.append(FOCUS_SESSIONS, {"date": "2024-01-15T10:00:00", "duration": 25, "completed": True})
        assert len(any_store.get(FOCUS_SESSIONS)) == 1

    def test_clear_removes_everything(self, any_store):
        _seed(any_store)
        any_store.clear()
        assert any_store.categories() == []
        assert any_store.get(FOCUS_SESSIONS) == []

    def test_categories_lists_written(self, any_store):
        any_store.put(USER_PROFILE, {})
        any_store.append(BREAK_HISTORY, {"timestamp": 0, "type": "x"})
        assert any_store.categories() == [BREAK_HISTORY, USER_PROFILE]

    def test_sqlite_persists_across_instances(self, tmp_path):
        path = tmp_path / "persist.db"
        SQLiteLogStore(path).append(BREAK_HISTORY, {"timestamp": 1, "type": "x"})
        assert SQLiteLogStore(path).get(BREAK_HISTORY) == [{"timestamp": 1, "type": "x"}]


class TestConcurrentAppends:
    def test_threaded_appends_are_not_lost(self, any_store):
        def worker(n):
            for i in range(25):
                any_store.append(FOCUS_SESSIONS, {"worker": n, "i": i})
                any_store.append(ACTIVITY_SESSIONS, {"worker": n, "i": i})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(any_store.get(FOCUS_SESSIONS)) == 100
        assert len(any_store.get(ACTIVITY_SESSIONS)) == 100


# ── Export / import ──────────────────────────────────────────────────────────


class TestExportImport:
    def test_export_contains_all_categories(self, any_store):
        _seed(any_store)
        exported = any_store.export_data()
        assert set(exported) == set(CATEGORIES)
        assert len(exported[FOCUS_SESSIONS]) == 2

    def test_roundtrip_is_byte_identical(self, any_store, tmp_path):
        _seed(any_store)
        before = {c: any_store.get_raw(c) for c in CATEGORIES}
        document = any_store.export_json()

        fresh = SQLiteLogStore(tmp_path / "fresh.db")
        fresh.clear()
        fresh.import_data(document)
        after = {c: fresh.get_raw(c) for c in CATEGORIES}
        assert after == before

    def test_import_replaces_present_categories_only(self, any_store):
        _seed(any_store)
        any_store.import_data(json.dumps({BREAK_HISTORY: []}))
        assert any_store.get(BREAK_HISTORY) == []
        assert len(any_store.get(FOCUS_SESSIONS)) == 2

    def test_import_accepts_profile_alias(self, any_store):
        imported = any_store.import_data({"profile": {"name": "Lee"}})
        assert imported == [USER_PROFILE]
        assert any_store.get(USER_PROFILE) == {"name": "Lee"}

    def test_import_ignores_unknown_keys(self, any_store):
        imported = any_store.import_data({"blockerSettings": {"enabled": True}})
        assert imported == []
        assert any_store.categories() == []

    @pytest.mark.parametrize("payload", ["{broken", "[1, 2, 3]", "42", ""])
    def test_malformed_import_raises_and_changes_nothing(self, any_store, payload):
        _seed(any_store)
        before = any_store.export_json()
        with pytest.raises(DataImportError):
            any_store.import_data(payload)
        assert any_store.export_json() == before


# ── Record parsing ───────────────────────────────────────────────────────────


class TestRecordParsing:
    def test_skips_malformed_records(self):
        raw = [
            {"date": "2024-01-15T10:00:00Z", "duration": 25, "completed": True},
            {"date": "not a date", "duration": 25, "completed": True},
            {"duration": 25},
            "nonsense",
            {"date": "2024-01-15T12:00:00", "duration": "25", "completed": True},
        ]
        records = parse_focus_sessions(raw)
        assert len(records) == 1
        assert records[0].duration == 25

    def test_out_of_range_focus_dates_are_skipped(self):
        raw = [
            {"date": 1e20, "duration": 25, "completed": True},
            {"date": "0001-01-01T00:00:00+14:00", "duration": 25, "completed": True},
            {"date": 1_705_312_800_000, "duration": float("inf"), "completed": True},
            {"date": 1_705_312_800_000, "duration": 25, "completed": True},
        ]
        records = parse_focus_sessions(raw)
        assert len(records) == 1

    def test_non_finite_activity_values_are_skipped(self):
        raw = json.loads(
            '[{"startTime": 0, "endTime": 1000, "finalFocusScore": Infinity},'
            ' {"startTime": 1e20, "endTime": 1e20, "finalFocusScore": 80},'
            ' {"startTime": NaN, "endTime": 1000, "finalFocusScore": 80},'
            ' {"startTime": 0, "endTime": 60000, "finalFocusScore": 80}]'
        )
        records = parse_activity_sessions(raw)
        assert len(records) == 1
        assert records[0].final_focus_score == 80

    def test_out_of_range_break_timestamps_are_skipped(self):
        raw = [
            {"timestamp": 1e20, "type": "Eye Rest"},
            {"timestamp": float("-inf"), "type": "Eye Rest"},
            {"timestamp": 1_705_312_800_000, "type": "Stretch Break"},
        ]
        assert [b.type for b in parse_breaks(raw)] == ["Stretch Break"]

    def test_corrupt_records_do_not_break_stats(self, store):
        store.put(FOCUS_SESSIONS, [{"date": 1e20, "duration": 25, "completed": True}])
        store.put(ACTIVITY_SESSIONS, [{"startTime": 1e20, "endTime": 1e20, "finalFocusScore": 90}])
        store.put(BREAK_HISTORY, [{"timestamp": 1e20, "type": "Eye Rest"}])
        focus = parse_focus_sessions(store.get(FOCUS_SESSIONS))
        activity = parse_activity_sessions(store.get(ACTIVITY_SESSIONS))
        breaks = parse_breaks(store.get(BREAK_HISTORY))
        assert session_history(focus, activity, breaks) == []
        assert breaks_on(breaks) == 0
