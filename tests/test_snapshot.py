"""Tests for agenda import/export."""
from __future__ import annotations

import json
from datetime import timedelta

import pytest

from event_agenda.agenda import AgendaStore
from event_agenda.events import CandidateEvent, EventStatus
from event_agenda.transfer import (
    IMPORT_ERROR_MESSAGE,
    SnapshotImportError,
    export_snapshot,
    import_into,
    parse_snapshot,
)


@pytest.fixture
def populated_store():
    store = AgendaStore()
    store.save(CandidateEvent(title="Beach Party", date_text="12/07/2025", location="Grace Bay"))
    store.save(CandidateEvent(title="Fish Fry", date_text="17/07/2025", category="food"))
    store.update("Beach Party", "status", "confirmed")
    store.update("Beach Party", "reminder_lead_time", 86_400_000)
    store.add_contact("Beach Party", "Ana")
    store.promote_to_history("Fish Fry")
    return store


class TestExport:

    def test_export_structure(self, populated_store):
        data = json.loads(export_snapshot(populated_store))

        assert list(data) == ["saved", "history"]
        assert data["saved"][0]["title"] == "Beach Party"
        assert data["saved"][0]["status"] == "confirmed"
        assert data["saved"][0]["reminder_ms"] == 86_400_000
        assert data["history"][0]["status"] == "attended"

    def test_export_empty(self):
        assert json.loads(export_snapshot(AgendaStore())) == {"saved": [], "history": []}

    def test_export_then_import_into_empty_store(self, populated_store):
        fresh = AgendaStore()

        assert import_into(fresh, export_snapshot(populated_store)) is None

        event = fresh.find("Beach Party")
        assert event.status is EventStatus.CONFIRMED
        assert event.contacts == ["Ana"]
        assert event.reminder_lead_time == timedelta(days=1)
        assert [e.title for e in fresh.history] == ["Fish Fry"]


class TestImport:

    def test_import_appends_without_dedup(self, populated_store):
        text = export_snapshot(populated_store)
        import_into(populated_store, text)

        assert [e.title for e in populated_store.saved] == ["Beach Party", "Beach Party"]
        assert len(populated_store.history) == 2

    def test_legacy_export(self):
        text = json.dumps({
            "savedEvents": [
                {"titulo": "Junkanoo", "fecha": "26/12/2025", "estado": "tal vez", "contactos": []}
            ],
            "historyEvents": [{"titulo": "Regatta", "estado": "asistido"}],
        })
        store = AgendaStore()

        assert import_into(store, text) is None
        assert store.find("Junkanoo").status is EventStatus.MAYBE
        assert store.history[0].title == "Regatta"

    def test_missing_collections_are_empty(self):
        snapshot = parse_snapshot("{}")
        assert snapshot.saved == []
        assert snapshot.history == []

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[]",
            '{"saved": {"title": "x"}}',
            '{"saved": ["x"]}',
            '{"saved": [], "history": 3}',
        ],
    )
    def test_malformed_input_leaves_store_untouched(self, populated_store, text):
        before_saved = populated_store.saved
        before_history = populated_store.history

        error = import_into(populated_store, text)

        assert error == IMPORT_ERROR_MESSAGE
        assert populated_store.saved == before_saved
        assert populated_store.history == before_history

    @pytest.mark.parametrize("raw", ["1e400", "-1e400", "100000000000000000000"])
    def test_out_of_range_reminder_is_dropped(self, raw):
        text = (
            '{"saved": [{"title": "A", "date_text": "12/07/2025", "reminder_ms": '
            + raw
            + '}], "history": [{"title": "B", "reminder_ms": ' + raw + '}]}'
        )
        store = AgendaStore()

        assert import_into(store, text) is None
        assert store.find("A").reminder_lead_time is None
        assert store.history[0].reminder_lead_time is None

    def test_parse_error_carries_detail(self):
        with pytest.raises(SnapshotImportError) as excinfo:
            parse_snapshot('{"saved": 1}')
        assert "saved" in excinfo.value.detail
        assert str(excinfo.value) == IMPORT_ERROR_MESSAGE
