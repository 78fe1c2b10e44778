"""Tests for the reminder scheduler."""
from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from event_agenda.agenda import AgendaStore
from event_agenda.events import CandidateEvent, SavedEvent
from event_agenda.scheduling import ReminderScheduler, compute_fire_time, format_reminder

GRAND_TURK = ZoneInfo("America/Grand_Turk")
NOW = datetime(2025, 7, 1, 9, 0, tzinfo=GRAND_TURK)
ONE_DAY_MS = 86_400_000


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def store():
    return AgendaStore()


@pytest.fixture
def scheduler(store, loop):
    messages = []
    scheduler = ReminderScheduler(
        store, messages.append, tz=GRAND_TURK, clock=lambda: NOW, loop=loop
    )
    scheduler.messages = messages
    scheduler.attach()
    yield scheduler
    scheduler.close()


def _save(store: AgendaStore, title: str = "Beach Party", date_text: str = "12/07/2025") -> None:
    store.save(CandidateEvent(title=title, date_text=date_text, location="Grace Bay"))


class TestComputeFireTime:

    def test_one_day_before_local_midnight(self):
        event = SavedEvent(title="Beach Party", date_text="12/07/2025",
                           reminder_lead_time=timedelta(days=1))
        assert compute_fire_time(event, GRAND_TURK) == datetime(2025, 7, 11, tzinfo=GRAND_TURK)

    def test_no_reminder(self):
        assert compute_fire_time(SavedEvent(title="x", date_text="12/07/2025"), GRAND_TURK) is None

    def test_before_earliest_datetime(self):
        event = SavedEvent(title="Ancient", date_text="01/01/0001",
                           reminder_lead_time=timedelta(days=1))
        assert compute_fire_time(event, GRAND_TURK) is None

    def test_unparsable_date(self):
        event = SavedEvent(title="x", date_text="soon", reminder_lead_time=timedelta(hours=1))
        assert compute_fire_time(event, GRAND_TURK) is None


class TestArming:

    def test_setting_reminder_arms_timer(self, store, scheduler):
        _save(store)
        assert scheduler.armed == []

        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)

        assert scheduler.armed_titles == ["Beach Party"]
        assert scheduler.armed[0].fire_at == datetime(2025, 7, 11, tzinfo=GRAND_TURK)
        assert scheduler.armed[0].to_api_dict()["fireAt"].startswith("2025-07-11T00:00:00")

    def test_past_due_not_armed(self, store, scheduler):
        _save(store, date_text="01/07/2025")
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)
        assert scheduler.armed == []

    def test_unparsable_date_not_armed(self, store, scheduler):
        _save(store, date_text="Every Saturday")
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)
        assert scheduler.armed == []

    def test_promote_disarms(self, store, scheduler):
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)
        handle = scheduler.armed[0].handle

        store.promote_to_history("Beach Party")

        assert scheduler.armed == []
        assert handle.cancelled()
        assert store.history[0].status.value == "attended"

    def test_clearing_reminder_disarms(self, store, scheduler):
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)
        store.update("Beach Party", "reminder_lead_time", None)
        assert scheduler.armed == []

    def test_recompute_rearms_with_new_lead_time(self, store, scheduler):
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)
        store.update("Beach Party", "reminder_lead_time", 2 * ONE_DAY_MS)

        assert len(scheduler.armed) == 1
        assert scheduler.armed[0].fire_at == datetime(2025, 7, 10, tzinfo=GRAND_TURK)

    def test_close_cancels_everything(self, store, scheduler):
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)
        handle = scheduler.armed[0].handle

        scheduler.close()
        scheduler.close()

        assert handle.cancelled()
        assert scheduler.armed == []
        store.update("Beach Party", "reminder_lead_time", 2 * ONE_DAY_MS)
        assert scheduler.armed == []

    def test_no_loop_arms_nothing(self, store):
        scheduler = ReminderScheduler(store, tz=GRAND_TURK, clock=lambda: NOW)
        scheduler.attach()
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)
        assert scheduler.armed == []

    def test_out_of_range_fire_time_does_not_block_others(self, store, scheduler):
        _save(store, title="Ancient", date_text="01/01/0001")
        _save(store)
        store.update("Ancient", "reminder_lead_time", ONE_DAY_MS)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)

        assert scheduler.armed_titles == ["Beach Party"]


class TestFiring:

    def test_stale_fire_is_ignored(self, store, scheduler):
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)
        fire_at = scheduler.armed[0].fire_at
        store.remove("Beach Party")

        scheduler._fire("Beach Party", fire_at)

        assert scheduler.messages == []

    def test_fire_notifies(self, store, scheduler):
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)

        scheduler._fire("Beach Party", scheduler.armed[0].fire_at)

        assert scheduler.messages == [format_reminder("Beach Party", "12/07/2025")]
        assert scheduler.armed == []

    @pytest.mark.asyncio
    async def test_timer_fires_on_running_loop(self):
        store = AgendaStore()
        fire_at = datetime(2025, 7, 11, tzinfo=GRAND_TURK)
        messages = []
        scheduler = ReminderScheduler(
            store,
            messages.append,
            tz=GRAND_TURK,
            clock=lambda: fire_at - timedelta(milliseconds=20),
        )
        scheduler.attach()
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)

        await asyncio.sleep(0.2)

        assert messages == ['Reminder: the event "Beach Party" is on 12/07/2025']
        assert scheduler.armed == []
        scheduler.close()

    @pytest.mark.asyncio
    async def test_notifier_failure_is_contained(self):
        store = AgendaStore()
        fire_at = datetime(2025, 7, 11, tzinfo=GRAND_TURK)

        def broken(message):
            raise RuntimeError("notification channel down")

        scheduler = ReminderScheduler(
            store, broken, tz=GRAND_TURK, clock=lambda: fire_at - timedelta(milliseconds=10)
        )
        scheduler.attach()
        _save(store)
        store.update("Beach Party", "reminder_lead_time", ONE_DAY_MS)

        await asyncio.sleep(0.1)

        assert scheduler.armed == []
        scheduler.close()
