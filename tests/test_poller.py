"""Tests for the poll scheduler."""
from __future__ import annotations

import asyncio

import pytest

from event_agenda.scheduling import PollScheduler

# 60 ms expressed in minutes
FAST_INTERVAL = 0.001


class TestPollScheduler:

    @pytest.mark.asyncio
    async def test_disabled_by_default(self):
        poller = PollScheduler(lambda: asyncio.sleep(0))
        assert not poller.enabled
        assert not poller.is_running

    @pytest.mark.asyncio
    async def test_ticks_while_enabled(self):
        calls = []

        async def callback():
            calls.append(1)

        poller = PollScheduler(callback)
        poller.configure(True, FAST_INTERVAL)
        await asyncio.sleep(0.2)
        await poller.stop()

        assert len(calls) >= 2
        assert not poller.is_running

    @pytest.mark.asyncio
    async def test_zero_interval_disables(self):
        poller = PollScheduler(lambda: asyncio.sleep(0))
        poller.configure(True, 0)
        assert not poller.is_running
        assert poller.enabled

    @pytest.mark.asyncio
    async def test_reconfigure_replaces_schedule(self):
        calls = []

        async def callback():
            calls.append(1)

        poller = PollScheduler(callback)
        poller.configure(True, FAST_INTERVAL)
        poller.configure(False, FAST_INTERVAL)
        await asyncio.sleep(0.15)

        assert calls == []
        assert not poller.is_running
        await poller.stop()

    @pytest.mark.asyncio
    async def test_overlapping_tick_is_skipped(self):
        release = asyncio.Event()
        started = []

        async def slow():
            started.append(1)
            await release.wait()

        poller = PollScheduler(slow)
        poller.configure(True, FAST_INTERVAL)
        await asyncio.sleep(0.25)

        assert len(started) == 1
        assert poller.skipped_ticks >= 1

        release.set()
        await poller.stop()

    @pytest.mark.asyncio
    async def test_failing_callback_keeps_polling(self):
        calls = []

        async def failing():
            calls.append(1)
            raise RuntimeError("discovery down")

        poller = PollScheduler(failing)
        poller.configure(True, FAST_INTERVAL)
        await asyncio.sleep(0.2)
        await poller.stop()

        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight(self):
        async def forever():
            await asyncio.Event().wait()

        poller = PollScheduler(forever)
        poller.configure(True, FAST_INTERVAL)
        await asyncio.sleep(0.1)
        await poller.stop()

        assert not poller.is_running
        assert not poller.enabled
