"""
Unit Tests for NotificationDispatcher
"""
import asyncio
import pytest
from unittest.mock import AsyncMock

from velonix.services.notification_dispatcher import NotificationDispatcher


class TestEnqueue:

    async def test_enqueue_does_not_run_job(self):
        dispatcher = NotificationDispatcher(maxsize=5)
        job = AsyncMock(return_value=True)

        assert dispatcher.enqueue("job", job) is True

        job.assert_not_called()
        assert dispatcher.pending == 1

    async def test_full_queue_drops(self):
        dispatcher = NotificationDispatcher(maxsize=2)
        job = AsyncMock(return_value=True)

        assert dispatcher.enqueue("a", job)
        assert dispatcher.enqueue("b", job)
        assert dispatcher.enqueue("c", job) is False

        assert dispatcher.dropped == 1
        assert dispatcher.pending == 2


class TestDrain:

    async def test_runs_jobs_in_order(self):
        dispatcher = NotificationDispatcher()
        order = []

        async def record(name):
            order.append(name)
            return True

        dispatcher.enqueue("first", lambda: record("first"))
        dispatcher.enqueue("second", lambda: record("second"))

        assert await dispatcher.drain() == 2
        assert order == ["first", "second"]
        assert dispatcher.sent == 2

    async def test_failures_not_retried(self):
        dispatcher = NotificationDispatcher()
        failing = AsyncMock(side_effect=ConnectionError("smtp unreachable"))
        refused = AsyncMock(return_value=False)
        ok = AsyncMock(return_value=True)

        dispatcher.enqueue("failing", failing)
        dispatcher.enqueue("refused", refused)
        dispatcher.enqueue("ok", ok)
        await dispatcher.drain()

        assert failing.await_count == 1
        assert refused.await_count == 1
        ok.assert_awaited_once()
        assert dispatcher.failed == 2
        assert dispatcher.sent == 1
        assert dispatcher.pending == 0


class TestWorker:

    async def test_worker_processes_queue(self):
        dispatcher = NotificationDispatcher()
        done = asyncio.Event()

        async def job():
            done.set()
            return True

        await dispatcher.start()
        try:
            dispatcher.enqueue("job", job)
            await asyncio.wait_for(done.wait(), timeout=2)
        finally:
            await dispatcher.stop()

        assert dispatcher.running is False

    async def test_worker_survives_failing_job(self):
        dispatcher = NotificationDispatcher()
        done = asyncio.Event()

        async def boom():
            raise RuntimeError("boom")

        async def job():
            done.set()
            return True

        await dispatcher.start()
        try:
            dispatcher.enqueue("boom", boom)
            dispatcher.enqueue("job", job)
            await asyncio.wait_for(done.wait(), timeout=2)
        finally:
            await dispatcher.stop()

        assert dispatcher.failed == 1

    async def test_start_twice_keeps_one_worker(self):
        dispatcher = NotificationDispatcher()
        await dispatcher.start()
        task = dispatcher._task
        try:
            await dispatcher.start()
            assert dispatcher._task is task
        finally:
            await dispatcher.stop()

    async def test_stop_without_start(self):
        dispatcher = NotificationDispatcher()
        await dispatcher.stop()
        assert dispatcher.running is False
