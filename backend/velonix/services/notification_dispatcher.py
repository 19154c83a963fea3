"""
Notification Dispatcher - fire-and-forget delivery of side effects.

Request handlers call `enqueue()` and return immediately; a single background
worker started in the app lifespan awaits the queued jobs one at a time.
Jobs are never retried: a failure is logged and the job discarded. When the
queue is full new jobs are dropped with a warning instead of blocking the
request.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from velonix.core.logging_config import logger

JobFactory = Callable[[], Awaitable[object]]


@dataclass
class NotificationJob:
    name: str
    factory: JobFactory


class NotificationDispatcher:
    """Bounded queue of notification jobs consumed by one worker task"""

    def __init__(self, maxsize: int = 100):
        self.maxsize = maxsize
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._task: Optional[asyncio.Task] = None
        self.running = False
        self.sent = 0
        self.failed = 0
        self.dropped = 0

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def enqueue(self, name: str, factory: JobFactory) -> bool:
        """
        Queue a job without waiting for it.

        Args:
            name: Label used in logs
            factory: Zero-argument callable returning the awaitable to run

        Returns:
            False if the job was dropped because the queue is full
        """
        try:
            self._queue.put_nowait(NotificationJob(name, factory))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(f"[Notifications] Queue full ({self.maxsize}), dropping job: {name}")
            return False
        logger.debug(f"[Notifications] Queued {name} (pending: {self.pending})")
        return True

    async def _run_job(self, job: NotificationJob) -> None:
        try:
            result = await job.factory()
        except Exception as e:
            self.failed += 1
            logger.error(f"[Notifications] Job {job.name} failed: {type(e).__name__}: {e}")
            return

        if result is False:
            self.failed += 1
            logger.warning(f"[Notifications] Job {job.name} reported failure, not retrying")
        else:
            self.sent += 1
            logger.info(f"[Notifications] Job {job.name} completed")

    async def _worker_loop(self) -> None:
        while self.running:
            job = await self._queue.get()
            try:
                await self._run_job(job)
            finally:
                self._queue.task_done()

    async def drain(self) -> int:
        """Run every queued job inline; returns how many were processed"""
        processed = 0
        while not self._queue.empty():
            job = self._queue.get_nowait()
            try:
                await self._run_job(job)
            finally:
                self._queue.task_done()
            processed += 1
        return processed

    async def start(self) -> None:
        """Start the background worker"""
        if self.running:
            logger.warning("[Notifications] Dispatcher already running")
            return

        self.running = True
        self._task = asyncio.create_task(self._worker_loop())
        logger.info(f"[Notifications] Dispatcher started (queue size: {self.maxsize})")

    async def stop(self) -> None:
        """Stop the worker; jobs still queued are discarded"""
        self.running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        if self.pending:
            logger.warning(f"[Notifications] Discarding {self.pending} undelivered job(s) on shutdown")
        logger.info(
            f"[Notifications] Dispatcher stopped - sent: {self.sent}, failed: {self.failed}, dropped: {self.dropped}"
        )
