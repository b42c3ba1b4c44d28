"""
Offloader Backends
==================
Interchangeable worker contexts for blocking Argon2 work.

- ThreadPoolOffloader: dedicated thread pool shared by all calls
- AsyncioOffloader: the running loop's default executor
- AnyioOffloader: anyio's worker-thread facility
"""

import asyncio
import concurrent.futures
import os
import threading
from typing import Callable, Optional, Set

import structlog
from anyio import CapacityLimiter, to_thread

from ..errors import JoinError, map_external_error
from .base import Offloader
from .channel import OneShot

logger = structlog.get_logger(__name__)


def _close_on_abnormal_end(channel: OneShot, backend: str, future) -> None:
    """
    Done-callback: wake the receiver if the job never produced a result.

    Cancellation (the job was dropped before running) and broken executors
    map to ``CommunicationError`` through the error table; any other
    exception the backend reports becomes a ``JoinError``.
    """
    try:
        exc = future.exception()
    except (concurrent.futures.CancelledError, asyncio.CancelledError) as cancelled:
        exc = cancelled
    if exc is None:
        return

    if channel.close(map_external_error(exc, fallback=JoinError)):
        logger.warning("offload_job_ended_abnormally", backend=backend, error=repr(exc))


class ThreadPoolOffloader(Offloader):
    """
    Offloads to a dedicated ``ThreadPoolExecutor``.

    The pool is created on first use and shared by every call. Its size
    is the only concurrency bound; there is no queue limit.

    Args:
        max_workers: Pool size. Defaults to ``AIOARGON2_MAX_WORKERS`` or the
            ``ThreadPoolExecutor`` default.
    """

    name = "thread_pool"

    def __init__(self, max_workers: Optional[int] = None):
        if max_workers is None and os.getenv("AIOARGON2_MAX_WORKERS"):
            max_workers = int(os.environ["AIOARGON2_MAX_WORKERS"])
        self.max_workers = max_workers
        self._executor: Optional[concurrent.futures.ThreadPoolExecutor] = None
        self._lock = threading.Lock()

    @property
    def executor(self) -> concurrent.futures.ThreadPoolExecutor:
        if self._executor is None:
            with self._lock:
                if self._executor is None:
                    self._executor = concurrent.futures.ThreadPoolExecutor(
                        max_workers=self.max_workers,
                        thread_name_prefix="aioargon2",
                    )
                    logger.debug("thread_pool_started", max_workers=self.max_workers)
        return self._executor

    def _dispatch(self, job: Callable[[], None], channel: OneShot) -> None:
        future = self.executor.submit(job)
        future.add_done_callback(
            lambda f: _close_on_abnormal_end(channel, self.name, f)
        )

    def shutdown(self, wait: bool = True, cancel_futures: bool = False) -> None:
        """
        Shut the pool down.

        Jobs cancelled here wake their callers with ``CommunicationError``.
        A later ``run`` raises ``JoinError``.
        """
        with self._lock:
            executor = self._executor
        if executor is not None:
            executor.shutdown(wait=wait, cancel_futures=cancel_futures)
            logger.debug("thread_pool_stopped", cancel_futures=cancel_futures)


class AsyncioOffloader(Offloader):
    """
    Offloads to the running loop's executor via ``run_in_executor``.

    Args:
        executor: Executor to use. ``None`` means the loop's default.
    """

    name = "asyncio"

    def __init__(self, executor: Optional[concurrent.futures.Executor] = None):
        self.executor = executor

    def _dispatch(self, job: Callable[[], None], channel: OneShot) -> None:
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self.executor, job)
        future.add_done_callback(
            lambda f: _close_on_abnormal_end(channel, self.name, f)
        )


class AnyioOffloader(Offloader):
    """
    Offloads to anyio worker threads (``anyio.to_thread.run_sync``).

    Args:
        limiter: Capacity limiter. ``None`` means anyio's default limiter.
    """

    name = "anyio"

    def __init__(self, limiter: Optional[CapacityLimiter] = None):
        self.limiter = limiter
        self._tasks: Set[asyncio.Task] = set()

    def _dispatch(self, job: Callable[[], None], channel: OneShot) -> None:
        loop = asyncio.get_running_loop()
        # Driven by its own task so cancelling the caller never cancels the job.
        task = loop.create_task(to_thread.run_sync(job, limiter=self.limiter))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(
            lambda t: _close_on_abnormal_end(channel, self.name, t)
        )
