"""
Offloader Base
==============
The blocking-work offloader interface shared by every backend.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Tuple, TypeVar

import structlog

from ..errors import Argon2AsyncError, JoinError, map_external_error
from .channel import OneShot

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def execute_job(channel: OneShot, func: Callable[..., Any], args: Tuple[Any, ...]) -> None:
    """
    Run ``func`` on the worker and send its outcome through ``channel``.

    A taxonomy error raised by ``func`` is a handled failure and is sent
    unchanged. Any other exception goes through ``map_external_error``;
    types missing from the table are worker faults and become a
    ``JoinError``. If something escapes even that (``BaseException``),
    the channel is still closed before it propagates.
    """
    try:
        result = func(*args)
    except Argon2AsyncError as exc:
        channel.send_error(exc)
    except Exception as exc:
        logger.error(
            "offload_worker_fault",
            func=getattr(func, "__name__", repr(func)),
            error=repr(exc),
        )
        channel.send_error(map_external_error(exc, fallback=JoinError))
    else:
        channel.send(result)
    finally:
        if not channel.sent:
            channel.close(JoinError("worker aborted without sending a result"))


class Offloader(ABC):
    """
    Runs blocking callables away from the event loop.

    Subclasses only decide *where* the job runs (``_dispatch``). The
    channel contract lives here: one result per call, delivered exactly
    once, and a dropped or crashed job always wakes the caller with a
    ``CommunicationError`` instead of leaving it suspended.

    Cancelling the awaiting coroutine does not stop a job that was
    already dispatched; its result is discarded.
    """

    name = "base"

    async def run(self, func: Callable[..., T], *args: Any) -> T:
        """
        Execute ``func(*args)`` on a worker and await its result.

        Raises:
            Argon2AsyncError: Whatever taxonomy error ``func`` raised
            JoinError: The worker faulted or the backend rejected the job
            CommunicationError: The job was dropped without a result, or
                the executor is broken
        """
        channel: OneShot[T] = OneShot()

        def job() -> None:
            execute_job(channel, func, args)

        try:
            self._dispatch(job, channel)
        except RuntimeError as exc:
            # Broken executors map to CommunicationError, shut-down ones to JoinError.
            logger.warning("offload_rejected", backend=self.name, error=repr(exc))
            raise map_external_error(exc, fallback=JoinError) from exc

        logger.debug(
            "offload_dispatched",
            backend=self.name,
            func=getattr(func, "__name__", repr(func)),
        )
        return await channel.receive()

    @abstractmethod
    def _dispatch(self, job: Callable[[], None], channel: OneShot) -> None:
        """
        Start ``job`` on the worker context.

        Implementations must close ``channel`` if the backend reports that
        the job terminated abnormally or was dropped before running.
        """

    def shutdown(self, wait: bool = True) -> None:
        """Release backend resources. Backends without resources ignore this."""
