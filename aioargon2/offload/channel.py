"""
One-Shot Channel
================
Single-producer, single-consumer result channel between a worker thread
and the event loop that awaits it.
"""

import asyncio
import threading
from typing import Generic, Optional, TypeVar

import structlog

from ..errors import CommunicationError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class OneShot(Generic[T]):
    """
    Delivers exactly one value or error to one awaiting coroutine.

    The sending side may run on any thread; delivery is marshalled onto
    the loop that created the channel. Only the first send counts.

    Example:
        channel = OneShot()
        executor.submit(lambda: channel.send(compute()))
        result = await channel.receive()
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._lock = threading.Lock()
        self._sent = False

    @property
    def sent(self) -> bool:
        """Whether a value, an error or a close has been delivered."""
        return self._sent

    def send(self, value: T) -> bool:
        """Send the result. Returns False if something was already sent."""
        return self._deliver(value, None)

    def send_error(self, exc: BaseException) -> bool:
        """Send a failure. Returns False if something was already sent."""
        return self._deliver(None, exc)

    def close(self, exc: Optional[BaseException] = None) -> bool:
        """
        Drop the sending side.

        If nothing was sent yet the receiver fails with ``exc``, or with a
        ``CommunicationError`` when no error is given.
        """
        if exc is None:
            exc = CommunicationError("result channel closed before a result was sent")
        return self._deliver(None, exc)

    async def receive(self) -> T:
        """Suspend until the sender delivers, then return or raise."""
        return await self._future

    def _deliver(self, value, exc) -> bool:
        with self._lock:
            if self._sent:
                return False
            self._sent = True

        try:
            self._loop.call_soon_threadsafe(self._resolve, value, exc)
        except RuntimeError:
            # Loop already closed: the caller is gone.
            logger.debug("offload_result_discarded", reason="loop_closed")
        return True

    def _resolve(self, value, exc) -> None:
        if self._future.done():
            logger.debug("offload_result_discarded", reason="receiver_cancelled")
            return
        if exc is not None:
            self._future.set_exception(exc)
        else:
            self._future.set_result(value)
