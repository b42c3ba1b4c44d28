"""
aioargon2 - Offload Bridge
==========================
Moves blocking work off the event loop and hands the result back.

Flow:

1. The caller awaits ``Offloader.run(func, *args)``
2. A one-shot channel is created on the caller's loop
3. The job runs on the backend's worker context
4. The worker always sends a result or an error; a dropped or crashed
   job closes the channel with a ``CommunicationError``

Usage:
    from aioargon2.offload import configure_offloader

    configure_offloader("anyio")   # once, at startup
"""

from .channel import OneShot
from .base import Offloader, execute_job
from .backends import AnyioOffloader, AsyncioOffloader, ThreadPoolOffloader
from .registry import (
    BACKENDS,
    BACKEND_ENV_VAR,
    configure_offloader,
    create_offloader,
    get_offloader,
    reset_offloader,
)

__all__ = [
    # Channel
    "OneShot",
    # Interface
    "Offloader",
    "execute_job",
    # Backends
    "ThreadPoolOffloader",
    "AsyncioOffloader",
    "AnyioOffloader",
    # Registry
    "BACKENDS",
    "BACKEND_ENV_VAR",
    "create_offloader",
    "configure_offloader",
    "get_offloader",
    "reset_offloader",
]
