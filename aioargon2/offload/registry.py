"""
Offloader Registry
==================
Composition-time selection of the single active offloader.
"""

import os
import threading
from typing import Any, Dict, Optional, Type, Union

import structlog

from .backends import AnyioOffloader, AsyncioOffloader, ThreadPoolOffloader
from .base import Offloader

logger = structlog.get_logger(__name__)

BACKEND_ENV_VAR = "AIOARGON2_OFFLOAD_BACKEND"
DEFAULT_BACKEND = "thread_pool"

BACKENDS: Dict[str, Type[Offloader]] = {
    ThreadPoolOffloader.name: ThreadPoolOffloader,
    AsyncioOffloader.name: AsyncioOffloader,
    AnyioOffloader.name: AnyioOffloader,
}

_offloader: Optional[Offloader] = None
_registry_lock = threading.Lock()


def create_offloader(backend: str, **options: Any) -> Offloader:
    """
    Build an offloader by backend name.

    Args:
        backend: One of ``thread_pool``, ``asyncio`` or ``anyio``
        **options: Passed to the backend constructor

    Raises:
        ValueError: If the backend name is unknown
    """
    try:
        cls = BACKENDS[backend.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown offload backend {backend!r}; "
            f"expected one of {', '.join(sorted(BACKENDS))}"
        ) from None
    return cls(**options)


def configure_offloader(offloader: Union[Offloader, str], **options: Any) -> Offloader:
    """
    Install the process-wide offloader.

    Exactly one offloader is active per process, so this may only be
    called once (or again after ``reset_offloader``).

    Raises:
        RuntimeError: If an offloader is already installed
    """
    global _offloader

    if isinstance(offloader, str):
        offloader = create_offloader(offloader, **options)

    with _registry_lock:
        if _offloader is not None:
            raise RuntimeError(
                f"Offloader already configured ({_offloader.name}); "
                "call reset_offloader() first"
            )
        _offloader = offloader

    logger.info("offloader_configured", backend=offloader.name)
    return offloader


def get_offloader() -> Offloader:
    """Return the installed offloader, creating it from the environment if needed."""
    global _offloader

    if _offloader is None:
        with _registry_lock:
            if _offloader is None:
                backend = os.getenv(BACKEND_ENV_VAR, DEFAULT_BACKEND)
                _offloader = create_offloader(backend)
                logger.info("offloader_configured", backend=_offloader.name, source="env")
    return _offloader


def reset_offloader(wait: bool = True) -> None:
    """Shut down and forget the installed offloader (for testing/teardown)."""
    global _offloader

    with _registry_lock:
        offloader, _offloader = _offloader, None
    if offloader is not None:
        offloader.shutdown(wait=wait)
