"""
Hashing Service
===============
Argon2 hashing with the computation offloaded from the event loop.
"""

from typing import Optional, Tuple

from .config import ConfigStore
from .context import HashingContext
from .offload import Offloader, get_offloader
from .utils import Password, generate_salt, to_bytes


class HashingService:
    """
    Produces raw digests and encoded hashes.

    Each call takes one configuration snapshot before offloading, so a
    config replaced mid-flight does not affect calls already started.

    Args:
        config_store: Where the configuration is read from
        offloader: Worker backend; ``None`` uses the process-wide default
    """

    def __init__(self, config_store: ConfigStore, offloader: Optional[Offloader] = None):
        self.config_store = config_store
        self._offloader = offloader

    @property
    def offloader(self) -> Offloader:
        return self._offloader or get_offloader()

    def _prepare(self, password: Password) -> Tuple[HashingContext, bytes, bytes]:
        snapshot = self.config_store.snapshot()
        context = HashingContext.from_snapshot(snapshot)
        return context, to_bytes(password), generate_salt()

    async def hash_raw(self, password: Password) -> bytes:
        """
        Hash a password and return the raw digest.

        Returns:
            Digest of the configured output length

        Raises:
            MissingConfigError: If no configuration is set
            ArgonError: If the configuration is invalid or hashing fails
            CommunicationError: If the worker never delivered a result
        """
        context, pwd, salt = self._prepare(password)
        return await self.offloader.run(context.derive, pwd, salt)

    async def hash(self, password: Password) -> str:
        """
        Hash a password and return the encoded hash string.

        Returns:
            ``$argon2id$v=19$m=...,t=...,p=...$<salt>$<digest>``

        Raises:
            MissingConfigError: If no configuration is set
            ArgonError: If the configuration is invalid or hashing fails
            CommunicationError: If the worker never delivered a result
        """
        context, pwd, salt = self._prepare(password)
        return await self.offloader.run(context.hash_encoded, pwd, salt)
