"""
Verifier
========
Checks a password against an encoded Argon2 hash.
"""

from typing import Optional

from .config import ConfigStore
from .context import HashingContext
from .encoding import EncodedHash
from .offload import Offloader, get_offloader
from .utils import Password, to_bytes


class Verifier:
    """
    Verifies passwords against encoded hashes.

    Costs, version and algorithm are taken from the hash itself, so hashes
    produced under an older configuration keep verifying after rotation.
    Only the secret key comes from the current configuration.
    """

    def __init__(self, config_store: ConfigStore, offloader: Optional[Offloader] = None):
        self.config_store = config_store
        self._offloader = offloader

    @property
    def offloader(self) -> Offloader:
        return self._offloader or get_offloader()

    async def verify(self, password: Password, encoded_hash: str) -> bool:
        """
        Verify a password.

        Returns:
            True if the password matches, False if the hash is well-formed
            but the password is wrong

        Raises:
            MissingConfigError: If no configuration is set
            PasswordHashError: If ``encoded_hash`` cannot be parsed
            ArgonError: If the hash's parameters are invalid or hashing fails
            CommunicationError: If the worker never delivered a result
        """
        snapshot = self.config_store.snapshot()
        encoded = EncodedHash.decode(encoded_hash)
        context = HashingContext.from_encoded(encoded, snapshot.secret_key)
        return await self.offloader.run(context.matches, to_bytes(password), encoded)
