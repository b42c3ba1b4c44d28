"""
Async Password Hashing
======================
Module-level hashing API backed by the process-wide config store and
offloader.
"""

from typing import Optional, Tuple

from .config import get_config_store
from .encoding import EncodedHash
from .hasher import HashingService
from .utils import Password, parameters_differ
from .verifier import Verifier


async def hash_password(password: Password) -> str:
    """
    Hash a password with the global configuration.

    Args:
        password: Password as str (UTF-8) or bytes

    Returns:
        Encoded Argon2 hash (algorithm, parameters, salt and digest)
    """
    return await HashingService(get_config_store()).hash(password)


async def hash_raw(password: Password) -> bytes:
    """
    Hash a password with the global configuration.

    Returns:
        Raw digest bytes of the configured output length
    """
    return await HashingService(get_config_store()).hash_raw(password)


async def verify_password(password: Password, hash: str) -> bool:
    """
    Verify a password against an encoded hash.

    Args:
        password: Password as str (UTF-8) or bytes
        hash: Encoded Argon2 hash

    Returns:
        True if password matches, False otherwise

    Raises:
        PasswordHashError: If ``hash`` is malformed (never False)
    """
    return await Verifier(get_config_store()).verify(password, hash)


def needs_rehash(hash: str) -> bool:
    """
    Check if a hash was produced with outdated parameters.

    Returns:
        True if algorithm, version, costs or digest length differ from the
        current configuration

    Raises:
        MissingConfigError: If no configuration is set
        PasswordHashError: If ``hash`` is malformed
    """
    snapshot = get_config_store().snapshot()
    return parameters_differ(EncodedHash.decode(hash), snapshot)


async def verify_and_upgrade(
    password: Password,
    hash: str,
) -> Tuple[bool, Optional[str]]:
    """
    Check a login password and re-hash it under the installed config.

    A replacement hash is computed only after a successful match, and only
    when the stored hash's algorithm, version, memory cost, iterations,
    lanes or digest length differ from the installed config. Only Argon2
    hashes are accepted; any other format raises ``PasswordHashError``.

    Returns:
        ``(matched, replacement)``. ``replacement`` is ``None`` when the
        password is wrong or the stored hash is already current.
    """
    if not await verify_password(password, hash):
        return False, None

    replacement = await hash_password(password) if needs_rehash(hash) else None
    return True, replacement
