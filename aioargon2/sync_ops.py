"""
Sync Password Operations
========================
Synchronous hashing for non-async contexts. These block the calling
thread for the full Argon2 computation.
"""

from .config import get_config_store
from .context import HashingContext
from .encoding import EncodedHash
from .utils import Password, generate_salt, to_bytes


def hash_password_sync(password: Password) -> str:
    """Synchronous version of hash_password (use async version when possible)."""
    context = HashingContext.from_snapshot(get_config_store().snapshot())
    return context.hash_encoded(to_bytes(password), generate_salt())


def hash_raw_sync(password: Password) -> bytes:
    """Synchronous version of hash_raw (use async version when possible)."""
    context = HashingContext.from_snapshot(get_config_store().snapshot())
    return context.derive(to_bytes(password), generate_salt())


def verify_password_sync(password: Password, hash: str) -> bool:
    """Synchronous version of verify_password (use async version when possible)."""
    snapshot = get_config_store().snapshot()
    encoded = EncodedHash.decode(hash)
    context = HashingContext.from_encoded(encoded, snapshot.secret_key)
    return context.matches(to_bytes(password), encoded)
