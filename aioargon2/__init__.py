"""
aioargon2
=========
Async Argon2 password hashing for asyncio applications.

Argon2 is memory-hard and deliberately slow, so every hash and verify
call runs on a worker thread while the caller awaits the result.

Usage:
    import aioargon2

    aioargon2.set_config(aioargon2.Config.new())

    encoded = await aioargon2.hash_password("hunter2")
    assert await aioargon2.verify_password("hunter2", encoded)
"""

__version__ = "0.1.0"

# Configuration
from .config import (
    Config,
    ConfigSnapshot,
    ConfigStore,
    Version,
    get_config_store,
    set_config,
)

# Errors
from .errors import (
    Argon2AsyncError,
    ArgonError,
    CommunicationError,
    ErrorKind,
    JoinError,
    MissingConfigError,
    PasswordHashError,
    map_external_error,
)

# Offload Bridge
from .offload import (
    AnyioOffloader,
    AsyncioOffloader,
    Offloader,
    ThreadPoolOffloader,
    configure_offloader,
    create_offloader,
    get_offloader,
    reset_offloader,
)

# Hashing
from .context import HashingContext
from .encoding import EncodedHash
from .hasher import HashingService
from .verifier import Verifier

# Async Operations
from .async_ops import (
    hash_password,
    hash_raw,
    needs_rehash,
    verify_and_upgrade,
    verify_password,
)

# Sync Operations
from .sync_ops import hash_password_sync, hash_raw_sync, verify_password_sync

__all__ = [
    # Configuration
    "Config",
    "ConfigSnapshot",
    "ConfigStore",
    "Version",
    "get_config_store",
    "set_config",
    # Errors
    "Argon2AsyncError",
    "ArgonError",
    "CommunicationError",
    "ErrorKind",
    "JoinError",
    "MissingConfigError",
    "PasswordHashError",
    "map_external_error",
    # Offload Bridge
    "Offloader",
    "ThreadPoolOffloader",
    "AsyncioOffloader",
    "AnyioOffloader",
    "create_offloader",
    "configure_offloader",
    "get_offloader",
    "reset_offloader",
    # Hashing
    "HashingContext",
    "EncodedHash",
    "HashingService",
    "Verifier",
    # Async Operations
    "hash_password",
    "hash_raw",
    "verify_password",
    "needs_rehash",
    "verify_and_upgrade",
    # Sync Operations
    "hash_password_sync",
    "hash_raw_sync",
    "verify_password_sync",
]
