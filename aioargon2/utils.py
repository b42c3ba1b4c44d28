"""
Password Utilities
==================
Helpers shared by the hashing and verification paths.
"""

import secrets
from typing import Union

from argon2 import DEFAULT_HASH_LENGTH, DEFAULT_RANDOM_SALT_LENGTH

from .config import ConfigSnapshot
from .encoding import EncodedHash

Password = Union[str, bytes, bytearray, memoryview]


def to_bytes(password: Password) -> bytes:
    """Copy ``password`` into an owned ``bytes`` value (str is UTF-8 encoded)."""
    if isinstance(password, str):
        return password.encode("utf-8")
    if isinstance(password, (bytes, bytearray, memoryview)):
        return bytes(password)
    raise TypeError(f"password must be str or bytes-like, not {type(password).__name__}")


def generate_salt(length: int = DEFAULT_RANDOM_SALT_LENGTH) -> bytes:
    """Fresh random salt from the OS CSPRNG."""
    return secrets.token_bytes(length)


def parameters_differ(encoded: EncodedHash, snapshot: ConfigSnapshot) -> bool:
    """
    Check if a hash was produced with parameters other than ``snapshot``'s.

    Returns True when the algorithm, version, costs or digest length
    differ, i.e. the hash should be recomputed on next login.
    """
    output_length = snapshot.output_length
    if output_length is None:
        output_length = DEFAULT_HASH_LENGTH
    return (
        encoded.algorithm != snapshot.algorithm
        or encoded.version != int(snapshot.version)
        or encoded.memory_cost != snapshot.memory_cost
        or encoded.time_cost != snapshot.iterations
        or encoded.parallelism != snapshot.parallelism
        or len(encoded.digest) != output_length
    )
