"""
Hashing Context
===============
Per-call Argon2 parameters plus the code that runs the primitive.

A context is built fresh for every hash or verify call, from the
configuration snapshot (hashing) or from the encoded hash (verifying).
It is never cached: the secret key and costs it captures must be the
ones in force when the call started.
"""

import hmac
from dataclasses import dataclass, field
from typing import Optional

from argon2 import DEFAULT_HASH_LENGTH, Type
from argon2.exceptions import HashingError
from argon2.low_level import core, error_to_str, ffi, lib

from .config import ConfigSnapshot, Version
from .encoding import EncodedHash
from .errors import ArgonError, map_external_error

# Limits from the Argon2 reference implementation (argon2.h)
SYNC_POINTS = 4
MIN_LANES = 1
MAX_LANES = 0xFFFFFF
MIN_OUTLEN = 4
MAX_OUTLEN = 0xFFFFFFFF
MIN_TIME = 1
MAX_TIME = 0xFFFFFFFF
MIN_MEMORY = 2 * SYNC_POINTS
MAX_MEMORY = 0xFFFFFFFF
MIN_SALT_LENGTH = 8
MAX_SECRET_LENGTH = 0xFFFFFFFF


def _buffer(data: Optional[bytes]):
    if not data:
        return ffi.NULL
    return ffi.new("uint8_t[]", data)


@dataclass(frozen=True)
class HashingContext:
    """Validated Argon2 parameters for a single call."""
    algorithm: Type
    version: int
    memory_cost: int
    time_cost: int
    parallelism: int
    hash_len: int
    secret_key: Optional[bytes] = field(default=None, repr=False)

    def __post_init__(self):
        self.validate()

    @classmethod
    def from_snapshot(cls, snapshot: ConfigSnapshot) -> "HashingContext":
        """
        Build a hashing context from a configuration snapshot.

        Raises:
            ArgonError: If the configured parameters are out of range
        """
        return cls(
            algorithm=snapshot.algorithm,
            version=int(snapshot.version),
            memory_cost=snapshot.memory_cost,
            time_cost=snapshot.iterations,
            parallelism=snapshot.parallelism,
            hash_len=(
                DEFAULT_HASH_LENGTH
                if snapshot.output_length is None
                else snapshot.output_length
            ),
            secret_key=snapshot.secret_key,
        )

    @classmethod
    def from_encoded(cls, encoded: EncodedHash, secret_key: Optional[bytes]) -> "HashingContext":
        """
        Build a verification context from an encoded hash.

        Costs, version and algorithm come from the hash; only the secret
        key comes from the current configuration.
        """
        return cls(
            algorithm=encoded.algorithm,
            version=encoded.version,
            memory_cost=encoded.memory_cost,
            time_cost=encoded.time_cost,
            parallelism=encoded.parallelism,
            hash_len=len(encoded.digest),
            secret_key=secret_key,
        )

    def validate(self) -> None:
        """Raise ``ArgonError`` unless every parameter is within Argon2's limits."""
        if not isinstance(self.algorithm, Type):
            raise ArgonError(f"unknown algorithm: {self.algorithm!r}")
        if self.version not in {v.value for v in Version}:
            raise ArgonError(f"invalid version: {self.version}")
        if not MIN_TIME <= self.time_cost <= MAX_TIME:
            raise ArgonError("time cost is too small" if self.time_cost < MIN_TIME else "time cost is too large")
        if not MIN_LANES <= self.parallelism <= MAX_LANES:
            raise ArgonError("too few lanes" if self.parallelism < MIN_LANES else "too many lanes")
        if self.memory_cost < max(MIN_MEMORY, 2 * SYNC_POINTS * self.parallelism):
            raise ArgonError("memory cost is too small")
        if self.memory_cost > MAX_MEMORY:
            raise ArgonError("memory cost is too large")
        if not MIN_OUTLEN <= self.hash_len <= MAX_OUTLEN:
            raise ArgonError("output is too short" if self.hash_len < MIN_OUTLEN else "output is too long")
        if self.secret_key is not None and len(self.secret_key) > MAX_SECRET_LENGTH:
            raise ArgonError("secret is too long")

    def derive(self, password: bytes, salt: bytes) -> bytes:
        """
        Compute the raw Argon2 digest. Blocking; run it on a worker.

        Raises:
            ArgonError: If the primitive reports a failure
        """
        if len(salt) < MIN_SALT_LENGTH:
            raise ArgonError("salt is too short")

        out = ffi.new("uint8_t[]", self.hash_len)
        # cffi buffers must stay referenced until core() returns.
        pwd = _buffer(password)
        csalt = _buffer(salt)
        secret = _buffer(self.secret_key)
        ctx = ffi.new(
            "argon2_context *",
            dict(
                version=self.version,
                out=out,
                outlen=self.hash_len,
                pwd=pwd,
                pwdlen=len(password),
                salt=csalt,
                saltlen=len(salt),
                secret=secret,
                secretlen=len(self.secret_key or b""),
                ad=ffi.NULL,
                adlen=0,
                t_cost=self.time_cost,
                m_cost=self.memory_cost,
                lanes=self.parallelism,
                threads=self.parallelism,
                allocate_cbk=ffi.NULL,
                free_cbk=ffi.NULL,
                flags=lib.ARGON2_DEFAULT_FLAGS,
            ),
        )

        rv = core(ctx, self.algorithm.value)
        if rv != lib.ARGON2_OK:
            error = map_external_error(HashingError(error_to_str(rv)))
            error.code = rv
            raise error

        return bytes(ffi.buffer(out, self.hash_len))

    def hash_encoded(self, password: bytes, salt: bytes) -> str:
        """Compute the digest and return it as an encoded hash string."""
        digest = self.derive(password, salt)
        return EncodedHash(
            algorithm=self.algorithm,
            version=self.version,
            memory_cost=self.memory_cost,
            time_cost=self.time_cost,
            parallelism=self.parallelism,
            salt=salt,
            digest=digest,
        ).encode()

    def matches(self, password: bytes, encoded: EncodedHash) -> bool:
        """Recompute the digest with the hash's salt and compare in constant time."""
        return hmac.compare_digest(self.derive(password, encoded.salt), encoded.digest)
