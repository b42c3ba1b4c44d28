"""
Config Models
=============
Hashing configuration value types.
"""

import os
from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Optional

from argon2 import DEFAULT_HASH_LENGTH, Type


class Version(IntEnum):
    """Argon2 algorithm versions."""
    V0x10 = 0x10  # 16
    V0x13 = 0x13  # 19, current


_ALGORITHM_NAMES = {
    "d": Type.D,
    "i": Type.I,
    "id": Type.ID,
}


def parse_algorithm(value: str) -> Type:
    """Parse ``argon2id``, ``id``, ``ID`` and similar into an ``argon2.Type``."""
    name = value.strip().lower()
    if name.startswith("argon2"):
        name = name[len("argon2"):]
    try:
        return _ALGORITHM_NAMES[name]
    except KeyError:
        raise ValueError(f"Unknown Argon2 algorithm: {value!r}") from None


@dataclass(frozen=True)
class Config:
    """
    Argon2 hashing configuration.

    The defaults match ``Config.new_insecure()``: fine for tests and local
    development, but **not** for production.

    Attributes:
        algorithm: Argon2 variant. Argon2d uses data-dependent memory access
            (fast, no side-channel protection), Argon2i uses data-independent
            access, Argon2id mixes both and is the recommended choice.
        version: Algorithm version, 0x13 unless verifying legacy hashes.
        secret_key: Optional pepper mixed into every hash. Not stored in the
            encoded hash, so it must be identical at verification time.
        memory_cost: Memory size in kibibytes.
        iterations: Number of passes over memory (time cost).
        parallelism: Number of lanes.
        output_length: Digest length in bytes, ``None`` for the default (32).
    """
    algorithm: Type = Type.ID
    version: Version = Version.V0x13
    secret_key: Optional[bytes] = field(default=None, repr=False)
    memory_cost: int = 512
    iterations: int = 3
    parallelism: int = 1
    output_length: Optional[int] = DEFAULT_HASH_LENGTH

    @classmethod
    def new_insecure(cls) -> "Config":
        """Cheap parameters for tests. **Do not use in production.**"""
        return cls()

    @classmethod
    def new(cls) -> "Config":
        """
        Stronger parameters sized to the host.

        ``parallelism`` is the logical CPU count from ``os.cpu_count()``,
        which includes SMT siblings, so it can be twice the number of
        physical cores. Replace it if lanes should match physical cores.

        A secret key should still be set with
        ``dataclasses.replace(config, secret_key=...)``.
        """
        return cls(
            memory_cost=8192,
            iterations=200,
            parallelism=os.cpu_count() or 1,
        )

    @classmethod
    def from_env(cls, prefix: str = "ARGON2_") -> "Config":
        """
        Build a config from environment variables.

        Reads ``<prefix>ALGORITHM``, ``VERSION``, ``SECRET_KEY``,
        ``MEMORY_COST``, ``ITERATIONS``, ``PARALLELISM`` and
        ``OUTPUT_LENGTH``. Unset variables keep the insecure defaults.
        The result is not installed; pass it to ``set_config``.
        """
        base = cls()

        def env(name: str) -> Optional[str]:
            value = os.getenv(prefix + name)
            return value if value else None

        algorithm = env("ALGORITHM")
        version = env("VERSION")
        secret_key = env("SECRET_KEY")
        output_length = env("OUTPUT_LENGTH")

        return cls(
            algorithm=parse_algorithm(algorithm) if algorithm else base.algorithm,
            version=Version(int(version, 0)) if version else base.version,
            secret_key=secret_key.encode("utf-8") if secret_key else None,
            memory_cost=int(env("MEMORY_COST") or base.memory_cost),
            iterations=int(env("ITERATIONS") or base.iterations),
            parallelism=int(env("PARALLELISM") or base.parallelism),
            output_length=int(output_length) if output_length else base.output_length,
        )


@dataclass(frozen=True)
class ConfigSnapshot:
    """Copy of a ``Config`` taken under the store's read lock."""
    algorithm: Type
    version: Version
    secret_key: Optional[bytes] = field(repr=False)
    memory_cost: int
    iterations: int
    parallelism: int
    output_length: Optional[int]

    @classmethod
    def of(cls, config: Config) -> "ConfigSnapshot":
        values = {f.name: getattr(config, f.name) for f in fields(config)}
        if values["secret_key"] is not None:
            values["secret_key"] = bytes(values["secret_key"])
        return cls(**values)
