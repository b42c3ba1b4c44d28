"""
Encoded Hash
============
Self-describing Argon2 hash strings (PHC string format).

    $argon2id$v=19$m=65536,t=3,p=4$<salt>$<digest>

Salt and digest are unpadded standard base64. The parameter fields are
parsed by ``argon2.extract_parameters`` so both sides agree with
argon2-cffi on what a well-formed hash looks like.
"""

import base64
import binascii
import re
from dataclasses import dataclass, field

from argon2 import Type, extract_parameters
from argon2.exceptions import InvalidHashError

from .config import Version
from .errors import PasswordHashError, map_external_error

_DIGITS = re.compile(r"[0-9]+")


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii").rstrip("=")


def b64decode(data: str) -> bytes:
    return base64.b64decode(data.encode("ascii") + b"=" * (-len(data) % 4), validate=True)


def _check_parameter_values(fields) -> None:
    """Reject anything but plain ASCII digits in the ``k=v`` fields."""
    for segment in fields:
        for pair in segment.split(","):
            name, _, value = pair.partition("=")
            if not _DIGITS.fullmatch(value):
                raise PasswordHashError(f"invalid value for parameter {name!r}: {value!r}")


@dataclass(frozen=True)
class EncodedHash:
    """Parsed form of an encoded Argon2 hash."""
    algorithm: Type
    version: int
    memory_cost: int
    time_cost: int
    parallelism: int
    salt: bytes = field(repr=False)
    digest: bytes = field(repr=False)

    def encode(self) -> str:
        """Serialize to the PHC string format."""
        return (
            f"$argon2{self.algorithm.name.lower()}"
            f"$v={self.version}"
            f"$m={self.memory_cost},t={self.time_cost},p={self.parallelism}"
            f"${b64encode(self.salt)}"
            f"${b64encode(self.digest)}"
        )

    __str__ = encode

    @classmethod
    def decode(cls, encoded: str) -> "EncodedHash":
        """
        Parse an encoded hash.

        A missing ``v=`` field means version 0x10, as in the reference
        implementation.

        Raises:
            PasswordHashError: If the string is not a well-formed Argon2 hash
        """
        if not isinstance(encoded, str):
            raise PasswordHashError(f"encoded hash must be str, not {type(encoded).__name__}")

        try:
            params = extract_parameters(encoded)
            parts = encoded.split("$")
            _check_parameter_values(parts[2:-2])
            salt = b64decode(parts[-2])
            digest = b64decode(parts[-1])
        except (InvalidHashError, binascii.Error, UnicodeEncodeError) as exc:
            raise map_external_error(exc) from exc

        version = params.version if "$v=" in encoded else Version.V0x10
        if version not in {v.value for v in Version}:
            raise PasswordHashError(f"unsupported argon2 version: {version}")
        if not salt or not digest:
            raise PasswordHashError("encoded hash has an empty salt or digest")

        return cls(
            algorithm=params.type,
            version=int(version),
            memory_cost=params.memory_cost,
            time_cost=params.time_cost,
            parallelism=params.parallelism,
            salt=salt,
            digest=digest,
        )
