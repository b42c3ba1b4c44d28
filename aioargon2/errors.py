"""
Argon2 Async Errors
===================
Closed error taxonomy for hashing, verification and offloading.

Every failure raised by the public API is one of four kinds:

1. COMMUNICATION: the worker never delivered a result
2. ARGON: the Argon2 primitive rejected parameters or failed to compute
3. PASSWORD_HASH: an encoded hash string could not be parsed
4. MISSING_CONFIG: no configuration has been installed

External exceptions are translated through ``EXTERNAL_ERROR_KINDS`` at the
point where they are first observed.
"""

import asyncio
import binascii
import concurrent.futures
from enum import Enum
from typing import Dict, Optional, Type

from argon2.exceptions import HashingError, InvalidHashError


class ErrorKind(str, Enum):
    """Error categories."""
    COMMUNICATION = "communication"
    ARGON = "argon"
    PASSWORD_HASH = "password_hash"
    MISSING_CONFIG = "missing_config"


class Argon2AsyncError(Exception):
    """Base class for every error raised by aioargon2."""

    kind: ErrorKind
    default_message = "unknown failure"

    def __init__(self, message: Optional[str] = None):
        self.detail = message or self.default_message
        super().__init__(f"error while hashing: {self.detail}")


class CommunicationError(Argon2AsyncError):
    """The offloaded job never delivered a result to the caller."""

    kind = ErrorKind.COMMUNICATION
    default_message = "background thread communication failure"


class JoinError(CommunicationError):
    """The worker facility reported an abnormal termination of the job."""

    default_message = "background job terminated abnormally"


class ArgonError(Argon2AsyncError):
    """The Argon2 primitive rejected its parameters or failed."""

    kind = ErrorKind.ARGON
    default_message = "error in argon2 hashing algorithm"

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class PasswordHashError(Argon2AsyncError):
    """An encoded hash string is malformed."""

    kind = ErrorKind.PASSWORD_HASH
    default_message = "error in password hash encoding"


class MissingConfigError(Argon2AsyncError):
    """No global configuration has been set."""

    kind = ErrorKind.MISSING_CONFIG
    default_message = "global configuration has not been set"


ERROR_CLASSES: Dict[ErrorKind, Type[Argon2AsyncError]] = {
    ErrorKind.COMMUNICATION: CommunicationError,
    ErrorKind.ARGON: ArgonError,
    ErrorKind.PASSWORD_HASH: PasswordHashError,
    ErrorKind.MISSING_CONFIG: MissingConfigError,
}

# Order matters: the first matching entry wins, so subclasses come first.
EXTERNAL_ERROR_KINDS = (
    (InvalidHashError, ErrorKind.PASSWORD_HASH),
    (binascii.Error, ErrorKind.PASSWORD_HASH),
    (UnicodeEncodeError, ErrorKind.PASSWORD_HASH),
    (HashingError, ErrorKind.ARGON),
    (concurrent.futures.CancelledError, ErrorKind.COMMUNICATION),
    (asyncio.CancelledError, ErrorKind.COMMUNICATION),
    (concurrent.futures.BrokenExecutor, ErrorKind.COMMUNICATION),
)


def map_external_error(
    exc: BaseException,
    fallback: Optional[Type[Argon2AsyncError]] = None,
) -> Argon2AsyncError:
    """
    Translate an external exception into its taxonomy error.

    Taxonomy errors pass through untouched. An exception not listed in
    ``EXTERNAL_ERROR_KINDS`` becomes ``fallback`` when one is given (the
    worker boundary uses ``JoinError``); otherwise it is re-raised,
    because an unmapped type reaching that point is a programming error.

    Args:
        exc: The exception observed at a boundary
        fallback: Error class for exceptions missing from the table

    Returns:
        The taxonomy error, with ``__cause__`` set to ``exc``
    """
    if isinstance(exc, Argon2AsyncError):
        return exc

    for source, kind in EXTERNAL_ERROR_KINDS:
        if isinstance(exc, source):
            error = ERROR_CLASSES[kind](str(exc) or None)
            break
    else:
        if fallback is None:
            raise exc
        error = fallback(f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__)

    error.__cause__ = exc
    return error
