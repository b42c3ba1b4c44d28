"""
Unit Tests for the Error Taxonomy
=================================
"""

import asyncio
import binascii
import concurrent.futures

import pytest
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from aioargon2.errors import (
    Argon2AsyncError,
    ArgonError,
    CommunicationError,
    ErrorKind,
    JoinError,
    MissingConfigError,
    PasswordHashError,
    map_external_error,
)


class TestErrorKinds:
    """Tests for the error classes."""

    def test_every_kind_has_a_class(self):
        """Each kind maps to exactly one error class."""
        assert CommunicationError.kind == ErrorKind.COMMUNICATION
        assert ArgonError.kind == ErrorKind.ARGON
        assert PasswordHashError.kind == ErrorKind.PASSWORD_HASH
        assert MissingConfigError.kind == ErrorKind.MISSING_CONFIG

    def test_join_error_is_communication(self):
        """Join failures share the communication slot."""
        error = JoinError()

        assert isinstance(error, CommunicationError)
        assert error.kind == ErrorKind.COMMUNICATION

    def test_message_prefix(self):
        """Messages carry a common prefix and a default detail."""
        assert str(MissingConfigError()) == (
            "error while hashing: global configuration has not been set"
        )
        assert str(ArgonError("memory cost is too small")) == (
            "error while hashing: memory cost is too small"
        )

    def test_argon_error_keeps_code(self):
        error = ArgonError("boom", code=-14)

        assert error.code == -14
        assert error.detail == "boom"


class TestExternalMapping:
    """Tests for map_external_error."""

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (InvalidHashError(), PasswordHashError),
            (binascii.Error("Incorrect padding"), PasswordHashError),
            (HashingError("bad"), ArgonError),
            (UnicodeEncodeError("ascii", "c29tZXNhbH\u00e9", 10, 11, "ordinal not in range(128)"), PasswordHashError),
            (concurrent.futures.CancelledError(), CommunicationError),
            (asyncio.CancelledError(), CommunicationError),
            (concurrent.futures.BrokenExecutor(), CommunicationError),
        ],
    )
    def test_maps_to_single_kind(self, exc, expected):
        """Each external source maps to exactly one kind."""
        error = map_external_error(exc)

        assert type(error) is expected
        assert error.__cause__ is exc

    def test_taxonomy_errors_pass_through(self):
        error = MissingConfigError()

        assert map_external_error(error) is error

    def test_unmapped_errors_are_reraised(self):
        """Unknown exception types are not silently converted."""
        with pytest.raises(KeyError):
            map_external_error(KeyError("nope"))

    def test_verification_errors_are_not_mapped(self):
        """A digest mismatch is a False result, never an ArgonError."""
        with pytest.raises(VerificationError):
            map_external_error(VerificationError("mismatch"))

    def test_fallback_for_unmapped(self):
        """Worker faults use the fallback class and keep the original as cause."""
        exc = ZeroDivisionError("division by zero")

        error = map_external_error(exc, fallback=JoinError)

        assert type(error) is JoinError
        assert error.detail == "ZeroDivisionError: division by zero"
        assert error.__cause__ is exc

    def test_table_wins_over_fallback(self):
        """A broken executor is a communication failure, not a join failure."""
        error = map_external_error(concurrent.futures.BrokenExecutor(), fallback=JoinError)

        assert type(error) is CommunicationError

    def test_shutdown_runtime_error_uses_fallback(self):
        exc = RuntimeError("cannot schedule new futures after shutdown")

        assert type(map_external_error(exc, fallback=JoinError)) is JoinError

    def test_all_errors_share_base(self):
        for cls in (CommunicationError, JoinError, ArgonError, PasswordHashError, MissingConfigError):
            assert issubclass(cls, Argon2AsyncError)
