"""
Config Store
============
Process-wide hashing configuration behind a reader/writer lock.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog

from ..errors import MissingConfigError
from .models import Config, ConfigSnapshot

logger = structlog.get_logger(__name__)


class ReadWriteLock:
    """
    Multiple-reader, single-writer lock.

    Writers are preferred: once a writer is waiting, new readers queue
    behind it so a steady stream of hash calls cannot starve a config swap.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ConfigStore:
    """
    Holds the hashing configuration.

    The store starts empty. ``snapshot()`` on an empty store raises
    ``MissingConfigError``; there are no implicit defaults.

    Example:
        store = ConfigStore()
        store.set(Config.new())
        snapshot = store.snapshot()
    """

    def __init__(self, config: Optional[Config] = None):
        self._lock = ReadWriteLock()
        self._config = config

    @property
    def is_configured(self) -> bool:
        with self._lock.read():
            return self._config is not None

    def set(self, config: Config) -> None:
        """Install ``config``, replacing any previous one as a whole."""
        if not isinstance(config, Config):
            raise TypeError(f"Expected Config, got {type(config).__name__}")

        with self._lock.write():
            replaced = self._config is not None
            self._config = config

        logger.info(
            "argon2_config_installed",
            replaced=replaced,
            algorithm=config.algorithm.name,
            version=int(config.version),
            memory_cost=config.memory_cost,
            iterations=config.iterations,
            parallelism=config.parallelism,
            output_length=config.output_length,
            has_secret_key=config.secret_key is not None,
        )

    def snapshot(self) -> ConfigSnapshot:
        """
        Copy out the current configuration.

        Raises:
            MissingConfigError: If no configuration was ever set
        """
        with self._lock.read():
            config = self._config
            if config is None:
                raise MissingConfigError()
            return ConfigSnapshot.of(config)

    def clear(self) -> None:
        """Forget the current configuration (teardown and tests)."""
        with self._lock.write():
            self._config = None


# Process-wide store used by the module-level API
_default_store = ConfigStore()


def get_config_store() -> ConfigStore:
    """Get the process-wide config store."""
    return _default_store


def set_config(config: Config) -> None:
    """Install or replace the process-wide configuration."""
    _default_store.set(config)
