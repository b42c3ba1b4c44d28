"""
Unit Tests for Configuration
============================
Tests for the config model, the store and its reader/writer lock.
"""

import dataclasses
import os
import threading
import time

import pytest
from argon2 import Type

from aioargon2.config import (
    Config,
    ConfigSnapshot,
    ConfigStore,
    ReadWriteLock,
    Version,
    get_config_store,
    parse_algorithm,
    set_config,
)
from aioargon2.errors import MissingConfigError


class TestConfig:
    """Tests for the Config model."""

    def test_insecure_defaults(self):
        """Insecure preset is Argon2id v19 with cheap costs."""
        config = Config.new_insecure()

        assert config == Config()
        assert config.algorithm == Type.ID
        assert config.version == Version.V0x13
        assert config.secret_key is None
        assert config.memory_cost == 512
        assert config.iterations == 3
        assert config.parallelism == 1
        assert config.output_length == 32

    def test_secure_preset(self):
        config = Config.new()

        assert config.memory_cost == 8192
        assert config.iterations == 200
        assert config.parallelism == (os.cpu_count() or 1)

    @pytest.mark.parametrize("cpus, lanes", [(8, 8), (None, 1)])
    def test_secure_preset_uses_logical_cpus(self, monkeypatch, cpus, lanes):
        """Lanes follow os.cpu_count() as reported, SMT siblings included."""
        monkeypatch.setattr(os, "cpu_count", lambda: cpus)

        assert Config.new().parallelism == lanes

    def test_is_immutable(self):
        """Changes go through replace(), never field mutation."""
        config = Config()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.memory_cost = 1024

        updated = dataclasses.replace(config, memory_cost=1024)
        assert updated.memory_cost == 1024
        assert config.memory_cost == 512

    def test_repr_hides_secret(self):
        config = Config(secret_key=b"pepper-value")

        assert "pepper-value" not in repr(config)

    def test_parse_algorithm(self):
        assert parse_algorithm("argon2id") == Type.ID
        assert parse_algorithm("I") == Type.I
        assert parse_algorithm(" argon2d ") == Type.D

        with pytest.raises(ValueError):
            parse_algorithm("bcrypt")

    def test_from_env(self, monkeypatch):
        """Should read every field from the environment."""
        monkeypatch.setenv("ARGON2_ALGORITHM", "argon2i")
        monkeypatch.setenv("ARGON2_VERSION", "0x10")
        monkeypatch.setenv("ARGON2_SECRET_KEY", "pepper")
        monkeypatch.setenv("ARGON2_MEMORY_COST", "1024")
        monkeypatch.setenv("ARGON2_ITERATIONS", "4")
        monkeypatch.setenv("ARGON2_PARALLELISM", "2")
        monkeypatch.setenv("ARGON2_OUTPUT_LENGTH", "64")

        config = Config.from_env()

        assert config == Config(
            algorithm=Type.I,
            version=Version.V0x10,
            secret_key=b"pepper",
            memory_cost=1024,
            iterations=4,
            parallelism=2,
            output_length=64,
        )

    def test_from_env_defaults(self, monkeypatch):
        for name in ("ALGORITHM", "VERSION", "SECRET_KEY", "MEMORY_COST",
                     "ITERATIONS", "PARALLELISM", "OUTPUT_LENGTH"):
            monkeypatch.delenv(f"ARGON2_{name}", raising=False)

        assert Config.from_env() == Config()

    def test_from_env_does_not_install(self, monkeypatch):
        monkeypatch.setenv("ARGON2_ITERATIONS", "4")

        Config.from_env()

        assert get_config_store().is_configured is False


class TestConfigStore:
    """Tests for ConfigStore."""

    def test_snapshot_without_config(self):
        """An empty store never falls back to defaults."""
        store = ConfigStore()

        with pytest.raises(MissingConfigError):
            store.snapshot()

    def test_set_and_snapshot(self):
        store = ConfigStore()
        config = Config(secret_key=b"key", memory_cost=1024)

        store.set(config)
        snapshot = store.snapshot()

        assert isinstance(snapshot, ConfigSnapshot)
        assert snapshot.memory_cost == 1024
        assert snapshot.secret_key == b"key"
        assert store.is_configured is True

    def test_set_replaces_whole_value(self):
        store = ConfigStore()
        store.set(Config(secret_key=b"old", iterations=5))

        store.set(Config())

        snapshot = store.snapshot()
        assert snapshot.secret_key is None
        assert snapshot.iterations == 3

    def test_snapshot_is_independent_of_later_sets(self):
        store = ConfigStore(Config(iterations=2))
        snapshot = store.snapshot()

        store.set(Config(iterations=9))

        assert snapshot.iterations == 2
        assert store.snapshot().iterations == 9

    def test_set_rejects_non_config(self):
        with pytest.raises(TypeError):
            ConfigStore().set({"iterations": 3})

    def test_clear(self):
        store = ConfigStore(Config())

        store.clear()

        assert store.is_configured is False
        with pytest.raises(MissingConfigError):
            store.snapshot()

    def test_module_level_set_config(self):
        set_config(Config(iterations=7))

        assert get_config_store().snapshot().iterations == 7


class TestReadWriteLock:
    """Tests for the reader/writer lock."""

    def test_readers_share(self):
        """Two readers hold the lock at the same time."""
        lock = ReadWriteLock()
        barrier = threading.Barrier(2, timeout=2)
        errors = []

        def reader():
            with lock.read():
                try:
                    barrier.wait()
                except threading.BrokenBarrierError as exc:
                    errors.append(exc)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        assert errors == []

    def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        acquired = threading.Event()

        def reader():
            with lock.read():
                acquired.set()

        with lock.write():
            thread = threading.Thread(target=reader)
            thread.start()
            time.sleep(0.05)
            assert not acquired.is_set()

        thread.join(5)
        assert acquired.is_set()

    def test_writer_waits_for_readers(self):
        lock = ReadWriteLock()
        written = threading.Event()

        def writer():
            with lock.write():
                written.set()

        with lock.read():
            thread = threading.Thread(target=writer)
            thread.start()
            time.sleep(0.05)
            assert not written.is_set()

        thread.join(5)
        assert written.is_set()
