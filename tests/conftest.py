import pytest

from aioargon2 import Config, get_config_store, reset_offloader


@pytest.fixture(autouse=True)
def clean_globals():
    """Each test starts without a config and without an offloader."""
    get_config_store().clear()
    reset_offloader()
    yield
    get_config_store().clear()
    reset_offloader()


@pytest.fixture
def config():
    """Cheap parameters so the suite stays fast."""
    return Config(memory_cost=256, iterations=1, parallelism=1, output_length=32)
