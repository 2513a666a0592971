import pytest

from relay_api.config.settings import RelaySettings

from fakes import FakeStore


@pytest.fixture
def settings() -> RelaySettings:
    return RelaySettings(migrate_on_startup=False, send_timeout_seconds=1.0, store_timeout_seconds=1.0)


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()
