import pytest
from .fixtures.configs.transport import aiohttp_config
from .fixtures.transport import FakeTransportService, ok_outcome
from fetch.client import FetchClient
from fetch.signal import AbortController


@pytest.fixture
def fake_transport():
    return FakeTransportService(ok_outcome())


@pytest.fixture
def client(fake_transport):
    return FetchClient(fake_transport)


@pytest.fixture
def controller():
    return AbortController()


__all__ = [
    'aiohttp_config',
]
