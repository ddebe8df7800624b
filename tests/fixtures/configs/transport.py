import pytest
from config.models.transport import (
    AiohttpServiceConfig,
    TcpConnectionConfig,
    TransportServiceType,
)


@pytest.fixture
def aiohttp_config():
    return AiohttpServiceConfig(
        type=TransportServiceType.AIOHTTP,
        timeout_seconds=15,
        max_redirects=5,
        tcp_connection=TcpConnectionConfig(limit=50),
    )


def tcp_config_no_tls() -> TcpConnectionConfig:
    return TcpConnectionConfig(
        limit=10,
        limit_per_host=2,
        ttl_dns_cache=60,
        force_close=False,
        enable_cleanup_closed=True,
        tls=None,
    )
