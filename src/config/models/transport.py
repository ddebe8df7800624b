from enum import Enum
from pathlib import Path
from typing import Any
from pydantic import Field, BaseModel


class TransportServiceType(str, Enum):
    AIOHTTP = "aiohttp"


class TlsConfig(BaseModel):
    enabled: bool = False
    verify: bool = True
    ca_bundle: Path | None = None
    client_cert: Path | None = None
    client_key: Path | None = None


class TcpConnectionConfig(BaseModel):
    limit: int = 100
    limit_per_host: int = 0
    ttl_dns_cache: int = 300
    force_close: bool = False
    enable_cleanup_closed: bool = True
    tls: TlsConfig | None = None


class TransportServiceModel(BaseModel):
    """Base config for a transport service"""
    type: TransportServiceType

    def to_runtime_args(self) -> dict[str, Any]:
        return {}


class AiohttpServiceConfig(TransportServiceModel):
    """
    Settings for the aiohttp transport service. Redirect following,
    decompression and timeouts belong to the transport, so they are
    configured here rather than per fetch call.
    """
    type: TransportServiceType = Field(default=TransportServiceType.AIOHTTP)
    timeout_seconds: float = Field(default=30.0, gt=0, description="Total timeout of one exchange")
    follow_redirects: bool = True
    max_redirects: int = Field(default=20, ge=0)
    decompress: bool = True
    tcp_connection: TcpConnectionConfig = Field(default_factory=TcpConnectionConfig)

    def to_runtime_args(self) -> dict[str, Any]:
        return {
            "connector_config": self.tcp_connection,
            "timeout_seconds": self.timeout_seconds,
            "follow_redirects": self.follow_redirects,
            "max_redirects": self.max_redirects,
            "decompress": self.decompress,
        }
