from config.loader import TransportConfigLoader
from config.models.transport import (
    AiohttpServiceConfig,
    TcpConnectionConfig,
    TlsConfig,
    TransportServiceModel,
    TransportServiceType,
)

__all__ = [
    "TransportConfigLoader",
    "AiohttpServiceConfig",
    "TcpConnectionConfig",
    "TlsConfig",
    "TransportServiceModel",
    "TransportServiceType",
]
