from transport.base import (
    BinaryBody,
    FetchEnvelope,
    HttpResult,
    RequestErr,
    RequestOk,
    SystemErr,
    SystemOk,
    TextBody,
    TransportCallback,
    TransportOutcome,
    TransportService,
)
from transport.wire import (
    CallableTransportService,
    decode_outcome,
    encode_envelope,
)
from transport.engine import (
    AiohttpTransportService,
    TransportServiceFactory,
)

__all__ = [
    "BinaryBody",
    "FetchEnvelope",
    "HttpResult",
    "RequestErr",
    "RequestOk",
    "SystemErr",
    "SystemOk",
    "TextBody",
    "TransportCallback",
    "TransportOutcome",
    "TransportService",
    "CallableTransportService",
    "decode_outcome",
    "encode_envelope",
    "AiohttpTransportService",
    "TransportServiceFactory",
]
