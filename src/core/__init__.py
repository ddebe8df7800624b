from core.abstract_factory import TypeAbstractFactory
from core.exceptions import (
    AbortError,
    FetchBaseError,
    FetchError,
    TransportError,
    UnsupportedSchemeError,
)
from core.logging import configure_logging, quiet_library_loggers

__all__ = [
    "TypeAbstractFactory",
    "AbortError",
    "FetchBaseError",
    "FetchError",
    "TransportError",
    "UnsupportedSchemeError",
    "configure_logging",
    "quiet_library_loggers",
]
