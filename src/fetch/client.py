import logging
from types import TracebackType
from typing import Any
from typing_extensions import Self

from fetch.coordinator import FetchCoordinator
from fetch.request import Request
from fetch.response import Response
from transport.base import TransportService
from transport.engine import AiohttpTransportService


class FetchClient:
    """
    Thin gateway between callers and a TransportService. The client owns the
    transport's lifecycle when used as an async context manager and routes
    every fetch through a FetchCoordinator.
    """

    def __init__(
        self,
        transport: TransportService | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.transport = transport or AiohttpTransportService()
        self._logger = logger or logging.getLogger(f"[{self.__class__.__name__}]")
        self._coordinator = FetchCoordinator(self.transport, logger=self._logger)

    async def __aenter__(self) -> Self:
        await self.transport.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.transport.__aexit__(exc_type, exc_val, exc_tb)

    async def fetch(self, resource: str | Request, **init: Any) -> Response:
        """
        Fetch `resource` (an absolute URL or a Request). Keyword arguments are
        Request options: method, headers, body, signal, size, ...
        """
        request = Request(resource, **init)
        return await self._coordinator.execute(request)


_default_client: FetchClient | None = None


def set_default_transport(transport: TransportService | None) -> None:
    """Route module-level fetch() calls through `transport` (None restores the aiohttp default)."""
    global _default_client
    _default_client = FetchClient(transport) if transport is not None else None


def get_default_client() -> FetchClient:
    global _default_client
    if _default_client is None:
        _default_client = FetchClient()
    return _default_client


async def fetch(resource: str | Request, *, transport: TransportService | None = None, **init: Any) -> Response:
    """
    WHATWG-style fetch. Resolves with a Response once the transport reports a
    completed exchange; raises UnsupportedSchemeError, AbortError or
    FetchError otherwise.
    """
    client = FetchClient(transport) if transport is not None else get_default_client()
    return await client.fetch(resource, **init)
