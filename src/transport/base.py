from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import TracebackType
from typing import Callable, Union


@dataclass(frozen=True)
class FetchEnvelope:
    """
    Transport-agnostic request descriptor handed to a TransportService.
    The request body travels next to it as a list of byte payloads.
    """
    method: str
    url: str
    headers: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True)
class TextBody:
    text: str


@dataclass(frozen=True)
class BinaryBody:
    data: bytes


@dataclass(frozen=True)
class HttpResult:
    """
    Completed HTTP exchange as reported by the transport.
    • status: HTTP status code
    • headers: raw (name, value) pairs in arrival order
    • body: decoded text or raw bytes
    """
    status: int
    headers: list[tuple[str, str]]
    body: TextBody | BinaryBody


@dataclass(frozen=True)
class RequestOk:
    result: HttpResult


@dataclass(frozen=True)
class RequestErr:
    """The HTTP exchange itself failed: connection refused, DNS failure, timeout."""
    reason: str


@dataclass(frozen=True)
class SystemOk:
    inner: RequestOk | RequestErr


@dataclass(frozen=True)
class SystemErr:
    """Invoking the transport failed before any HTTP exchange could be reported."""
    detail: str


TransportOutcome = Union[SystemOk, SystemErr]
TransportCallback = Callable[[TransportOutcome], None]


class TransportService(ABC):
    """
    The single network-performing dependency of fetch. A service accepts an
    envelope plus body payloads and reports exactly one TransportOutcome to
    the callback, asynchronously. Connection management, TLS, compression and
    redirect following all live behind this boundary. A service is also the
    lifecycle manager of whatever session it holds.
    """

    async def __aenter__(self) -> TransportService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        return None

    @abstractmethod
    def call(
        self,
        envelope: FetchEnvelope,
        payloads: list[bytes],
        callback: TransportCallback,
    ) -> None:
        ...
