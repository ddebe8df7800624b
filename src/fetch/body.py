from __future__ import annotations
from abc import ABC, abstractmethod
import json
from typing import Any, AsyncIterable, AsyncIterator, Iterable, Iterator

from core.exceptions import FetchBaseError, FetchError


DEFAULT_HIGH_WATER_MARK = 16384


class BodyStream:
    """
    Cancellable async stream of body chunks.

    The stream is fed either by bytes (split into chunks of at most
    `high_water_mark` bytes) or by an iterable / async iterable of chunks.
    Whoever coordinates the request decides when it is cancelled:
      • cancel(cause) stops further chunks and, if a cause is given, makes
        the next read raise it.
      • emit_error(error) leaves the source alone but makes the next read
        raise `error`, so a consumer in the middle of reading observes it.
    Both are idempotent.
    """

    def __init__(
        self,
        source: bytes | Iterable[bytes] | AsyncIterable[bytes] | None = None,
        high_water_mark: int = DEFAULT_HIGH_WATER_MARK,
    ) -> None:
        if high_water_mark <= 0:
            raise ValueError("high_water_mark must be a positive number of bytes")

        self.high_water_mark = high_water_mark
        self._sync_chunks: Iterator[bytes] | None = None
        self._async_chunks: AsyncIterator[bytes] | None = None

        if source is None:
            self._sync_chunks = iter(())
        elif isinstance(source, (bytes, bytearray, memoryview)):
            self._sync_chunks = self._split(bytes(source))
        elif hasattr(source, "__aiter__"):
            self._async_chunks = source.__aiter__()
        else:
            self._sync_chunks = iter(source)

        self._error: BaseException | None = None
        self._cancelled = False
        self._cancel_cause: BaseException | None = None
        self._finished = False

    def _split(self, data: bytes) -> Iterator[bytes]:
        for offset in range(0, len(data), self.high_water_mark):
            yield data[offset : offset + self.high_water_mark]

    @property
    def destroyed(self) -> bool:
        return self._cancelled

    @property
    def cancel_cause(self) -> BaseException | None:
        return self._cancel_cause

    @property
    def errored(self) -> BaseException | None:
        return self._error

    def cancel(self, cause: BaseException | None = None) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._cancel_cause = cause
        if cause is not None and self._error is None:
            self._error = cause

    def emit_error(self, error: BaseException) -> None:
        if self._error is None:
            self._error = error

    def __aiter__(self) -> BodyStream:
        return self

    async def __anext__(self) -> bytes:
        if self._error is not None:
            raise self._error
        if self._cancelled or self._finished:
            raise StopAsyncIteration

        try:
            if self._async_chunks is not None:
                chunk = await self._async_chunks.__anext__()
            else:
                chunk = next(self._sync_chunks)
        except (StopIteration, StopAsyncIteration):
            self._finished = True
            raise StopAsyncIteration

        # an error may have been emitted while the source was producing
        if self._error is not None:
            raise self._error
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        return bytes(chunk)


def extract_body(body: Any, high_water_mark: int = DEFAULT_HIGH_WATER_MARK) -> tuple[BodyStream | None, str | None]:
    """
    Turn a request/response body into a stream and its implied Content-Type.
    """
    if body is None:
        return None, None
    if isinstance(body, BodyStream):
        return body, None
    if isinstance(body, str):
        return BodyStream(body.encode("utf-8"), high_water_mark), "text/plain;charset=UTF-8"
    if isinstance(body, (bytes, bytearray, memoryview)):
        return BodyStream(bytes(body), high_water_mark), None
    if hasattr(body, "__aiter__") or (hasattr(body, "__iter__") and not isinstance(body, dict)):
        return BodyStream(body, high_water_mark), None

    return BodyStream(str(body).encode("utf-8"), high_water_mark), "text/plain;charset=UTF-8"


class Body(ABC):
    """
    Body mixin shared by Request and Response. The body can be consumed
    exactly once through array_buffer(), text() or json().
    """

    def __init__(
        self,
        body: Any = None,
        *,
        size: int = 0,
        high_water_mark: int = DEFAULT_HIGH_WATER_MARK,
    ) -> None:
        self._stream, self._content_type = extract_body(body, high_water_mark)
        self.size = size
        self._body_used = False

    @property
    @abstractmethod
    def url(self) -> str: ...

    @property
    def body(self) -> BodyStream | None:
        return self._stream

    @property
    def body_used(self) -> bool:
        return self._body_used

    async def array_buffer(self) -> bytes:
        return await consume_body(self)

    async def text(self) -> str:
        return (await consume_body(self)).decode("utf-8", errors="replace")

    async def json(self) -> Any:
        text = await self.text()
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise FetchError(f"invalid json response body at {self.url} reason: {e}", "invalid-json") from e


async def consume_body(data: Body) -> bytes:
    """
    Read the whole body of `data`, enforcing its size limit (0 disables it).
    """
    if data.body_used:
        raise TypeError(f"body used already for: {data.url}")
    data._body_used = True

    stream = data.body
    if stream is None:
        return b""

    accum = bytearray()
    try:
        async for chunk in stream:
            if data.size > 0 and len(accum) + len(chunk) > data.size:
                error = FetchError(f"content size at {data.url} over limit: {data.size}", "max-size")
                stream.cancel(error)
                raise error
            accum += chunk

    except FetchBaseError:
        raise
    except Exception as e:
        raise FetchError(f"Invalid response body while trying to fetch {data.url}: {e}", "system", e) from e

    return bytes(accum)
