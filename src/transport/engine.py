import asyncio
import logging
import ssl
from types import TracebackType
from typing_extensions import Self
from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout, TCPConnector

from config.models.transport import TcpConnectionConfig, TlsConfig, TransportServiceType
from core.abstract_factory import TypeAbstractFactory
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


# Media types whose bodies are reported as text even without a declared charset
TEXT_MEDIA_TYPES = frozenset({
    "application/json",
    "application/javascript",
    "application/xml",
    "application/x-www-form-urlencoded",
    "image/svg+xml",
})


class TransportServiceFactory(TypeAbstractFactory[TransportServiceType, TransportService]):
    pass


@TransportServiceFactory.register(TransportServiceType.AIOHTTP)
class AiohttpTransportService(TransportService):
    """
    TransportService that performs the exchange with aiohttp.ClientSession.
    Each call runs as a task on the running loop and reports its outcome to
    the callback when the task finishes. Used as an async context manager the
    service shares one session across calls; otherwise every exchange opens
    and closes its own session.
    """

    def __init__(
        self,
        connector_config: TcpConnectionConfig | None = None,
        timeout_seconds: float = 30.0,
        follow_redirects: bool = True,
        max_redirects: int = 20,
        decompress: bool = True,
    ) -> None:
        self._connector_config = connector_config or TcpConnectionConfig()
        self._timeout = ClientTimeout(total=timeout_seconds)
        self._follow_redirects = follow_redirects
        self._max_redirects = max_redirects
        self._decompress = decompress

        self._session: ClientSession | None = None
        self._tasks: set[asyncio.Task[TransportOutcome]] = set()
        self._logger = logging.getLogger(f"[{self.__class__.__name__}]")

    @property
    def session(self) -> ClientSession | None:
        return self._session

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _build_ssl_context(self, cfg: TlsConfig) -> ssl.SSLContext:
        context = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH)

        if not cfg.verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        if cfg.ca_bundle:
            context.load_verify_locations(cafile=str(cfg.ca_bundle))

        if cfg.client_cert:
            context.load_cert_chain(
                certfile=str(cfg.client_cert),
                keyfile=str(cfg.client_key) if cfg.client_key else None,
            )

        return context

    def _build_tcp_connector(self, cfg: TcpConnectionConfig) -> TCPConnector:
        kwargs = cfg.model_dump(exclude={"tls"})

        if cfg.tls and cfg.tls.enabled:
            kwargs["ssl"] = self._build_ssl_context(cfg.tls)

        return TCPConnector(**kwargs)

    def _new_session(self) -> ClientSession:
        return ClientSession(
            connector=self._build_tcp_connector(self._connector_config),
            timeout=self._timeout,
            auto_decompress=self._decompress,
        )

    async def __aenter__(self) -> Self:
        if self._session is None or self._session.closed:
            self._session = self._new_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def call(
        self,
        envelope: FetchEnvelope,
        payloads: list[bytes],
        callback: TransportCallback,
    ) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._exchange(envelope, b"".join(payloads)))
        self._tasks.add(task)

        def _complete(finished: asyncio.Task[TransportOutcome]) -> None:
            self._tasks.discard(finished)
            callback(self._outcome_of(envelope, finished))

        task.add_done_callback(_complete)

    def _outcome_of(self, envelope: FetchEnvelope, task: asyncio.Task[TransportOutcome]) -> TransportOutcome:
        if task.cancelled():
            return SystemErr(f"transport call for {envelope.url} was cancelled")

        error = task.exception()
        if error is not None:
            self._logger.error(f"Transport failure for {envelope.method} {envelope.url}: {error}")
            return SystemErr(f"{type(error).__name__}: {error}")

        return task.result()

    async def _exchange(self, envelope: FetchEnvelope, data: bytes) -> TransportOutcome:
        try:
            if self._session is None or self._session.closed:
                async with self._new_session() as session:
                    result = await self._send(session, envelope, data)
            else:
                result = await self._send(self._session, envelope, data)

        except (ClientError, asyncio.TimeoutError) as e:
            self._logger.warning(f"{envelope.method} {envelope.url} failed: {type(e).__name__}: {e}")
            return SystemOk(RequestErr(f"{type(e).__name__}: {e}"))

        return SystemOk(RequestOk(result))

    async def _send(self, session: ClientSession, envelope: FetchEnvelope, data: bytes) -> HttpResult:
        headers = [(name, value) for name, values in envelope.headers.items() for value in values]

        async with session.request(
            envelope.method,
            envelope.url,
            headers=headers,
            data=data or None,
            allow_redirects=self._follow_redirects,
            max_redirects=self._max_redirects,
        ) as response:
            raw = await response.read()
            return HttpResult(
                status=response.status,
                headers=[(name, value) for name, value in response.headers.items()],
                body=self._decode_body(response, raw),
            )

    def _decode_body(self, response: ClientResponse, raw: bytes) -> TextBody | BinaryBody:
        """
        Text bodies travel as str and are re-encoded as UTF-8 by the Response,
        so only bytes that are valid UTF-8 may be reported as TextBody.
        """
        charset = response.charset
        media_type = response.content_type

        if charset is None and not (media_type.startswith("text/") or media_type in TEXT_MEDIA_TYPES):
            return BinaryBody(raw)

        try:
            return TextBody(raw.decode("utf-8"))
        except UnicodeDecodeError:
            return BinaryBody(raw)
