import asyncio
import logging
from urllib.parse import urlsplit

from core.exceptions import AbortError, FetchError, TransportError, UnsupportedSchemeError
from fetch.data_uri import decode_data_uri
from fetch.headers import collect_request_headers, from_raw_headers
from fetch.request import Request
from fetch.response import Response
from fetch.signal import AbortEvent, AbortSubscription
from transport.base import (
    FetchEnvelope,
    RequestErr,
    RequestOk,
    SystemErr,
    SystemOk,
    TextBody,
    TransportOutcome,
    TransportService,
)


SUPPORTED_SCHEMES = frozenset({"data", "http", "https"})

# The transport does not report a reason phrase
STATUS_TEXT_PLACEHOLDER = "No status"

ABORT_MESSAGE = "The operation was aborted."


def check_scheme(url: str) -> str:
    """Return the lower-cased scheme of `url`, or raise if fetch cannot load it."""
    scheme = urlsplit(url).scheme.lower()
    if scheme not in SUPPORTED_SCHEMES:
        raise UnsupportedSchemeError(url, scheme)
    return scheme


class FetchCoordinator:
    """
    Runs the lifecycle of one fetch against a TransportService:
    • rejects unsupported schemes before anything else happens
    • answers data: URIs locally
    • binds the request's AbortSignal to the pending call for exactly the
      duration of the call
    • dispatches the envelope and translates the outcome into a Response or
      a typed error
    The coordinator holds no per-call state, so one instance can serve any
    number of concurrent calls.
    """

    def __init__(self, transport: TransportService, logger: logging.Logger | None = None) -> None:
        self.transport = transport
        self._logger = logger or logging.getLogger(f"[{self.__class__.__name__}]")

    async def execute(self, request: Request) -> Response:
        scheme = check_scheme(request.url)
        request_body = await request.array_buffer()

        signal = request.signal
        if signal is not None and signal.aborted:
            error = AbortError(ABORT_MESSAGE)
            self._cancel_request_body(request, error)
            self._logger.info(f"{request.method} {request.url} aborted before dispatch")
            raise error

        if scheme == "data":
            return self._from_data_uri(request)

        loop = asyncio.get_running_loop()
        settlement: asyncio.Future[Response] = loop.create_future()
        response: Response | None = None

        def reject(error: BaseException) -> None:
            if not settlement.done():
                settlement.set_exception(error)

        def abort(event: AbortEvent) -> None:
            subscription.release()
            error = AbortError(ABORT_MESSAGE)
            self._logger.info(f"{request.method} {request.url} aborted")
            reject(error)
            self._cancel_request_body(request, error)

            # response is assigned only after release, so this branch is not reached
            if response is not None:
                response.body.emit_error(error)

        def on_complete(outcome: TransportOutcome) -> None:
            nonlocal response

            if settlement.done():
                self._logger.debug(f"Ignoring late transport outcome for {request.url}")
                return

            try:
                translated = self._translate(request, outcome)
            except FetchError as error:
                subscription.release()
                reject(error)
                return

            subscription.release()
            response = translated
            settlement.set_result(translated)

        with AbortSubscription(signal, abort) as subscription:
            envelope = self._build_envelope(request)
            self._logger.debug(f"-> {envelope.method} {envelope.url}")

            try:
                self.transport.call(envelope, [request_body], on_complete)
            except Exception as e:
                if not settlement.done():
                    raise FetchError(f"io error: {e}", "system", e) from e
                self._logger.warning(f"Transport raised after reporting an outcome for {request.url}: {e}")

            return await settlement

    def _cancel_request_body(self, request: Request, error: AbortError) -> None:
        if request.body is not None:
            request.body.cancel(error)

    def _from_data_uri(self, request: Request) -> Response:
        data = decode_data_uri(request.url)
        return Response(data.data, url=request.url, headers={"Content-Type": data.type_full})

    def _build_envelope(self, request: Request) -> FetchEnvelope:
        return FetchEnvelope(
            method=request.method,
            url=request.url,
            headers=collect_request_headers(request.headers),
        )

    def _translate(self, request: Request, outcome: TransportOutcome) -> Response:
        """
        Map the two-layer transport outcome onto the three terminal cases:
        transport failure, request failure, completed exchange.
        """
        if isinstance(outcome, SystemErr):
            raise FetchError(f"io error: {outcome.detail}", "system", outcome.detail) from TransportError(outcome.detail)

        if not isinstance(outcome, SystemOk):
            raise FetchError(f"io error: unrecognized transport outcome {outcome!r}", "system")

        inner = outcome.inner
        if isinstance(inner, RequestErr):
            raise FetchError(
                f"request to {request.url} failed, reason: {inner.reason}",
                "system",
                inner.reason,
            ) from TransportError(inner.reason)

        if not isinstance(inner, RequestOk):
            raise FetchError(f"io error: unrecognized request outcome {inner!r}", "system")

        result = inner.result
        headers = from_raw_headers(result.headers)

        # Redirects and decompression were handled by the transport
        if isinstance(result.body, TextBody):
            body: str | bytes = result.body.text
        else:
            body = bytes(result.body.data)

        self._logger.debug(f"<- {result.status} {request.url}")

        return Response(
            body,
            url=request.url,
            status=result.status,
            status_text=STATUS_TEXT_PLACEHOLDER,
            headers=headers,
            size=request.size,
            counter=request.counter,
            high_water_mark=request.high_water_mark,
        )
