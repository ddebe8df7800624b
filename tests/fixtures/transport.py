import asyncio
from transport.base import (
    BinaryBody,
    FetchEnvelope,
    HttpResult,
    RequestOk,
    SystemOk,
    TextBody,
    TransportCallback,
    TransportOutcome,
    TransportService,
)


class FakeTransportService(TransportService):
    """
    Records every call. When constructed with an outcome it answers each call
    on the next loop iteration; otherwise callbacks are held until deliver().
    """

    def __init__(self, outcome: TransportOutcome | None = None):
        self.outcome = outcome
        self.calls: list[tuple[FetchEnvelope, list[bytes]]] = []
        self.callbacks: list[TransportCallback] = []

    def call(
        self,
        envelope: FetchEnvelope,
        payloads: list[bytes],
        callback: TransportCallback,
    ) -> None:
        self.calls.append((envelope, payloads))
        self.callbacks.append(callback)
        if self.outcome is not None:
            asyncio.get_running_loop().call_soon(callback, self.outcome)

    def deliver(self, outcome: TransportOutcome) -> None:
        for callback in self.callbacks:
            callback(outcome)

    @property
    def last_envelope(self) -> FetchEnvelope:
        return self.calls[-1][0]


class InlineTransportService(FakeTransportService):
    """Answers inside call(), before the coordinator starts awaiting."""

    def call(
        self,
        envelope: FetchEnvelope,
        payloads: list[bytes],
        callback: TransportCallback,
    ) -> None:
        self.calls.append((envelope, payloads))
        self.callbacks.append(callback)
        callback(self.outcome)


class RaisingTransportService(TransportService):

    def call(
        self,
        envelope: FetchEnvelope,
        payloads: list[bytes],
        callback: TransportCallback,
    ) -> None:
        raise RuntimeError("service bus unavailable")


def ok_outcome(
    status: int = 200,
    headers: list[tuple[str, str]] | None = None,
    body: TextBody | BinaryBody | None = None,
) -> SystemOk:
    return SystemOk(
        RequestOk(
            HttpResult(
                status=status,
                headers=headers if headers is not None else [("content-type", "text/plain")],
                body=body if body is not None else TextBody("ok"),
            )
        )
    )


async def wait_for_dispatch(transport: FakeTransportService, calls: int = 1) -> None:
    for _ in range(100):
        if len(transport.calls) >= calls:
            return
        await asyncio.sleep(0)
    raise AssertionError("transport was never called")


class AnswerThenRaiseTransportService(InlineTransportService):
    """Delivers its outcome inside call() and then raises."""

    def call(
        self,
        envelope: FetchEnvelope,
        payloads: list[bytes],
        callback: TransportCallback,
    ) -> None:
        super().call(envelope, payloads, callback)
        raise RuntimeError("service bus hiccup")
