"""Unit tests for binding an AbortSignal to an in-flight fetch"""

import asyncio
import pytest
from core.exceptions import AbortError, FetchError
from fetch.body import BodyStream
from fetch.client import FetchClient
from fetch.signal import AbortController
from transport.base import RequestErr, SystemErr, SystemOk
from tests.fixtures.transport import (
    FakeTransportService,
    InlineTransportService,
    ok_outcome,
    wait_for_dispatch,
)


@pytest.mark.unit
@pytest.mark.fetch
@pytest.mark.asyncio
class TestAlreadyAborted:
    """Tests for a signal that is aborted before fetch starts"""

    async def test_raises_without_calling_transport(self, controller):
        """
        GIVEN an aborted signal
        WHEN fetch is awaited
        THEN AbortError is raised, the transport is never called and no listener remains
        """
        transport = FakeTransportService(ok_outcome())
        client = FetchClient(transport)
        controller.abort()

        with pytest.raises(AbortError) as exc:
            await client.fetch("https://example.com/", signal=controller.signal)

        assert exc.value.type == "aborted"
        assert transport.calls == []
        assert controller.signal.listener_count() == 0

    async def test_request_body_stream_is_cancelled_with_abort_error(self, controller):
        transport = FakeTransportService(ok_outcome())
        client = FetchClient(transport)
        stream = BodyStream([b"chunk"])
        controller.abort()

        with pytest.raises(AbortError) as exc:
            await client.fetch("https://example.com/", method="POST", body=stream, signal=controller.signal)

        assert stream.destroyed
        assert stream.cancel_cause is exc.value


@pytest.mark.unit
@pytest.mark.fetch
@pytest.mark.asyncio
class TestAbortInFlight:
    """Tests for a signal that fires while the transport call is pending"""

    async def test_abort_rejects_pending_fetch(self, controller):
        """
        GIVEN a dispatched fetch whose transport has not answered
        WHEN the signal aborts
        THEN fetch raises AbortError and the listener is removed
        """
        transport = FakeTransportService()
        client = FetchClient(transport)

        task = asyncio.create_task(client.fetch("https://example.com/", signal=controller.signal))
        await wait_for_dispatch(transport)
        assert controller.signal.listener_count() == 1

        controller.abort()

        with pytest.raises(AbortError):
            await task
        assert controller.signal.listener_count() == 0

    async def test_late_transport_callback_is_ignored(self, controller):
        """
        GIVEN a fetch that was already rejected by an abort
        WHEN the transport answers afterwards
        THEN the callback neither raises nor changes the outcome
        """
        transport = FakeTransportService()
        client = FetchClient(transport)

        task = asyncio.create_task(client.fetch("https://example.com/", signal=controller.signal))
        await wait_for_dispatch(transport)
        controller.abort()

        with pytest.raises(AbortError):
            await task

        transport.deliver(ok_outcome())
        transport.deliver(SystemErr("late failure"))

        assert isinstance(task.exception(), AbortError)

    async def test_repeated_abort_event_is_harmless(self, controller):
        transport = FakeTransportService()
        client = FetchClient(transport)
        stream = BodyStream([b"payload"])

        task = asyncio.create_task(
            client.fetch("https://example.com/", method="POST", body=stream, signal=controller.signal)
        )
        await wait_for_dispatch(transport)

        controller.abort()
        controller.signal.dispatch_event("abort")
        controller.abort()

        with pytest.raises(AbortError):
            await task
        assert stream.destroyed

    async def test_abort_leaves_other_listeners_registered(self, controller):
        seen = []
        controller.signal.add_event_listener("abort", lambda event: seen.append(event.type))
        transport = FakeTransportService()
        client = FetchClient(transport)

        task = asyncio.create_task(client.fetch("https://example.com/", signal=controller.signal))
        await wait_for_dispatch(transport)
        controller.abort()

        with pytest.raises(AbortError):
            await task
        assert seen == ["abort"]
        assert controller.signal.listener_count() == 1

    async def test_abort_after_success_does_not_touch_response(self, controller):
        transport = FakeTransportService(ok_outcome())
        client = FetchClient(transport)

        response = await client.fetch("https://example.com/", signal=controller.signal)
        controller.abort()

        assert response.body.errored is None
        assert await response.text() == "ok"

    async def test_caller_cancellation_releases_listener(self, controller):
        transport = FakeTransportService()
        client = FetchClient(transport)

        task = asyncio.create_task(client.fetch("https://example.com/", signal=controller.signal))
        await wait_for_dispatch(transport)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert controller.signal.listener_count() == 0

        transport.deliver(ok_outcome())


@pytest.mark.unit
@pytest.mark.fetch
@pytest.mark.asyncio
class TestListenerCleanup:
    """Tests that exactly one listener exists per call and none survive it"""

    async def test_listener_removed_after_success(self, controller):
        client = FetchClient(FakeTransportService(ok_outcome()))

        await client.fetch("https://example.com/", signal=controller.signal)

        assert controller.signal.listener_count() == 0

    @pytest.mark.parametrize(
        "outcome",
        [SystemErr("network down"), SystemOk(RequestErr("ECONNREFUSED"))],
    )
    async def test_listener_removed_after_failure(self, controller, outcome):
        client = FetchClient(FakeTransportService(outcome))

        with pytest.raises(FetchError):
            await client.fetch("https://example.com/", signal=controller.signal)

        assert controller.signal.listener_count() == 0

    async def test_listener_removed_when_transport_answers_inline(self, controller):
        client = FetchClient(InlineTransportService(ok_outcome()))

        response = await client.fetch("https://example.com/", signal=controller.signal)

        assert response.status == 200
        assert controller.signal.listener_count() == 0

    async def test_shared_signal_returns_to_baseline_across_many_calls(self):
        """
        GIVEN one long-lived signal with an unrelated listener
        WHEN 1000 successful fetches share it
        THEN its listener count is back to the baseline after every call
        """
        controller = AbortController()
        controller.signal.add_event_listener("abort", lambda event: None)
        baseline = controller.signal.listener_count()
        transport = FakeTransportService(ok_outcome())
        client = FetchClient(transport)

        for _ in range(1000):
            response = await client.fetch("https://example.com/", signal=controller.signal)
            assert response.status == 200
            assert controller.signal.listener_count() == baseline

        assert len(transport.calls) == 1000
