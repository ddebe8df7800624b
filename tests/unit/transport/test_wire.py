"""Unit tests for the JSON-shaped transport wire codec"""

import pytest
from pydantic import ValidationError

from fetch.client import FetchClient
from transport.base import (
    BinaryBody,
    FetchEnvelope,
    HttpResult,
    RequestErr,
    RequestOk,
    SystemErr,
    SystemOk,
    TextBody,
)
from transport.wire import CallableTransportService, decode_outcome, encode_envelope


@pytest.mark.unit
@pytest.mark.transport
class TestEncodeEnvelope:

    def test_envelope_is_tagged_as_async_fetch(self):
        envelope = FetchEnvelope(method="GET", url="https://example.com/", headers={"accept": ["*/*"]})

        assert encode_envelope(envelope) == {
            "Async": {
                "Fetch": {
                    "method": "GET",
                    "url": "https://example.com/",
                    "headers": {"accept": ["*/*"]},
                }
            }
        }


@pytest.mark.unit
@pytest.mark.transport
class TestDecodeOutcome:
    """Tests for decoding the two-layer outcome"""

    def test_text_result(self):
        payload = {"Ok": {"Ok": {"status": 200, "headers": [["content-type", "text/plain"]], "body": {"Text": "ok"}}}}

        assert decode_outcome(payload) == SystemOk(
            RequestOk(HttpResult(status=200, headers=[("content-type", "text/plain")], body=TextBody("ok")))
        )

    def test_binary_result(self):
        payload = {"Ok": {"Ok": {"status": 201, "headers": [], "body": {"Binary": [104, 105]}}}}

        outcome = decode_outcome(payload)

        assert outcome.inner.result.body == BinaryBody(b"hi")

    def test_request_error(self):
        assert decode_outcome({"Ok": {"Err": "dns failure"}}) == SystemOk(RequestErr("dns failure"))

    def test_system_error(self):
        assert decode_outcome({"Err": "io"}) == SystemErr("io")

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"Ok": {}, "Err": "both"},
            {"Ok": {"Ok": {}, "Err": "both"}},
            {"Ok": "not a mapping"},
        ],
    )
    def test_exactly_one_branch_per_layer(self, payload):
        with pytest.raises(ValueError):
            decode_outcome(payload)

    def test_byte_values_are_validated(self):
        payload = {"Ok": {"Ok": {"status": 200, "headers": [], "body": {"Binary": [256]}}}}

        with pytest.raises(ValidationError):
            decode_outcome(payload)


@pytest.mark.unit
@pytest.mark.transport
@pytest.mark.asyncio
class TestCallableTransportService:
    """Tests for adapting a raw call_service function"""

    async def test_fetch_through_raw_call_service(self):
        """
        GIVEN a raw call_service speaking the wire form
        WHEN fetch runs through CallableTransportService
        THEN the function receives the tagged request and its answer becomes the Response
        """
        received = []

        def call_service(request, payloads, callback):
            received.append((request, payloads))
            callback({"Ok": {"Ok": {"status": 202, "headers": [["x-id", "7"]], "body": {"Text": "queued"}}}})

        client = FetchClient(CallableTransportService(call_service))

        response = await client.fetch("https://example.com/jobs", method="POST", body=b"job")

        request, payloads = received[0]
        assert request["Async"]["Fetch"]["method"] == "POST"
        assert request["Async"]["Fetch"]["url"] == "https://example.com/jobs"
        assert payloads == [b"job"]
        assert response.status == 202
        assert response.headers.get("x-id") == "7"
        assert await response.text() == "queued"

    async def test_malformed_outcome_becomes_system_error(self):
        outcomes = []

        def call_service(request, payloads, callback):
            callback({"Unexpected": True})

        service = CallableTransportService(call_service)
        service.call(FetchEnvelope(method="GET", url="https://example.com/"), [b""], outcomes.append)

        assert isinstance(outcomes[0], SystemErr)
        assert "malformed transport outcome" in outcomes[0].detail
