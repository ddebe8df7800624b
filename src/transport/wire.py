"""
JSON-shaped wire form of the transport boundary.

A raw transport function receives

    {"Async": {"Fetch": {"method": ..., "url": ..., "headers": {name: [values]}}}}

together with the body payloads, and answers its callback with one of

    {"Ok": {"Ok": {"status": 200, "headers": [[name, value]], "body": {"Text": "..."}}}}
    {"Ok": {"Ok": {... "body": {"Binary": [104, 105]}}}}
    {"Ok": {"Err": "reason"}}
    {"Err": "detail"}

CallableTransportService adapts such a function to TransportService.
"""
import logging
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, conint

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


WireCallback = Callable[[Mapping[str, Any]], None]
CallService = Callable[[dict[str, Any], list[bytes], WireCallback], None]


class WireFetchCall(BaseModel):
    method: str
    url: str
    headers: dict[str, list[str]] = Field(default_factory=dict)


class WireAsyncCall(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    fetch: WireFetchCall = Field(alias="Fetch")


class WireServiceCall(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    async_call: WireAsyncCall = Field(alias="Async")


class WireTextBody(BaseModel):
    model_config = ConfigDict(extra="forbid")
    Text: str


class WireBinaryBody(BaseModel):
    model_config = ConfigDict(extra="forbid")
    Binary: list[conint(ge=0, le=255)]


class WireHttpResult(BaseModel):
    status: int
    headers: list[tuple[str, str]] = Field(default_factory=list)
    body: WireTextBody | WireBinaryBody

    def to_result(self) -> HttpResult:
        if isinstance(self.body, WireTextBody):
            body = TextBody(self.body.Text)
        else:
            body = BinaryBody(bytes(self.body.Binary))
        return HttpResult(status=self.status, headers=list(self.headers), body=body)


def encode_envelope(envelope: FetchEnvelope) -> dict[str, Any]:
    call = WireServiceCall(
        async_call=WireAsyncCall(
            fetch=WireFetchCall(
                method=envelope.method,
                url=envelope.url,
                headers=envelope.headers,
            )
        )
    )
    return call.model_dump(by_alias=True)


def _single_branch(layer: Mapping[str, Any], where: str) -> str:
    branches = [key for key in ("Ok", "Err") if key in layer]
    if len(branches) != 1:
        raise ValueError(f"{where} must carry exactly one of 'Ok' or 'Err', got {sorted(layer)}")
    return branches[0]


def decode_outcome(payload: Mapping[str, Any]) -> TransportOutcome:
    """
    Decode a wire outcome into the typed TransportOutcome.
    Raises ValueError (pydantic ValidationError included) on a malformed payload.
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"Transport outcome must be a mapping, got {type(payload).__name__}")

    if _single_branch(payload, "Transport outcome") == "Err":
        return SystemErr(str(payload["Err"]))

    inner = payload["Ok"]
    if not isinstance(inner, Mapping):
        raise ValueError(f"Request outcome must be a mapping, got {type(inner).__name__}")

    if _single_branch(inner, "Request outcome") == "Err":
        return SystemOk(RequestErr(str(inner["Err"])))

    result = WireHttpResult.model_validate(inner["Ok"])
    return SystemOk(RequestOk(result.to_result()))


class CallableTransportService(TransportService):
    """
    Adapts a raw call_service(request, payloads, callback) function speaking
    the wire form to the TransportService boundary.
    """

    def __init__(self, call_service: CallService) -> None:
        self._call_service = call_service
        self._logger = logging.getLogger(f"[{self.__class__.__name__}]")

    def call(
        self,
        envelope: FetchEnvelope,
        payloads: list[bytes],
        callback: TransportCallback,
    ) -> None:

        def on_wire_outcome(payload: Mapping[str, Any]) -> None:
            try:
                outcome = decode_outcome(payload)
            except (ValueError, ValidationError) as e:
                self._logger.warning(f"Malformed outcome for {envelope.method} {envelope.url}: {e}")
                outcome = SystemErr(f"malformed transport outcome: {e}")
            callback(outcome)

        self._call_service(encode_envelope(envelope), list(payloads), on_wire_outcome)
