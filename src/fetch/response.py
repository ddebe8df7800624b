from __future__ import annotations
import json
from typing import Any

from fetch.body import DEFAULT_HIGH_WATER_MARK, Body
from fetch.headers import Headers, HeadersInit
from fetch.utils import is_redirect


class Response(Body):
    """
    Result of a fetch. Built either from a transport HttpResult or directly
    from a payload (data: URIs). `body` stays readable after fetch returns.
    """

    def __init__(
        self,
        body: Any = None,
        *,
        url: str | None = None,
        status: int = 200,
        status_text: str = "",
        headers: HeadersInit | None = None,
        size: int = 0,
        counter: int = 0,
        high_water_mark: int = DEFAULT_HIGH_WATER_MARK,
        type: str = "default",
    ) -> None:
        super().__init__(body, size=size, high_water_mark=high_water_mark)

        self._headers = Headers(headers)
        if self._content_type is not None and not self._headers.has("Content-Type"):
            self._headers.append("Content-Type", self._content_type)

        self._url = url or ""
        self._status = status
        self._status_text = status_text
        self._type = type
        self.counter = counter
        self.high_water_mark = high_water_mark

    @property
    def url(self) -> str:
        return self._url

    @property
    def status(self) -> int:
        return self._status

    @property
    def ok(self) -> bool:
        """Whether the status is in the 2xx range."""
        return 200 <= self._status < 300

    @property
    def redirected(self) -> bool:
        return self.counter > 0

    @property
    def status_text(self) -> str:
        return self._status_text

    @property
    def headers(self) -> Headers:
        return self._headers

    @property
    def type(self) -> str:
        return self._type

    @classmethod
    def redirect(cls, url: str, status: int = 302) -> Response:
        if not is_redirect(status):
            raise ValueError('Failed to execute "redirect" on "response": Invalid status code')
        return cls(None, headers={"Location": url}, status=status)

    @classmethod
    def error(cls) -> Response:
        return cls(None, status=0, status_text="", type="error")

    @classmethod
    def json_response(cls, data: Any, *, status: int = 200, headers: HeadersInit | None = None) -> Response:
        response_headers = Headers(headers)
        if not response_headers.has("Content-Type"):
            response_headers.set("Content-Type", "application/json")
        return cls(json.dumps(data), status=status, headers=response_headers)

    def __repr__(self) -> str:
        return f"Response(status={self._status}, url={self._url!r})"
