from __future__ import annotations
from typing import Any
from urllib.parse import urlsplit

from fetch.body import DEFAULT_HIGH_WATER_MARK, Body
from fetch.headers import Headers, HeadersInit
from fetch.signal import AbortSignal


NORMALIZED_METHODS = frozenset({"DELETE", "GET", "HEAD", "OPTIONS", "POST", "PUT"})
REDIRECT_MODES = frozenset({"follow", "error", "manual"})

_UNSET: Any = object()


def _parse_url(resource: str) -> str:
    parts = urlsplit(resource)
    if not parts.scheme:
        raise TypeError(f"Invalid URL: {resource!r} is not an absolute URL")
    if parts.username or parts.password:
        raise TypeError(f"{resource} is an url with embedded credentials.")
    return resource


class Request(Body):
    """
    Immutable description of one fetch: method, absolute URL, headers, body
    and the options the response inherits (size, counter, high_water_mark).
    `resource` may be another Request, whose settings become the defaults.
    """

    def __init__(
        self,
        resource: str | Request,
        *,
        method: str | None = None,
        headers: HeadersInit | None = None,
        body: Any = _UNSET,
        signal: AbortSignal | None = _UNSET,
        redirect: str | None = None,
        follow: int | None = None,
        compress: bool | None = None,
        size: int | None = None,
        counter: int | None = None,
        high_water_mark: int | None = None,
    ) -> None:
        source = resource if isinstance(resource, Request) else None
        url = source.url if source is not None else _parse_url(str(resource))

        method = method or (source.method if source is not None else "GET")
        if method.upper() in NORMALIZED_METHODS:
            method = method.upper()

        if body is _UNSET:
            body = None
            if source is not None and source.body is not None:
                if source.body_used:
                    raise TypeError("Cannot construct a Request with a Body that has already been used")
                # the stream moves to the new request
                body = source.body
                source._body_used = True

        if body is not None and method in ("GET", "HEAD"):
            raise TypeError("Request with GET/HEAD method cannot have body")

        if high_water_mark is None:
            high_water_mark = source.high_water_mark if source is not None else DEFAULT_HIGH_WATER_MARK
        if size is None:
            size = source.size if source is not None else 0

        super().__init__(body, size=size, high_water_mark=high_water_mark)

        self._headers = Headers(headers if headers is not None else (source.headers if source is not None else None))
        if self._content_type is not None and not self._headers.has("Content-Type"):
            self._headers.append("Content-Type", self._content_type)

        if signal is _UNSET:
            signal = source.signal if source is not None else None
        if signal is not None and not isinstance(signal, AbortSignal):
            raise TypeError("Expected signal to be an instance of AbortSignal")

        redirect = redirect or (source.redirect if source is not None else "follow")
        if redirect not in REDIRECT_MODES:
            raise TypeError(f"Redirect option '{redirect}' is not a valid value of RequestRedirect")

        self._url = url
        self._method = method
        self._signal = signal
        self._redirect = redirect
        self.follow = follow if follow is not None else (source.follow if source is not None else 20)
        self.compress = compress if compress is not None else (source.compress if source is not None else True)
        self.counter = counter if counter is not None else (source.counter if source is not None else 0)
        self.high_water_mark = high_water_mark

    @property
    def url(self) -> str:
        return self._url

    @property
    def method(self) -> str:
        return self._method

    @property
    def headers(self) -> Headers:
        return self._headers

    @property
    def signal(self) -> AbortSignal | None:
        return self._signal

    @property
    def redirect(self) -> str:
        return self._redirect

    def __repr__(self) -> str:
        return f"Request(method={self._method!r}, url={self._url!r})"
