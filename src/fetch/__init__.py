from core.exceptions import AbortError, FetchBaseError, FetchError, UnsupportedSchemeError
from fetch.body import Body, BodyStream
from fetch.client import FetchClient, fetch, get_default_client, set_default_transport
from fetch.coordinator import FetchCoordinator, check_scheme
from fetch.data_uri import DataUri, decode_data_uri
from fetch.headers import Headers, collect_request_headers, from_raw_headers
from fetch.request import Request
from fetch.response import Response
from fetch.signal import AbortController, AbortSignal, AbortSubscription
from fetch.utils import is_redirect

__all__ = [
    "fetch",
    "FetchClient",
    "FetchCoordinator",
    "get_default_client",
    "set_default_transport",
    "check_scheme",
    "Headers",
    "Request",
    "Response",
    "Body",
    "BodyStream",
    "AbortController",
    "AbortSignal",
    "AbortSubscription",
    "DataUri",
    "decode_data_uri",
    "collect_request_headers",
    "from_raw_headers",
    "is_redirect",
    "AbortError",
    "FetchBaseError",
    "FetchError",
    "UnsupportedSchemeError",
]
