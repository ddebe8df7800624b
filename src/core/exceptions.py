from typing import Any


class FetchBaseError(Exception):
    """Base class for every error raised by fetch and the value objects it consumes."""

    def __init__(self, message: str, type: str) -> None:
        super().__init__(message)
        self.message = message
        self.type = type

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def __repr__(self) -> str:
        return f"{self.name}(message={self.message!r}, type={self.type!r})"


class FetchError(FetchBaseError):
    """
    Raised for operational failures of a fetch call.
    • type: "system" for transport and request-level failures, "max-size"
      for bodies over the size limit, "invalid-json" for unparsable JSON
    • system_error: the raw failure detail reported by the transport
    """

    def __init__(self, message: str, type: str, system_error: Any | None = None) -> None:
        super().__init__(message, type)
        self.system_error = system_error
        self.code: str | None = None

        if system_error is not None:
            self.code = getattr(system_error, "code", None) or type


class AbortError(FetchBaseError):
    """Raised when the AbortSignal bound to a request fires before the response settles."""

    def __init__(self, message: str = "The operation was aborted.", type: str = "aborted") -> None:
        super().__init__(message, type)


class UnsupportedSchemeError(TypeError):
    """Raised before dispatch when the request URL uses a scheme fetch cannot load."""

    def __init__(self, url: str, scheme: str) -> None:
        self.url = url
        self.scheme = scheme
        super().__init__(f'fetch cannot load {url}. URL scheme "{scheme}" is not supported.')


class TransportError(Exception):
    """Wraps the raw failure detail reported by a transport service."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)
