"""Custom exception classes for the fastclient library."""

import httpx


class FastClientError(Exception):
    """Base exception class for all fastclient errors."""

    def __init__(
        self,
        message: str,
        *,
        response: httpx.Response | None = None,
        request: httpx.Request | None = None,
    ):
        """Initializes the base exception.

        Args:
            message: The error message.
            response: Optional httpx.Response object associated with the error.
            request: Optional httpx.Request object associated with the error.
        """
        super().__init__(message)
        self.message = message
        self.response = response
        self.request = request

    def __str__(self) -> str:
        if self.response is not None:
            url_info = getattr(getattr(self.response, "_request", None), "url", "N/A")
            return (
                f"{self.message} (Status: {self.response.status_code}, URL: {url_info})"
            )
        if isinstance(self.request, httpx.Request):
            return f"{self.message} (URL: {self.request.url})"
        return self.message


class ConfigurationError(FastClientError):
    """Represents an error in the client's construction or configuration."""

    def __init__(self, message: str):
        # Configuration errors happen before any request exists
        super().__init__(message, response=None)


class NoTransportAvailable(ConfigurationError):
    """Raised at client construction when no transport can be resolved."""


class MissingPathParameterError(FastClientError):
    """Raised in strict mode when a path placeholder has no matching argument.

    Attributes:
        missing: Names of the placeholders that were left unresolved.
    """

    def __init__(self, message: str, *, missing: list[str]):
        super().__init__(message)
        self.missing = missing


class TimeoutError(FastClientError):
    """Represents a request timeout raised by the default httpx transport."""

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class NetworkError(FastClientError):
    """Represents a network connection error raised by the default httpx transport.

    This error indicates a problem in establishing or maintaining a network connection
    to the server (DNS resolution failure, connection refused, protocol error).
    """

    def __init__(self, message: str, *, request: httpx.Request | None = None):
        super().__init__(message, request=request, response=None)


class AuthError(FastClientError):
    """Raised when an authentication strategy cannot obtain credentials."""
