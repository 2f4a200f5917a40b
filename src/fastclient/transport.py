# fastclient/transport.py
"""Transport resolution and the default httpx-backed transport.

A client receives its transport once, at construction time: either the
callable injected by the caller or one built from the process-wide default
factory. Nothing is probed per call.
"""

import ssl
from collections.abc import Callable

import certifi
import httpx

from .config import ClientSettings
from .exceptions import ConfigurationError, NetworkError, NoTransportAvailable, TimeoutError
from .log_config import logger
from .types import Transport

TransportFactory = Callable[[ClientSettings], Transport]


class HttpxTransport:
    """Transport sending requests through an ``httpx.AsyncClient``.

    Attributes:
        _settings: Settings used to build the underlying client.
        _http_client: The underlying httpx.AsyncClient.
        _should_close_client: Flag indicating if this instance owns the _http_client.
    """

    def __init__(
        self,
        settings: ClientSettings,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings
        self._should_close_client = http_client is None  # Close only if we created it
        self._http_client = http_client or self._create_default_http_client()

    def _create_default_http_client(self) -> httpx.AsyncClient:
        """Create a default httpx.AsyncClient with configured settings.

        Returns:
            httpx.AsyncClient: Configured HTTP client with SSL verification
                and timeout settings.
        """
        try:
            ssl_context = ssl.create_default_context(cafile=certifi.where())
            verify_ssl: ssl.SSLContext | bool = ssl_context
            logger.debug("Using certifi SSL context.")
        except (OSError, ssl.SSLError):
            verify_ssl = True
            logger.warning(
                "certifi bundle failed to load. Using default SSL verification."
            )

        return httpx.AsyncClient(
            timeout=self._settings.request_timeout,
            verify=verify_ssl,
        )

    @property
    def is_closed(self) -> bool:
        return self._http_client.is_closed

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if not request.headers.get("User-Agent"):
            request.headers["User-Agent"] = self._settings.user_agent

        logger.debug(f"Sending request: {request.method} {request.url}")
        logger.trace(f"Request Headers: {request.headers}")
        try:
            response = await self._http_client.send(request)
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {request.url}")
            raise TimeoutError("Request timed out", request=request) from e
        except httpx.NetworkError as e:
            logger.error(f"Network error occurred for {request.url}: {e}")
            raise NetworkError(
                f"Network error for {request.url}: {e}", request=request
            ) from e

        logger.debug(f"Received response: {response.status_code} for {request.url}")
        logger.trace(f"Response Headers: {response.headers}")
        return response

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._should_close_client and not self._http_client.is_closed:
            await self._http_client.aclose()
            logger.debug("HttpxTransport internal HTTP client closed.")


_default_transport_factory: TransportFactory | None = HttpxTransport


def set_default_transport(factory: TransportFactory | None) -> TransportFactory | None:
    """Replace the process-wide default transport factory.

    Passing None disables the ambient transport, so clients must inject one.

    Returns:
        The previously installed factory.
    """
    global _default_transport_factory
    previous = _default_transport_factory
    _default_transport_factory = factory
    logger.debug(f"Default transport factory set to {factory!r}")
    return previous


def resolve_transport(
    transport: Transport | None, settings: ClientSettings
) -> tuple[Transport, bool]:
    """Pick the transport for a new client.

    Resolution order: the injected ``transport``, then the process-wide
    default factory (unless ``settings.use_ambient_transport`` is off).

    Returns:
        tuple[Transport, bool]: The transport and whether the client owns it
            (and must close it).

    Raises:
        ConfigurationError: If ``transport`` is given but not callable.
        NoTransportAvailable: If no transport can be resolved.
    """
    if transport is not None:
        if not callable(transport):
            raise ConfigurationError(
                f"Transport must be callable, got {type(transport).__name__}"
            )
        logger.debug(f"Using injected transport {transport!r}")
        return transport, False

    if settings.use_ambient_transport and _default_transport_factory is not None:
        logger.debug("No transport injected; using the default transport factory.")
        return _default_transport_factory(settings), True

    raise NoTransportAvailable(
        "No transport available: pass `transport=` or enable the ambient default transport"
    )
