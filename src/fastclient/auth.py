# fastclient/auth.py
"""Authentication strategies, applied to requests through middleware.

A strategy only knows how to decorate a request. :func:`auth_middleware`
adapts one to the client's middleware slot, so authentication runs before
the request hooks and the transport.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

import httpx
from pydantic import BaseModel, Field

from .exceptions import AuthError, ConfigurationError
from .log_config import logger
from .types import Middleware, Next


class AuthStrategy(Protocol):
    """Protocol defining the interface for authentication strategies.

    Concrete implementations of this protocol handle the specifics of adding
    authentication information (e.g., headers, tokens) to an HTTP request.
    """

    async def async_authenticate(self, request: httpx.Request) -> None:
        """
        Asynchronously modifies the request to add authentication information.

        Args:
            request: The httpx.Request object to modify.

        Raises:
            AuthError: If authentication fails (e.g., token fetching).
        """
        ...

    async def async_close(self) -> None:
        """
        Asynchronously closes any underlying resources used by the auth strategy,
        if applicable. This method should be idempotent.
        """
        ...


class NoAuth:
    """Strategy for endpoints that need no credentials; requests pass unchanged."""

    async def async_authenticate(self, request: httpx.Request) -> None:
        logger.trace(f"No credentials added to {request.method} {request.url}")

    async def async_close(self) -> None:
        pass


class StaticTokenAuth:
    """Sends a fixed credential in a request header.

    By default the token goes out as ``Authorization: Bearer <token>``. Set
    ``scheme=None`` to send the bare token, e.g. for ``X-API-Key`` headers.
    A header the caller already set on the request is left alone.

    Attributes:
        _token: The credential.
        _header: Name of the header carrying it.
        _scheme: Prefix placed before the token, if any.
    """

    def __init__(
        self,
        token: str | None,
        *,
        header: str = "Authorization",
        scheme: str | None = "Bearer",
    ):
        """
        Raises:
            ConfigurationError: If the token or header name is empty.
        """
        if not token:
            raise ConfigurationError("StaticTokenAuth requires a non-empty 'token'.")
        if not header:
            raise ConfigurationError("StaticTokenAuth requires a header name.")
        self._token: str = token
        self._header = header
        self._scheme = scheme
        logger.debug(f"StaticTokenAuth initialized for header {header}.")

    @property
    def header_value(self) -> str:
        return f"{self._scheme} {self._token}" if self._scheme else self._token

    async def async_authenticate(self, request: httpx.Request) -> None:
        if self._header in request.headers:
            logger.trace(f"{self._header} already set on {request.url}; keeping it")
            return
        request.headers[self._header] = self.header_value

    async def async_close(self) -> None:
        pass


class Token(BaseModel):
    """Bearer token as returned by a token endpoint."""

    access_token: str
    expires_in: float | None = Field(
        default=None, description="Lifetime in seconds; None means it never expires"
    )
    refresh_token: str | None = None


TokenRefresher = Callable[[Token | None], Awaitable[Token]]


class RefreshingTokenAuth:
    """Implements AuthStrategy with an expiring bearer token refreshed on demand.

    When the current token is missing or expired, the first caller starts a
    refresh and every concurrent caller waits for that same refresh instead
    of starting its own. The refresher receives the previous token (or None)
    so it can use its refresh token.

    Attributes:
        _refresher: Coroutine function producing a new token.
        _leeway: Seconds before expiry at which the token counts as expired.
        _clock: Monotonic clock used for expiry bookkeeping.
        _token: The current token, if any.
        _expires_at: Clock value at which ``_token`` expires.
        _refresh_lock: Serialises refreshes so only one runs at a time.
    """

    def __init__(
        self,
        refresher: TokenRefresher,
        *,
        token: Token | None = None,
        leeway: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not callable(refresher):
            raise ConfigurationError("RefreshingTokenAuth requires a callable refresher.")
        self._refresher = refresher
        self._leeway = leeway
        self._clock = clock
        self._token: Token | None = None
        self._expires_at: float | None = None
        self._refresh_lock = asyncio.Lock()
        if token is not None:
            self.set_token(token)
        logger.debug("RefreshingTokenAuth initialized.")

    @property
    def token(self) -> Token | None:
        return self._token

    def set_token(self, token: Token) -> None:
        """Install ``token`` (e.g. one obtained by signing in)."""
        self._token = token
        self._expires_at = (
            self._clock() + token.expires_in if token.expires_in is not None else None
        )

    def is_expired(self) -> bool:
        if self._token is None:
            return True
        if self._expires_at is None:
            return False
        return self._clock() >= self._expires_at - self._leeway

    async def refresh(self) -> Token:
        """Refresh the token unless another caller already did.

        Raises:
            AuthError: If the refresher fails.
        """
        async with self._refresh_lock:
            # Double-check if token was refreshed while waiting for the lock
            if not self.is_expired():
                assert self._token is not None
                return self._token

            logger.info("Refreshing access token")
            try:
                token = await self._refresher(self._token)
            except AuthError:
                raise
            except Exception as e:
                logger.error(f"Error refreshing token: {e}")
                raise AuthError(f"Failed to refresh access token: {e}") from e
            self.set_token(token)
            logger.info("Access token refreshed.")
            return token

    async def async_authenticate(self, request: httpx.Request) -> None:
        """Refreshes the token if needed and adds the Authorization header."""
        token = await self.refresh() if self.is_expired() else self._token
        assert token is not None
        request.headers["Authorization"] = f"Bearer {token.access_token}"

    async def async_close(self) -> None:
        """No resources to close for RefreshingTokenAuth, this method is a no-op."""


def auth_middleware(
    strategy: AuthStrategy,
    *,
    exclude: Callable[[httpx.Request], bool] | None = None,
) -> Middleware:
    """Adapt ``strategy`` to the client's middleware slot.

    Args:
        strategy: The authentication strategy applied to each request.
        exclude: Optional predicate; matching requests are sent without
            authentication. Use it for the token endpoint itself when the
            refresher calls back into the same client.
    """

    async def authenticate(request: httpx.Request, next: Next) -> httpx.Response:
        if exclude is None or not exclude(request):
            await strategy.async_authenticate(request)
        return await next(request)

    return authenticate
