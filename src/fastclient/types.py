# fastclient/types.py
"""Core type definitions and data structures for the fastclient library.

This module defines the records flowing through the dispatch pipeline
(endpoint descriptors and per-call arguments) and the type aliases for the
callables a client is assembled from: transports, middleware, hooks and
response parsers.
"""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class HttpMethod(str, Enum):
    """HTTP methods an endpoint may be declared with."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


Transport = Callable[[httpx.Request], Awaitable[httpx.Response]]
"""Type alias for a transport.

A transport performs the actual network exchange. The core treats it as
opaque: it is awaited exactly once per invocation of ``next`` and its
exceptions propagate unchanged.
"""

Next = Callable[[httpx.Request], Awaitable[httpx.Response]]
"""Continuation handed to middleware: request hooks, transport, response hooks."""

Middleware = Callable[[httpx.Request, Next], Awaitable[httpx.Response]]
"""Type alias for the user middleware.

Args:
    request (httpx.Request): The assembled request, before request hooks ran.
    next (Next): Runs request hooks, the transport and response hooks. May be
        awaited zero times (short-circuit) or several times (manual retry).
Return:
    httpx.Response: The response handed to the parser, if any.
"""

RequestHook = Callable[[httpx.Request], httpx.Request | Awaitable[httpx.Request]]
"""Request-phase hook. Receives the request and returns the request to send."""

ResponseHook = Callable[[httpx.Response], httpx.Response | Awaitable[httpx.Response]]
"""Response-phase hook. Receives the response and returns the response to keep."""

Parser = Callable[[httpx.Response], Any]
"""Turns a raw response into the endpoint's result. May be sync or async."""


class EndpointDescriptor(BaseModel):
    """Immutable record of an endpoint's method, path template and parser.

    ``path`` may also be given as ``href``. Method names are case-insensitive.
    """

    method: HttpMethod
    path: str = Field(validation_alias=AliasChoices("path", "href"))
    parser: Parser | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("method", mode="before")
    @classmethod
    def _normalise_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value


class CallArgs(BaseModel):
    """Per-invocation payload of an endpoint call.

    Any field not declared here is forwarded verbatim to ``httpx.Request``
    (for example ``extensions`` or ``cookies``).
    """

    path: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    body: Any | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    content_type: str | None = Field(
        default=None, validation_alias=AliasChoices("content_type", "contentType")
    )

    model_config = ConfigDict(extra="allow")

    @property
    def extra_fields(self) -> dict[str, Any]:
        """Caller-supplied fields not consumed by the assembler."""
        return dict(self.model_extra or {})
