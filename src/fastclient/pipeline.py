# fastclient/pipeline.py
"""Per-call dispatch pipeline.

Every call walks ``BUILDING -> REQUEST_HOOKS -> TRANSPORT_OR_MIDDLEWARE ->
RESPONSE_HOOKS -> PARSING -> DONE``; any exception moves it to ``FAILED``
and propagates unchanged. When middleware is configured it receives the
assembled request together with ``next``, which performs the request hooks,
the transport call and the response hooks. ``next`` only records which
stage its own call reached, so middleware may await it from many suspended
calls at once, zero times or several times per call.
"""

import inspect
from collections.abc import Mapping
from functools import partial
from enum import Enum
from typing import Any

import httpx

from .config import ClientSettings
from .hooks import HookBus
from .log_config import logger
from .request import assemble_request
from .types import CallArgs, EndpointDescriptor, Middleware, Transport
from .url import resolve_url


class CallState(str, Enum):
    """Stages a single endpoint call passes through."""

    BUILDING = "building"
    REQUEST_HOOKS = "request_hooks"
    TRANSPORT_OR_MIDDLEWARE = "transport_or_middleware"
    RESPONSE_HOOKS = "response_hooks"
    PARSING = "parsing"
    DONE = "done"
    FAILED = "failed"


class CallTrace:
    """Stage bookkeeping for one call, shared with the ``next`` it hands out."""

    def __init__(self, label: str):
        self.label = label
        self.state = CallState.BUILDING

    def enter(self, state: CallState) -> None:
        self.state = state
        logger.trace(f"Call {self.label}: {state.value}")


class Dispatcher:
    """Composes the hook bus, optional middleware and transport of one client.

    Attributes:
        base_url: Base URL every endpoint path is resolved against.
        hooks: The client's hook bus, shared by all its endpoints.
        transport: Callable performing the network exchange.
        middleware: Optional user middleware wrapping :meth:`send`.
        settings: Settings controlling request construction.
    """

    def __init__(
        self,
        base_url: httpx.URL,
        hooks: HookBus,
        transport: Transport,
        middleware: Middleware | None,
        settings: ClientSettings,
    ):
        self.base_url = base_url
        self.hooks = hooks
        self.transport = transport
        self.middleware = middleware
        self.settings = settings

    def build_request(
        self, descriptor: EndpointDescriptor, args: CallArgs
    ) -> httpx.Request:
        """Resolve the URL and assemble the request for one call."""
        url = resolve_url(
            descriptor.path,
            args.path,
            args.query,
            self.base_url,
            strict=self.settings.strict_path_params,
        )
        return assemble_request(
            descriptor,
            url,
            args,
            default_content_type=self.settings.default_content_type,
        )

    async def send(
        self, request: httpx.Request, trace: CallTrace | None = None
    ) -> httpx.Response:
        """Run request hooks, the transport and response hooks for ``request``.

        Bound to a call's ``trace``, this is the ``next`` continuation handed
        to middleware.
        """
        trace = trace or CallTrace(f"{request.method} {request.url}")
        trace.enter(CallState.REQUEST_HOOKS)
        request = await self.hooks.run_request(request)
        trace.enter(CallState.TRANSPORT_OR_MIDDLEWARE)
        response = await self.transport(request)
        trace.enter(CallState.RESPONSE_HOOKS)
        response = await self.hooks.run_response(response)
        # control returns to the middleware, if any
        trace.enter(CallState.TRANSPORT_OR_MIDDLEWARE)
        return response

    async def dispatch(
        self, descriptor: EndpointDescriptor, args: CallArgs, name: str | None = None
    ) -> Any:
        """Run one call through the full pipeline and return its result.

        Returns:
            The parser's output if the descriptor has a parser, otherwise the
            raw ``httpx.Response``.
        """
        trace = CallTrace(name or f"{descriptor.method.value} {descriptor.path}")
        try:
            request = self.build_request(descriptor, args)
            logger.debug(f"Dispatching {trace.label}: {request.method} {request.url}")

            if self.middleware is not None:
                trace.enter(CallState.TRANSPORT_OR_MIDDLEWARE)
                response = await self.middleware(request, partial(self.send, trace=trace))
            else:
                response = await self.send(request, trace)

            if descriptor.parser is not None:
                trace.enter(CallState.PARSING)
                response = descriptor.parser(response)
                if inspect.isawaitable(response):
                    response = await response
            trace.enter(CallState.DONE)
            return response
        except Exception as e:
            logger.debug(
                f"Call {trace.label} moved to {CallState.FAILED.value} during "
                f"{trace.state.value}: {type(e).__name__}: {e}"
            )
            trace.state = CallState.FAILED
            raise


_KEY_ALIASES = {"contentType": "content_type"}


def _canonical_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_KEY_ALIASES.get(key, key): value for key, value in data.items()}


def coerce_call_args(
    args: CallArgs | Mapping[str, Any] | None, overrides: Mapping[str, Any]
) -> CallArgs:
    """Normalise the positional and keyword forms of call arguments.

    Keyword arguments take precedence over keys of a positional mapping.
    """
    if isinstance(args, CallArgs):
        if not overrides:
            return args
        base = {
            **args.model_dump(by_alias=False, exclude_unset=True),
            **args.extra_fields,
        }
    else:
        base = dict(args or {})
    merged = {**_canonical_keys(base), **_canonical_keys(overrides)}
    return CallArgs.model_validate(merged)


class Endpoint:
    """Callable bound to one descriptor and one client's dispatcher.

    Call it with a ``CallArgs``, a mapping with the same keys, or keyword
    arguments::

        user = await client.get_user(path={"id": 42})
    """

    def __init__(
        self,
        dispatcher: Dispatcher,
        descriptor: EndpointDescriptor,
        name: str | None = None,
    ):
        self._dispatcher = dispatcher
        self.descriptor = descriptor
        self.name = name

    async def __call__(
        self, args: CallArgs | Mapping[str, Any] | None = None, /, **kwargs: Any
    ) -> Any:
        call_args = coerce_call_args(args, kwargs)
        return await self._dispatcher.dispatch(self.descriptor, call_args, self.name)

    def __repr__(self) -> str:
        target = f"{self.descriptor.method.value} {self.descriptor.path}"
        if self.name:
            return f"<Endpoint {self.name}: {target}>"
        return f"<Endpoint {target}>"
