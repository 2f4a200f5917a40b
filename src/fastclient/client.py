# fastclient/client.py
"""Declarative client construction.

:func:`create_client` turns a base URL and a mapping of named endpoint
descriptors into a :class:`FastClient` whose attributes are awaitable
endpoint callables::

    client = create_client(
        "https://api.example.com/",
        endpoints={
            "get_user": {"method": "GET", "path": "/users/{id}"},
            "create_user": {"method": "POST", "path": "/users"},
        },
    )
    response = await client.get_user(path={"id": 42})
"""

from collections.abc import Callable, Mapping
from typing import Any, Self

import httpx

from .config import ClientSettings, get_settings
from .exceptions import ConfigurationError
from .hooks import HookBus, HookPhase
from .log_config import logger
from .pipeline import Dispatcher, Endpoint
from .registry import EndpointRegistry, as_descriptor
from .transport import resolve_transport
from .types import EndpointDescriptor, Middleware, RequestHook, ResponseHook, Transport

EndpointSpec = EndpointDescriptor | Mapping[str, Any]


class FastClient:
    """HTTP client built from a base URL and named endpoint descriptors.

    Each client owns its own endpoint registry and hook bus; two clients
    never observe each other's endpoints or hooks. Endpoints are reachable
    as attributes (``client.<name>``) and all of them dispatch through the
    same hook bus, middleware and transport.

    Attributes:
        _settings: Settings controlling transport resolution and request construction.
        _base_url: Absolute URL that endpoint paths are resolved against.
        _hooks: The client's hook bus.
        _transport: The resolved transport callable.
        _owns_transport: Whether :meth:`aclose` must close the transport.
        _dispatcher: Pipeline shared by all endpoints of this client.
        _registry: Named endpoints of this client.
    """

    def __init__(
        self,
        base: str | httpx.URL,
        endpoints: Mapping[str, EndpointSpec] | None = None,
        *,
        middleware: Middleware | None = None,
        transport: Transport | None = None,
        settings: ClientSettings | None = None,
    ):
        """Initialize the client.

        Args:
            base: Absolute base URL supplying scheme and host.
            endpoints: Optional mapping of endpoint name to descriptor.
            middleware: Optional ``(request, next) -> response`` coroutine
                function wrapping the hook-decorated transport.
            transport: Optional ``request -> response`` coroutine function.
                If None, the process-wide default transport is used.
            settings: Optional settings; defaults to :func:`get_settings`.

        Raises:
            ConfigurationError: If the base URL, middleware or an endpoint is invalid.
            NoTransportAvailable: If no transport can be resolved.
        """
        self._settings = settings or get_settings()

        try:
            base_url = httpx.URL(base)
        except (httpx.InvalidURL, TypeError) as e:
            raise ConfigurationError(f"Invalid base URL {base!r}: {e}") from e
        if not base_url.scheme or not base_url.host:
            raise ConfigurationError(
                f"Base URL {str(base)!r} must be absolute (scheme and host required)"
            )
        self._base_url = base_url

        if middleware is not None and not callable(middleware):
            raise ConfigurationError(
                f"Middleware must be callable, got {type(middleware).__name__}"
            )

        self._transport, self._owns_transport = resolve_transport(
            transport, self._settings
        )
        self._hooks = HookBus()
        self._dispatcher = Dispatcher(
            base_url=self._base_url,
            hooks=self._hooks,
            transport=self._transport,
            middleware=middleware,
            settings=self._settings,
        )
        reserved = frozenset(n for n in dir(type(self)) if not n.startswith("_"))
        self._registry = EndpointRegistry(self._dispatcher, reserved=reserved)
        if endpoints:
            self._registry.update(endpoints)

        logger.debug(
            f"FastClient initialized for {self._base_url} with "
            f"{len(self._registry)} endpoint(s), middleware={'yes' if middleware else 'no'}"
        )

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def hooks(self) -> HookBus:
        """The hook bus shared by every endpoint of this client."""
        return self._hooks

    @property
    def endpoints(self) -> EndpointRegistry:
        """The named endpoints of this client."""
        return self._registry

    def on(
        self, phase: HookPhase | str, handler: RequestHook | ResponseHook
    ) -> Callable[[], None]:
        """Subscribe ``handler`` to the ``"request"`` or ``"response"`` phase.

        Returns:
            A closure that unsubscribes the handler. It is safe to call twice.
        """
        return self._hooks.on(phase, handler)

    def off(self, phase: HookPhase | str, handler: RequestHook | ResponseHook) -> bool:
        """Remove ``handler`` from ``phase``. Unknown handlers are ignored."""
        return self._hooks.off(phase, handler)

    def register(self, name: str, descriptor: EndpointSpec) -> Endpoint:
        """Add or replace the endpoint ``name`` on this client."""
        return self._registry.register(name, descriptor)

    def endpoint(self, descriptor: EndpointSpec) -> Endpoint:
        """Create an unregistered endpoint dispatching through this client."""
        return Endpoint(self._dispatcher, as_descriptor(descriptor))

    def __call__(self, descriptor: EndpointSpec) -> Endpoint:
        return self.endpoint(descriptor)

    def __getattr__(self, name: str) -> Endpoint:
        # Only reached when normal lookup fails
        registry = self.__dict__.get("_registry")
        if registry is not None and name in registry:
            return registry.get(name)
        raise AttributeError(f"{type(self).__name__!r} has no endpoint {name!r}")

    def __dir__(self) -> list[str]:
        names = list(super().__dir__())
        registry = self.__dict__.get("_registry")
        if registry is not None:
            names.extend(registry.names())
        return names

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        logger.debug(f"FastClient.aclose() called. Client ID: {id(self)}.")
        if self._owns_transport:
            close = getattr(self._transport, "aclose", None)
            if callable(close):
                await close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object | None,
    ) -> None:
        await self.aclose()


def create_client(
    base: str | httpx.URL,
    endpoints: Mapping[str, EndpointSpec] | None = None,
    *,
    middleware: Middleware | None = None,
    transport: Transport | None = None,
    settings: ClientSettings | None = None,
) -> FastClient:
    """Build a :class:`FastClient`. See :class:`FastClient` for the arguments.

    Raises:
        NoTransportAvailable: If neither ``transport`` nor a default transport exists.
    """
    return FastClient(
        base,
        endpoints,
        middleware=middleware,
        transport=transport,
        settings=settings,
    )
