"""fastclient: declarative asynchronous HTTP clients.

Describe a backend once as a base URL plus named endpoint descriptors
(method, path template, optional response parser) and get back a client
whose methods build, dispatch and post-process requests. Request and
response hooks, a middleware slot and an injectable transport cover the
cross-cutting concerns.
"""

__version__ = "0.1.0"

from . import auth, client, config, exceptions, hooks, log_config, middleware, types
from .auth import (
    AuthStrategy,
    NoAuth,
    RefreshingTokenAuth,
    StaticTokenAuth,
    Token,
    auth_middleware,
)
from .client import FastClient, create_client
from .config import ClientSettings, get_settings
from .exceptions import (
    AuthError,
    ConfigurationError,
    FastClientError,
    MissingPathParameterError,
    NetworkError,
    NoTransportAvailable,
    TimeoutError,
)
from .hooks import HookBus, HookPhase
from .log_config import configure_logging
from .middleware import compose_middleware, logging_middleware
from .pipeline import CallState, Endpoint
from .transport import HttpxTransport, set_default_transport
from .types import CallArgs, EndpointDescriptor, HttpMethod
from .url import path_params

__all__ = [
    "__version__",
    # Modules
    "auth",
    "client",
    "config",
    "exceptions",
    "hooks",
    "log_config",
    "middleware",
    "types",
    # Client
    "FastClient",
    "create_client",
    "Endpoint",
    "CallState",
    "EndpointDescriptor",
    "CallArgs",
    "HttpMethod",
    "HookBus",
    "HookPhase",
    "HttpxTransport",
    "set_default_transport",
    "path_params",
    # Configuration
    "ClientSettings",
    "get_settings",
    "configure_logging",
    # Middleware and auth
    "compose_middleware",
    "logging_middleware",
    "auth_middleware",
    "AuthStrategy",
    "NoAuth",
    "StaticTokenAuth",
    "RefreshingTokenAuth",
    "Token",
    # Exceptions
    "FastClientError",
    "ConfigurationError",
    "NoTransportAvailable",
    "MissingPathParameterError",
    "AuthError",
    "NetworkError",
    "TimeoutError",
]
