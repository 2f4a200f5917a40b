# fastclient/registry.py
"""Named endpoint registry.

A registry maps endpoint names to descriptors and hands out one bound
:class:`~fastclient.pipeline.Endpoint` per name. Registries never share
mutable state; each client owns its own.
"""

import keyword
from collections.abc import Iterator, Mapping
from typing import Any

from .exceptions import ConfigurationError
from .log_config import logger
from .pipeline import Dispatcher, Endpoint
from .types import EndpointDescriptor
from .url import path_params


def as_descriptor(descriptor: EndpointDescriptor | Mapping[str, Any]) -> EndpointDescriptor:
    """Validate a descriptor given as a model or a plain mapping.

    Raises:
        ConfigurationError: If the mapping is not a valid descriptor.
    """
    if isinstance(descriptor, EndpointDescriptor):
        return descriptor
    try:
        return EndpointDescriptor.model_validate(descriptor)
    except ValueError as e:
        raise ConfigurationError(f"Invalid endpoint descriptor {descriptor!r}: {e}") from e


class EndpointRegistry:
    """Stores descriptors by name and the endpoints bound to them."""

    def __init__(self, dispatcher: Dispatcher, reserved: frozenset[str] = frozenset()):
        """Initialize an empty registry.

        Args:
            dispatcher: Pipeline every registered endpoint dispatches through.
            reserved: Names that may not be used for endpoints (e.g. client
                attributes they would shadow).
        """
        self._dispatcher = dispatcher
        self._reserved = reserved
        self._endpoints: dict[str, Endpoint] = {}

    def register(
        self, name: str, descriptor: EndpointDescriptor | Mapping[str, Any]
    ) -> Endpoint:
        """Bind ``name`` to ``descriptor``, overwriting any previous binding.

        Raises:
            ConfigurationError: If the name is not a usable identifier or the
                descriptor is invalid.
        """
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ConfigurationError(f"Endpoint name '{name}' is not a valid identifier")
        if name.startswith("_") or name in self._reserved:
            raise ConfigurationError(
                f"Endpoint name '{name}' is reserved by the client"
            )

        descriptor = as_descriptor(descriptor)
        if name in self._endpoints:
            logger.info(f"Overwriting endpoint '{name}'")
        endpoint = Endpoint(self._dispatcher, descriptor, name=name)
        self._endpoints[name] = endpoint

        placeholders = path_params(descriptor.path)
        logger.debug(
            f"Registered endpoint '{name}': {descriptor.method.value} {descriptor.path}"
            + (f" (path params: {', '.join(placeholders)})" if placeholders else "")
        )
        return endpoint

    def update(self, endpoints: Mapping[str, EndpointDescriptor | Mapping[str, Any]]) -> None:
        """Register every entry of ``endpoints`` in mapping order."""
        for name, descriptor in endpoints.items():
            self.register(name, descriptor)

    def get(self, name: str) -> Endpoint:
        """Return the endpoint bound to ``name``.

        Raises:
            KeyError: If no endpoint is registered under ``name``.
        """
        return self._endpoints[name]

    def descriptor(self, name: str) -> EndpointDescriptor:
        return self._endpoints[name].descriptor

    def names(self) -> list[str]:
        return list(self._endpoints)

    def __contains__(self, name: object) -> bool:
        return name in self._endpoints

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._endpoints))

    def __len__(self) -> int:
        return len(self._endpoints)
