# fastclient/hooks.py
"""Publish/subscribe bus for request and response hooks.

Registrations live in an immutable tuple that is replaced on every
subscribe or unsubscribe. A dispatch takes the current tuple as its
snapshot before running a phase, so concurrent removal never skips or
re-visits entries of an iteration already in progress.
"""

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from .log_config import logger
from .types import RequestHook, ResponseHook


class HookPhase(str, Enum):
    """Pipeline phase a hook is attached to."""

    REQUEST = "request"
    RESPONSE = "response"


@dataclass(frozen=True, eq=False)
class HookRegistration:
    """A single subscription. Identity is the registration object itself."""

    phase: HookPhase
    handler: Callable[[Any], Any]


def _handler_name(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class HookBus:
    """Ordered, mutable list of request and response interceptors.

    Handlers of one phase run in registration order, each receiving the
    previous handler's output. Handlers may be plain functions or coroutine
    functions; a handler returning None leaves the value it received in place.
    """

    def __init__(self) -> None:
        self._registrations: tuple[HookRegistration, ...] = ()

    def on(
        self, phase: HookPhase | str, handler: RequestHook | ResponseHook
    ) -> Callable[[], None]:
        """Subscribe ``handler`` to ``phase``.

        Args:
            phase: ``"request"`` or ``"response"``.
            handler: Callable receiving and returning the request or response.

        Returns:
            A closure removing exactly this registration. Calling it more than
            once is a no-op.

        Raises:
            ValueError: If ``phase`` is not a known phase.
            TypeError: If ``handler`` is not callable.
        """
        phase = HookPhase(phase)
        if not callable(handler):
            raise TypeError(f"Hook handler must be callable, got {type(handler).__name__}")

        registration = HookRegistration(phase=phase, handler=handler)
        self._registrations = (*self._registrations, registration)
        logger.debug(f"Registered {phase.value} hook {_handler_name(handler)}")

        def unsubscribe() -> None:
            self._remove(registration)

        return unsubscribe

    def off(self, phase: HookPhase | str, handler: RequestHook | ResponseHook) -> bool:
        """Remove the earliest registration of ``handler`` on ``phase``.

        Returns:
            bool: True if a registration was removed.
        """
        phase = HookPhase(phase)
        for registration in self._registrations:
            if registration.phase is phase and registration.handler is handler:
                return self._remove(registration)
        return False

    def _remove(self, registration: HookRegistration) -> bool:
        remaining = tuple(r for r in self._registrations if r is not registration)
        if len(remaining) == len(self._registrations):
            logger.trace(
                f"Hook {_handler_name(registration.handler)} already removed; ignoring"
            )
            return False
        self._registrations = remaining
        logger.debug(
            f"Removed {registration.phase.value} hook {_handler_name(registration.handler)}"
        )
        return True

    def handlers(self, phase: HookPhase | str) -> tuple[Callable[[Any], Any], ...]:
        """Snapshot of the handlers currently registered on ``phase``."""
        phase = HookPhase(phase)
        return tuple(r.handler for r in self._registrations if r.phase is phase)

    def __len__(self) -> int:
        return len(self._registrations)

    async def _run(self, phase: HookPhase, value: Any) -> Any:
        handlers = self.handlers(phase)
        if handlers:
            logger.trace(f"Running {len(handlers)} {phase.value} hook(s)")
        for handler in handlers:
            result = handler(value)
            if inspect.isawaitable(result):
                result = await result
            # None means the handler only mutated its argument in place
            if result is not None:
                value = result
        return value

    async def run_request(self, request: httpx.Request) -> httpx.Request:
        """Run all request-phase handlers over ``request``."""
        return await self._run(HookPhase.REQUEST, request)

    async def run_response(self, response: httpx.Response) -> httpx.Response:
        """Run all response-phase handlers over ``response``."""
        return await self._run(HookPhase.RESPONSE, response)
