# fastclient/middleware.py
"""Helpers for the single middleware slot of a client.

A client accepts one middleware; :func:`compose_middleware` folds several
into one so cross-cutting concerns (auth, logging, retries written by the
caller) can be kept apart.
"""

import time
from collections.abc import Sequence

import httpx

from .log_config import logger
from .types import Middleware, Next


def compose_middleware(*middlewares: Middleware) -> Middleware:
    """Combine ``middlewares`` into one, outermost first.

    ``compose_middleware(a, b)`` runs ``a``, whose ``next`` runs ``b``,
    whose ``next`` is the client's hook-decorated transport.
    """
    chain: Sequence[Middleware] = tuple(middlewares)
    for middleware in chain:
        if not callable(middleware):
            raise TypeError(f"Middleware must be callable, got {type(middleware).__name__}")

    async def composed(request: httpx.Request, next: Next) -> httpx.Response:
        pipeline = next
        for middleware in reversed(chain):
            next_pipeline = pipeline

            async def _wrapped(
                req: httpx.Request,
                *,
                _mw: Middleware = middleware,
                _n: Next = next_pipeline,
            ) -> httpx.Response:
                return await _mw(req, _n)

            pipeline = _wrapped
        return await pipeline(request)

    return composed


async def logging_middleware(request: httpx.Request, next: Next) -> httpx.Response:
    """Log method, URL, status and elapsed time of every call."""
    started = time.perf_counter()
    try:
        response = await next(request)
    except Exception as e:
        elapsed = time.perf_counter() - started
        logger.warning(
            f"{request.method} {request.url} failed after {elapsed:.3f}s: "
            f"{type(e).__name__}: {e}"
        )
        raise
    elapsed = time.perf_counter() - started
    logger.info(
        f"{request.method} {request.url} completed with status "
        f"{response.status_code} in {elapsed:.3f}s"
    )
    return response
