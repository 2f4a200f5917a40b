# fastclient/request.py
"""Request assembly.

One assembler function serves every method; per-method behaviour lives in
the ``METHOD_TRAITS`` table rather than in branches on the method name.
"""

from dataclasses import dataclass

import httpx

from .exceptions import FastClientError
from .log_config import logger
from .types import CallArgs, EndpointDescriptor, HttpMethod


@dataclass(frozen=True)
class MethodTraits:
    """Request-construction rules for one HTTP method.

    Attributes:
        allows_body: Whether a body may be sent with the method.
        default_content_type: Whether a Content-Type is filled in when the
            caller supplies none.
    """

    allows_body: bool
    default_content_type: bool


METHOD_TRAITS: dict[HttpMethod, MethodTraits] = {
    HttpMethod.GET: MethodTraits(allows_body=False, default_content_type=False),
    HttpMethod.HEAD: MethodTraits(allows_body=False, default_content_type=False),
    HttpMethod.DELETE: MethodTraits(allows_body=True, default_content_type=False),
    HttpMethod.POST: MethodTraits(allows_body=True, default_content_type=True),
    HttpMethod.PUT: MethodTraits(allows_body=True, default_content_type=True),
    HttpMethod.PATCH: MethodTraits(allows_body=True, default_content_type=True),
}

# Keywords the assembler passes to httpx.Request itself
ASSEMBLER_KEYWORDS = frozenset({"method", "url", "headers", "content"})


def assemble_request(
    descriptor: EndpointDescriptor,
    url: httpx.URL,
    args: CallArgs,
    *,
    default_content_type: str = "application/json",
) -> httpx.Request:
    """Build the outgoing request for one call.

    A caller-supplied ``Content-Type`` header is never replaced. Otherwise
    ``args.content_type`` is applied when given, and POST/PUT/PATCH fall back
    to ``default_content_type``. The body is passed through unserialized and
    extra call fields are forwarded to ``httpx.Request`` verbatim, except
    those in ``ASSEMBLER_KEYWORDS``, which are dropped with a warning.

    Raises:
        FastClientError: If a body is supplied for a method that cannot carry one.
    """
    traits = METHOD_TRAITS[descriptor.method]
    if args.body is not None and not traits.allows_body:
        raise FastClientError(
            f"{descriptor.method.value} requests cannot carry a body (URL: {url})"
        )

    headers = httpx.Headers(args.headers)
    if "Content-Type" not in headers:
        if args.content_type:
            headers["Content-Type"] = args.content_type
        elif traits.default_content_type:
            headers["Content-Type"] = default_content_type

    extras = args.extra_fields
    for key in ASSEMBLER_KEYWORDS.intersection(extras):
        logger.warning(
            f"Ignoring call field '{key}'; the assembler sets it for {url}"
        )
        del extras[key]
    return httpx.Request(
        descriptor.method.value,
        url,
        headers=headers,
        content=args.body,
        **extras,
    )
