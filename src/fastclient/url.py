# fastclient/url.py
"""Path-template resolution and query encoding.

Templates are ``/``-delimited; a segment of the exact form ``{identifier}``
is a substitution point. Partial-segment or nested braces are left alone.
"""

import re
from collections.abc import Mapping
from typing import Any

import httpx

from .exceptions import ConfigurationError, MissingPathParameterError
from .log_config import logger

_PLACEHOLDER_RE = re.compile(r"^\{([A-Za-z_][A-Za-z0-9_]*)\}$")


def render_value(value: Any) -> str:
    """Render a path or query value the way it appears in a URL.

    Booleans are lower-cased so ``True`` renders as ``true``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def path_params(template: str) -> list[str]:
    """Return the placeholder names of ``template`` in order of appearance.

    A name used in several segments is listed once.
    """
    names: list[str] = []
    for segment in template.split("/"):
        match = _PLACEHOLDER_RE.match(segment)
        if match and match.group(1) not in names:
            names.append(match.group(1))
    return names


def substitute_path(
    template: str, path_args: Mapping[str, Any], *, strict: bool = False
) -> str:
    """Substitute ``{name}`` segments of ``template`` with ``path_args`` values.

    Placeholders without a matching argument keep their literal text unless
    ``strict`` is set.

    Raises:
        MissingPathParameterError: In strict mode, if any placeholder is unresolved.
    """
    segments = template.split("/")
    missing: list[str] = []
    for index, segment in enumerate(segments):
        match = _PLACEHOLDER_RE.match(segment)
        if not match:
            continue
        name = match.group(1)
        if name in path_args:
            segments[index] = render_value(path_args[name])
        elif name not in missing:
            missing.append(name)

    if missing:
        if strict:
            raise MissingPathParameterError(
                f"Unresolved path parameters {missing} in template '{template}'",
                missing=missing,
            )
        logger.warning(
            f"Path template '{template}' left placeholders {missing} unresolved; "
            "sending the literal text."
        )
    return "/".join(segments)


def resolve_url(
    template: str,
    path_args: Mapping[str, Any] | None,
    query: Mapping[str, Any] | None,
    base: str | httpx.URL,
    *,
    strict: bool = False,
) -> httpx.URL:
    """Build the target URL of a call.

    The substituted template is joined onto ``base`` with standard relative
    reference resolution, then every truthy query value is appended in
    mapping order. Falsy values (``0``, ``""``, ``False``, ``None``) are
    omitted entirely.

    Args:
        template: Path template such as ``/users/{id}``.
        path_args: Placeholder values.
        query: Query parameters.
        base: Base URL supplying scheme and host.
        strict: Raise on unresolved placeholders instead of keeping them.

    Returns:
        httpx.URL: The resolved URL.
    """
    base_url = httpx.URL(base) if not isinstance(base, httpx.URL) else base
    if not base_url.scheme or not base_url.host:
        raise ConfigurationError(
            f"Base URL '{base}' must be absolute (scheme and host required)"
        )

    relative = substitute_path(template, path_args or {}, strict=strict)
    url = base_url.join(relative)

    for key, value in (query or {}).items():
        if not value:
            logger.trace(f"Skipping falsy query parameter '{key}'")
            continue
        url = url.copy_add_param(key, render_value(value))
    return url
