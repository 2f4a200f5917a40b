"""Tests for client construction, endpoint registration and end-to-end calls."""

from unittest.mock import MagicMock

import httpx
import pytest
from conftest import BASE_URL, RecordingTransport

from fastclient import create_client
from fastclient.client import FastClient
from fastclient.config import ClientSettings
from fastclient.exceptions import ConfigurationError, NoTransportAvailable
from fastclient.pipeline import Endpoint
from fastclient.transport import HttpxTransport, set_default_transport
from fastclient.types import CallArgs, EndpointDescriptor


@pytest.fixture
def api(transport, settings) -> FastClient:
    return create_client(
        BASE_URL,
        {
            "search": {"method": "GET", "path": "/"},
            "get": {"method": "GET", "href": "/{id}"},
            "create": EndpointDescriptor(method="POST", path="/items"),
        },
        transport=transport,
        settings=settings,
    )


@pytest.mark.asyncio
async def test_transport_called_once_per_call(api, transport):
    await api.search(query={"q": "123"})
    assert len(transport.requests) == 1
    await api.search(query={"q": "123"})
    await api.search(query={"q": "123"})
    assert len(transport.requests) == 3


@pytest.mark.asyncio
async def test_call_returns_transport_response(api):
    response = await api.search({"query": {"q": "123"}})
    assert isinstance(response, httpx.Response)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_query_params_in_url(api):
    response = await api.search(query={"a": 123, "b": True, "c": "abc"})
    assert str(response.url) == "https://localhost:3000/?a=123&b=true&c=abc"


@pytest.mark.asyncio
async def test_path_params_in_url(api):
    response = await api.get(path={"id": 123})
    assert str(response.url) == "https://localhost:3000/123"


@pytest.mark.asyncio
async def test_end_to_end_get_with_path_and_query(transport, settings):
    client = create_client(
        "https://host/",
        {"get": {"method": "GET", "href": "/{id}"}},
        transport=transport,
        settings=settings,
    )
    response = await client.get(CallArgs(path={"id": "123"}, query={"test": "321"}))
    assert response is not None
    assert transport.last.method == "GET"
    assert str(transport.last.url) == "https://host/123?test=321"


@pytest.mark.asyncio
async def test_keyword_args_override_positional_mapping(api, transport):
    await api.get({"path": {"id": 1}}, path={"id": 2})
    assert transport.last.url.path == "/2"


@pytest.mark.asyncio
async def test_content_type_keyword_overrides_positional_call_args(api, transport):
    await api.create(CallArgs(body="x"), contentType="text/plain")
    assert transport.last.headers["Content-Type"] == "text/plain"
    assert transport.last.content == b"x"


@pytest.mark.asyncio
async def test_content_type_keyword_overrides_positional_mapping_alias(api, transport):
    await api.create({"body": "x", "contentType": "text/csv"}, content_type="text/plain")
    assert transport.last.headers["Content-Type"] == "text/plain"


@pytest.mark.asyncio
async def test_positional_content_type_kept_when_overriding_other_fields(api, transport):
    await api.create(
        CallArgs(body="x", content_type="text/csv", extensions={"trace": "1"}),
        headers={"X-Extra": "yes"},
    )
    assert transport.last.headers["Content-Type"] == "text/csv"
    assert transport.last.headers["X-Extra"] == "yes"
    assert transport.last.extensions["trace"] == "1"


@pytest.mark.asyncio
async def test_parser_result_is_returned(settings):
    transport = RecordingTransport(json={"id": 7, "name": "seven"})
    client = create_client(
        BASE_URL,
        {"get": {"method": "GET", "path": "/{id}", "parser": lambda r: r.json()}},
        transport=transport,
        settings=settings,
    )
    assert await client.get(path={"id": 7}) == {"id": 7, "name": "seven"}


@pytest.mark.asyncio
async def test_post_defaults_to_json_content_type(api, transport):
    await api.create(body='{"name": "x"}')
    assert transport.last.headers["Content-Type"] == "application/json"

    await api.create(body="x", contentType="text/plain")
    assert transport.last.headers["Content-Type"] == "text/plain"


@pytest.mark.asyncio
async def test_ad_hoc_endpoint_uses_same_pipeline(api, transport):
    hook = MagicMock(side_effect=lambda r: r)
    api.on("request", hook)

    search = api({"method": "GET", "href": "/"})
    assert isinstance(search, Endpoint)
    await search({"query": {"q": "1"}})

    get = api.endpoint(EndpointDescriptor(method="GET", path="/{id}"))
    await get(path={"id": "abc"})

    assert hook.call_count == 2
    assert [str(r.url) for r in transport.requests] == [
        "https://localhost:3000/?q=1",
        "https://localhost:3000/abc",
    ]


@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe(api):
    mock_fn = MagicMock(side_effect=lambda x: x)
    unsub = api.on("request", mock_fn)

    await api.search()
    await api.search()
    await api.search()
    assert mock_fn.call_count == 3

    unsub()

    await api.search()
    await api.search()
    await api.search()
    assert mock_fn.call_count == 3


@pytest.mark.asyncio
async def test_hooks_shared_across_endpoints_of_one_client(api):
    seen = []
    api.on("response", lambda response: seen.append(response.url.path) or response)
    await api.search()
    await api.get(path={"id": 9})
    assert seen == ["/", "/9"]


@pytest.mark.asyncio
async def test_clients_do_not_share_endpoints_or_hooks(transport, settings):
    config = {"base": BASE_URL, "transport": transport, "settings": settings}
    first = create_client(endpoints={"search": {"method": "GET", "path": "/"}}, **config)
    second = create_client(endpoints={"get": {"method": "GET", "path": "/{id}"}}, **config)

    assert "search" in first.endpoints and "search" not in second.endpoints
    assert not hasattr(second, "search")
    assert not hasattr(first, "get")

    first.register("extra", {"method": "DELETE", "path": "/x"})
    assert "extra" not in second.endpoints

    hook = MagicMock(side_effect=lambda r: r)
    first.on("request", hook)
    await second.get(path={"id": 1})
    assert hook.call_count == 0
    assert first.hooks is not second.hooks


def test_register_overwrites_previous_binding(api):
    api.register("search", {"method": "HEAD", "path": "/ping"})
    assert api.endpoints.descriptor("search").method.value == "HEAD"
    assert api.endpoints.names() == ["search", "get", "create"]


def test_endpoint_names_are_validated(api):
    with pytest.raises(ConfigurationError):
        api.register("not-an-identifier", {"method": "GET", "path": "/"})
    with pytest.raises(ConfigurationError):
        api.register("on", {"method": "GET", "path": "/"})
    with pytest.raises(ConfigurationError):
        api.register("_private", {"method": "GET", "path": "/"})


def test_invalid_descriptor_is_rejected(api):
    with pytest.raises(ConfigurationError):
        api.register("bad", {"method": "TRACE", "path": "/"})


def test_unknown_endpoint_raises_attribute_error(api):
    with pytest.raises(AttributeError):
        api.missing  # noqa: B018


def test_endpoints_listed_in_dir(api):
    assert {"search", "get", "create"} <= set(dir(api))


def test_relative_base_url_is_rejected(transport, settings):
    with pytest.raises(ConfigurationError):
        create_client("/api", transport=transport, settings=settings)


def test_non_callable_middleware_is_rejected(transport, settings):
    with pytest.raises(ConfigurationError):
        create_client(BASE_URL, middleware="nope", transport=transport, settings=settings)


def test_non_callable_transport_is_rejected(settings):
    with pytest.raises(ConfigurationError):
        create_client(BASE_URL, transport=42, settings=settings)


def test_no_transport_when_ambient_disabled(settings):
    no_ambient = settings.model_copy(update={"use_ambient_transport": False})
    with pytest.raises(NoTransportAvailable):
        create_client(BASE_URL, settings=no_ambient)


def test_no_transport_when_default_factory_removed(settings):
    previous = set_default_transport(None)
    try:
        with pytest.raises(NoTransportAvailable):
            create_client(BASE_URL, settings=settings)
    finally:
        set_default_transport(previous)


def test_ambient_transport_is_httpx(settings):
    client = create_client(BASE_URL, settings=settings)
    assert isinstance(client._transport, HttpxTransport)
    assert client._owns_transport is True


def test_injected_transport_wins_over_ambient(transport, settings):
    client = create_client(BASE_URL, transport=transport, settings=settings)
    assert client._transport is transport
    assert client._owns_transport is False


@pytest.mark.asyncio
async def test_async_context_manager_closes_owned_transport(settings):
    async with create_client(BASE_URL, settings=settings) as client:
        transport = client._transport
        assert not transport.is_closed
    assert transport.is_closed


@pytest.mark.asyncio
async def test_aclose_leaves_injected_transport_alone(settings):
    transport = MagicMock()
    client = FastClient(BASE_URL, transport=transport, settings=settings)
    await client.aclose()
    transport.aclose.assert_not_called()


def test_default_settings_are_used(transport):
    client = create_client(BASE_URL, transport=transport)
    assert isinstance(client.settings, ClientSettings)
