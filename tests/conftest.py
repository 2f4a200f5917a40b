# tests/conftest.py
import httpx
import pytest

from fastclient.config import ClientSettings

BASE_URL = "https://localhost:3000"


class RecordingTransport:
    """Transport stub answering every request with an empty response."""

    def __init__(self, status_code: int = 200, json: object | None = None):
        self.status_code = status_code
        self.json = json
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json, request=request)
        return httpx.Response(self.status_code, request=request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def settings() -> ClientSettings:
    """Settings independent of the developer's environment and .env files."""
    return ClientSettings(_env_file=None)
