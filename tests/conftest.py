"""Pytest configuration - loads .env for integration tests, fakes HTTP for unit tests."""

import io
import json
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from squidex_cli.core.client import APIClient, ClientConfig

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

BASE_URL = "http://gateway.test"


class FakeResponse:
    """Minimal stand-in for the object returned by urlopen()."""

    def __init__(self, body: bytes):
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> bool:
        return False


class FakeServer:
    """Scripted urlopen(): each call pops the next queued response or exception."""

    def __init__(self) -> None:
        self.requests: list[urllib.request.Request] = []
        self.responses: list[Any] = []

    def queue(self, *responses: Any) -> None:
        self.responses.extend(responses)

    def urlopen(self, req: urllib.request.Request, timeout: float | None = None) -> FakeResponse:
        self.requests.append(req)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if response is None:
            return FakeResponse(b"")
        if isinstance(response, bytes):
            return FakeResponse(response)
        return FakeResponse(json.dumps(response).encode("utf-8"))

    @property
    def last(self) -> urllib.request.Request:
        return self.requests[-1]


@pytest.fixture
def server(monkeypatch) -> FakeServer:
    """Replace urllib's urlopen with a scripted fake."""
    fake = FakeServer()
    monkeypatch.setattr(urllib.request, "urlopen", fake.urlopen)
    return fake


@pytest.fixture
def http_error():
    """Factory for urllib HTTPError instances with a readable body."""

    def make(status: int, body: Any = None) -> urllib.error.HTTPError:
        if isinstance(body, (dict, list)):
            raw = json.dumps(body).encode("utf-8")
        else:
            raw = (body or "").encode("utf-8")
        return urllib.error.HTTPError(BASE_URL, status, "Gateway said no", None, io.BytesIO(raw))

    return make


@pytest.fixture
def sleeps() -> list[float]:
    """Records backoff delays instead of sleeping."""
    return []


@pytest.fixture
def api_client(sleeps) -> APIClient:
    config = ClientConfig(api_base_url=BASE_URL, retries=3, retry_delay=1.0)
    return APIClient(config, sleep=sleeps.append)
