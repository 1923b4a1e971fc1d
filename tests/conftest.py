"""Shared fixtures: a throwaway sandbox and a stubbed weather provider."""

from __future__ import annotations

import io
import json
import urllib.error
import urllib.request
from pathlib import Path

import pytest

from toolhost.app_context import AppContext
from toolhost.config.models import HostConfig, WeatherConfig

TEST_API_KEY = "test-secret-key-123"


class FakeResponse:
    def __init__(self, body: bytes, status: int = 200):
        self._body = body
        self.status = status

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeProvider:
    """Stands in for urllib.request.urlopen and records every request."""

    def __init__(self):
        self.requests: list[str] = []
        self.body: bytes = b"{}"
        self.status: int = 200
        self.error: Exception | None = None
        self.error_bodies: list[io.BytesIO] = []

    def respond_json(self, obj) -> None:
        self.body = json.dumps(obj).encode("utf-8")

    def __call__(self, req, *args, **kwargs):
        url = req.full_url if isinstance(req, urllib.request.Request) else str(req)
        self.requests.append(url)
        if self.error is not None:
            raise self.error
        if self.status >= 400:
            body = io.BytesIO(b"{}")
            self.error_bodies.append(body)
            raise urllib.error.HTTPError(url, self.status, "error", {}, body)
        return FakeResponse(self.body, self.status)


@pytest.fixture
def provider(monkeypatch) -> FakeProvider:
    fake = FakeProvider()
    monkeypatch.setattr(urllib.request, "urlopen", fake)
    return fake


@pytest.fixture
def sandbox(tmp_path) -> Path:
    d = tmp_path / "files"
    d.mkdir()
    return d


@pytest.fixture
def config(sandbox) -> HostConfig:
    return HostConfig(
        files_dir=sandbox,
        weather=WeatherConfig(api_key=TEST_API_KEY, base_url="https://weather.invalid/data/2.5/weather"),
    )


@pytest.fixture
def ctx(config) -> AppContext:
    return AppContext.from_config(config)


@pytest.fixture
def sample_weather() -> dict:
    return {
        "name": "Tampa",
        "sys": {"country": "US"},
        "weather": [{"description": "clear sky"}],
        "main": {"temp": 68.0, "feels_like": 70.3, "humidity": 55},
        "wind": {"speed": 5.82},
        "visibility": 10000,
    }
