from __future__ import annotations

import json

import pytest
import requests


class FakeResponse:
    def __init__(self, payload=None, status_code: int = 200, text: str | None = None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        return self._payload


class FakeSession:
    """Stands in for requests.Session; routes are url → FakeResponse or exception."""

    def __init__(self, routes: dict | None = None):
        self.headers: dict[str, str] = {}
        self.routes = dict(routes or {})
        self.calls: list[tuple[str, float]] = []

    def get(self, url: str, timeout: float | None = None):
        self.calls.append((url, timeout))
        route = self.routes.get(url)
        if route is None:
            raise requests.ConnectionError(f"no route to {url}")
        if isinstance(route, Exception):
            raise route
        return route


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()
