import httpx
import pytest
from fastapi.testclient import TestClient

from qrproxy.main import app
from qrproxy.services.http_client import dispatcher


class FakeVendor:
    """
    Stands in for the vendor APIs. Routes are keyed by method and URL
    without query string; every request is recorded in ``calls``.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method, url, status=200, json=None, text=None, content=None, headers=None, handler=None):
        def respond(request):
            if handler is not None:
                return handler(request)
            return httpx.Response(status, json=json, text=text, content=content, headers=headers)

        self.routes[(method, url)] = respond

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        respond = self.routes.get((request.method, url))
        if respond is None:
            return httpx.Response(404, json={"error": f"no route for {request.method} {url}"})
        return respond(request)

    def requests_to(self, url):
        return [r for r in self.calls if f"{r.url.scheme}://{r.url.host}{r.url.path}" == url]


@pytest.fixture
def vendor(monkeypatch):
    fake = FakeVendor()
    monkeypatch.setattr(dispatcher, "transport", httpx.MockTransport(fake))
    return fake


@pytest.fixture
def client():
    return TestClient(app, raise_server_exceptions=False)
