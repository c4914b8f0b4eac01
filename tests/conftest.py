"""Shared fixtures: a local stand-in for the Strava API."""

import threading
from pathlib import Path

import pytest
from flask import Flask, Response, request
from werkzeug.serving import make_server

from strava_toolkit.auth import TokenProvider
from strava_toolkit.clients.strava import StravaClient
from strava_toolkit.exceptions import AuthenticationError

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class MockStravaApi:
    """Serves fixture files for registered paths and records every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.app = Flask(__name__)
        self.app.add_url_rule("/<path:path>", "api", self._handle)
        self.url = None

    def serve(self, path, fixture, status=200):
        """Answer GET ``path`` with the content of ``fixture``."""
        self.routes[path] = ((FIXTURES_DIR / fixture).read_bytes(), status)

    def serve_body(self, path, body, status=200):
        self.routes[path] = (body, status)

    def calls(self, path):
        return [r for r in self.requests if r["path"] == path]

    def _handle(self, path):
        path = "/" + path
        self.requests.append({
            "path": path,
            "query": request.query_string.decode(),
            "authorization": request.headers.get("Authorization"),
        })
        if path not in self.routes:
            return Response(b'{"message": "Record Not Found", "errors": []}', status=404,
                            mimetype="application/json")
        body, status = self.routes[path]
        return Response(body, status=status, mimetype="application/json")


class MockTokenProvider(TokenProvider):
    """Returns a dummy token, or fails on every call."""

    def __init__(self, should_fail=False):
        self.should_fail = should_fail
        self.calls = 0

    def token(self):
        self.calls += 1
        if self.should_fail:
            raise AuthenticationError("An error has occurred.")
        return "<ACCESS_TOKEN>"


@pytest.fixture
def api_server():
    """Run a mock Strava API on an ephemeral local port."""
    api = MockStravaApi()
    server = make_server("127.0.0.1", 0, api.app, threaded=True)
    api.url = f"http://127.0.0.1:{server.server_port}"

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield api
    server.shutdown()
    thread.join(timeout=5)


@pytest.fixture
def token_provider():
    return MockTokenProvider()


@pytest.fixture
def client(token_provider):
    """Client with a working token provider and the default base URL."""
    strava = StravaClient(token_provider)
    yield strava
    strava.close()


@pytest.fixture
def api_client(client, api_server):
    """Client pointed at the mock API."""
    client.set_base_url(api_server.url)
    return client
