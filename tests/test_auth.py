"""Tests for token providers."""

import time
from unittest.mock import MagicMock

import pytest
import requests

from strava_toolkit.auth import (
    OAuth2Config,
    StaticTokenProvider,
    token_provider_from_authorization_code,
    token_provider_from_refresh_token,
)
from strava_toolkit.exceptions import AuthenticationError

TOKEN_URL = "https://www.strava.com/oauth/token"


@pytest.fixture
def oauth_config():
    return OAuth2Config(client_id="12345", client_secret="s3cr3t", token_url=TOKEN_URL)


def _session(*payloads):
    """Session whose token endpoint answers with ``payloads`` in order."""
    responses = []
    for payload in payloads:
        response = MagicMock()
        response.json.return_value = payload
        responses.append(response)
    session = MagicMock()
    session.post.side_effect = responses
    return session


def test_static_token_provider():
    assert StaticTokenProvider("abc").token() == "abc"

    with pytest.raises(AuthenticationError):
        StaticTokenProvider("").token()


def test_from_refresh_token_is_lazy(oauth_config):
    session = _session()
    token_provider_from_refresh_token(oauth_config, "refresh-1", session=session)
    session.post.assert_not_called()


def test_refresh_token_grant(oauth_config):
    session = _session({
        "access_token": "access-1",
        "refresh_token": "refresh-2",
        "expires_at": time.time() + 3600,
    })
    provider = token_provider_from_refresh_token(oauth_config, "refresh-1", session=session)

    assert provider.token() == "access-1"
    assert provider.refresh_token == "refresh-2"

    _, kwargs = session.post.call_args
    assert kwargs["data"] == {
        "client_id": "12345",
        "client_secret": "s3cr3t",
        "grant_type": "refresh_token",
        "refresh_token": "refresh-1",
    }


def test_valid_token_is_reused(oauth_config):
    session = _session({"access_token": "access-1", "expires_in": 21600})
    provider = token_provider_from_refresh_token(oauth_config, "refresh-1", session=session)

    assert provider.token() == "access-1"
    assert provider.token() == "access-1"
    assert session.post.call_count == 1
    assert provider.refresh_token == "refresh-1"


def test_expired_token_is_refreshed(oauth_config):
    session = _session(
        {"access_token": "access-1", "refresh_token": "refresh-2", "expires_at": time.time() - 10},
        {"access_token": "access-2", "refresh_token": "refresh-3", "expires_at": time.time() + 3600},
    )
    provider = token_provider_from_refresh_token(oauth_config, "refresh-1", session=session)

    assert provider.token() == "access-1"
    assert provider.token() == "access-2"
    assert session.post.call_count == 2
    _, kwargs = session.post.call_args
    assert kwargs["data"]["refresh_token"] == "refresh-2"


def test_from_authorization_code(oauth_config):
    session = _session({
        "token_type": "Bearer",
        "access_token": "access-1",
        "refresh_token": "refresh-1",
        "expires_at": time.time() + 3600,
    })
    provider = token_provider_from_authorization_code(oauth_config, "code-1", session=session)

    assert provider.refresh_token == "refresh-1"
    assert provider.token() == "access-1"
    assert session.post.call_count == 1

    args, kwargs = session.post.call_args
    assert args[0] == TOKEN_URL
    assert kwargs["data"]["grant_type"] == "authorization_code"
    assert kwargs["data"]["code"] == "code-1"


def test_token_endpoint_http_error(oauth_config):
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("400 Bad Request")
    session = MagicMock()
    session.post.return_value = response

    with pytest.raises(AuthenticationError, match="400 Bad Request"):
        token_provider_from_authorization_code(oauth_config, "used-code", session=session)


def test_token_endpoint_connection_error(oauth_config):
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("connection refused")
    provider = token_provider_from_refresh_token(oauth_config, "refresh-1", session=session)

    with pytest.raises(AuthenticationError):
        provider.token()


def test_token_endpoint_without_access_token(oauth_config):
    session = _session({"message": "Bad Request"})
    provider = token_provider_from_refresh_token(oauth_config, "refresh-1", session=session)

    with pytest.raises(AuthenticationError, match="no access_token"):
        provider.token()


def test_token_without_expiry_is_reused(oauth_config):
    """A token response without expiry information stays valid until replaced."""
    session = _session({"access_token": "access-1"})
    provider = token_provider_from_refresh_token(oauth_config, "refresh-1", session=session)

    assert provider.token() == "access-1"
    assert provider.token() == "access-1"
    assert session.post.call_count == 1
    assert provider.expires_at is None
