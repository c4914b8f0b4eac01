"""Token providers for authenticating against the Strava API.

The API client only needs something that hands out a current access token.
``RefreshingTokenProvider`` covers the usual OAuth2 setup: it trades a refresh
token for short-lived access tokens at the token endpoint and keeps the
rotated refresh token around. Authorization codes are single-use, so callers
bootstrapping from one must persist ``provider.refresh_token`` afterwards.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from strava_toolkit.config import Config
from strava_toolkit.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class TokenProvider(ABC):
    """Supplies the bearer token sent with every API request."""

    @abstractmethod
    def token(self) -> str:
        """Return a current access token or raise."""
        pass


class StaticTokenProvider(TokenProvider):
    """Always returns the same access token."""

    def __init__(self, access_token: str):
        self.access_token = access_token

    def token(self) -> str:
        if not self.access_token:
            raise AuthenticationError("No access token configured")
        return self.access_token


@dataclass
class OAuth2Config:
    """Credentials of a registered API application."""

    client_id: str
    client_secret: str
    token_url: str = Config.STRAVA_TOKEN_ENDPOINT


class RefreshingTokenProvider(TokenProvider):
    """Hands out access tokens, refreshing them when they run out.

    Safe to share between threads; concurrent callers wait for a single
    refresh.
    """

    def __init__(
        self,
        oauth_config: OAuth2Config,
        refresh_token: str,
        access_token: Optional[str] = None,
        expires_at: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.oauth_config = oauth_config
        self.refresh_token = refresh_token
        self.access_token = access_token
        self.expires_at = expires_at
        self.session = session or requests.Session()
        self._lock = threading.Lock()

    def token(self) -> str:
        with self._lock:
            if not self._is_valid():
                self._apply(self._request_token({
                    "grant_type": "refresh_token",
                    "refresh_token": self.refresh_token,
                }))
            return self.access_token

    def exchange_code(self, auth_code: str):
        """Trade an authorization code for the first token pair."""
        with self._lock:
            self._apply(self._request_token({
                "grant_type": "authorization_code",
                "code": auth_code,
            }))

    def _is_valid(self) -> bool:
        if not self.access_token:
            return False
        # Tokens without an expiry stay valid until replaced
        if self.expires_at is None:
            return True
        return time.time() < self.expires_at - Config.TOKEN_EXPIRY_MARGIN_SECONDS

    def _request_token(self, grant: Dict[str, str]) -> Dict[str, Any]:
        payload = {
            "client_id": self.oauth_config.client_id,
            "client_secret": self.oauth_config.client_secret,
            **grant,
        }
        logger.debug(f"Requesting {grant['grant_type']} token from {self.oauth_config.token_url}")

        try:
            response = self.session.post(
                self.oauth_config.token_url, data=payload, timeout=Config.REQUEST_TIMEOUT
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise AuthenticationError(f"Token request failed: {e}") from e
        except ValueError as e:
            raise AuthenticationError("Token endpoint returned invalid JSON") from e

        if not isinstance(data, dict) or not data.get("access_token"):
            raise AuthenticationError("Token endpoint response has no access_token")
        return data

    def _apply(self, data: Dict[str, Any]):
        self.access_token = data["access_token"]
        if data.get("refresh_token"):
            self.refresh_token = data["refresh_token"]

        if data.get("expires_at"):
            self.expires_at = float(data["expires_at"])
        elif data.get("expires_in"):
            self.expires_at = time.time() + float(data["expires_in"])
        else:
            self.expires_at = None

        logger.debug("Access token refreshed")


def token_provider_from_authorization_code(
    oauth_config: OAuth2Config, auth_code: str, session: Optional[requests.Session] = None
) -> RefreshingTokenProvider:
    """Exchange an authorization code and return a provider for the new tokens.

    The code can only be used once. Persist ``provider.refresh_token`` to
    create providers later with :func:`token_provider_from_refresh_token`.
    """
    provider = RefreshingTokenProvider(oauth_config, refresh_token="", session=session)
    provider.exchange_code(auth_code)
    return provider


def token_provider_from_refresh_token(
    oauth_config: OAuth2Config, refresh_token: str, session: Optional[requests.Session] = None
) -> RefreshingTokenProvider:
    """Return a provider that fetches access tokens with an existing refresh token."""
    return RefreshingTokenProvider(oauth_config, refresh_token=refresh_token, session=session)
