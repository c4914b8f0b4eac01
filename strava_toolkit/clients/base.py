"""Request pipeline shared by API clients.

Every call goes through the same steps: fetch a token, send an authorized GET,
turn status codes of 400 and above into a ``FaultError`` and hand the raw
body back for decoding.
"""

import json
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

import requests

from strava_toolkit.auth import TokenProvider
from strava_toolkit.config import Config
from strava_toolkit.exceptions import AuthenticationError, DecodeError, FaultError, NetworkError
from strava_toolkit.models import Fault
from strava_toolkit.query import encode_query

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseClient:
    """Authorized access to a JSON API below a base URL."""

    def __init__(self, token_provider: TokenProvider, base_url: str):
        self.base_url = base_url
        self.token_provider = token_provider
        self.session = requests.Session()

    def set_base_url(self, base_url: str):
        """Send all further requests to ``base_url``."""
        self.base_url = base_url

    def api_endpoint(self, path: str, *args) -> str:
        """Prefix ``path`` with the base URL, substituting ``%`` arguments."""
        if args:
            path = path % args
        return self.base_url + path

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _add_token(self, headers: Dict[str, str]):
        try:
            token = self.token_provider.token()
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(f"Failed to obtain access token: {e}") from e
        headers["Authorization"] = f"Bearer {token}"

    def _send_request(self, url: str, query: Optional[Dict[str, str]] = None) -> bytes:
        """Perform an authorized GET and return the response body."""
        headers = {}
        self._add_token(headers)

        if query:
            url = f"{url}?{encode_query(query)}"

        logger.debug(f"GET {url}")
        try:
            with self.session.get(url, headers=headers, timeout=Config.REQUEST_TIMEOUT) as response:
                if response.status_code > 399:
                    raise fault_response_as_error(response)
                return response.content
        except requests.RequestException as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e


def fault_response_as_error(response: requests.Response) -> FaultError:
    """Convert a fault response into an error.

    A body that is not a valid fault still yields an error built from the
    status code alone.
    """
    try:
        fault = Fault.from_dict(json.loads(response.content))
    except (requests.RequestException, ValueError, TypeError, RecursionError):
        fault = Fault()

    message = f"{response.status_code} {fault.message}"
    if fault.errors:
        first = fault.errors[0]
        message = f"{message}: {first.resource} {first.field} {first.code}"
    return FaultError(response.status_code, message)


def decode_response(body: bytes, parse: Callable[[Any], T]) -> T:
    """Parse a JSON body and build a record from it with ``parse``."""
    try:
        return parse(json.loads(body))
    except (ValueError, TypeError, RecursionError) as e:
        raise DecodeError(f"Unexpected response body: {e}") from e


def clean_empty_strings(content: bytes) -> bytes:
    """Replace every ``""`` in ``content`` with an empty JSON object ``{}``.

    The stats endpoint sometimes sends ``""`` where a totals object belongs.
    The replacement does not look at the schema, so a genuine empty string
    value in the payload would be turned into an object as well.
    """
    return content.replace(b'""', b"{}")
