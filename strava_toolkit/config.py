"""Configuration management for strava_toolkit."""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _get_int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class Config:
    """Application configuration."""

    # API endpoints
    STRAVA_BASE_URL = os.environ.get("STRAVA_BASE_URL", "https://www.strava.com/api/v3")
    STRAVA_TOKEN_ENDPOINT = os.environ.get(
        "STRAVA_TOKEN_ENDPOINT", "https://www.strava.com/oauth/token"
    )

    # OAuth2 credentials
    STRAVA_CLIENT_ID = os.environ.get("STRAVA_CLIENT_ID")
    STRAVA_CLIENT_SECRET = os.environ.get("STRAVA_CLIENT_SECRET")
    STRAVA_REFRESH_TOKEN = os.environ.get("STRAVA_REFRESH_TOKEN")
    STRAVA_ACCESS_TOKEN = os.environ.get("STRAVA_ACCESS_TOKEN")

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # API Settings
    REQUEST_TIMEOUT = _get_int_env("STRAVA_REQUEST_TIMEOUT", 30)  # seconds

    # Access tokens are refreshed this many seconds before they expire
    TOKEN_EXPIRY_MARGIN_SECONDS = _get_int_env("STRAVA_TOKEN_EXPIRY_MARGIN_SECONDS", 60)

    def __repr__(self):
        return f"Config(STRAVA_BASE_URL={self.STRAVA_BASE_URL}, REQUEST_TIMEOUT={self.REQUEST_TIMEOUT})"
