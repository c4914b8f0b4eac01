"""Errors raised by the Strava API client."""


class StravaError(Exception):
    """Base class for all client errors."""


class AuthenticationError(StravaError):
    """The token provider could not produce an access token."""


class NetworkError(StravaError):
    """The HTTP exchange with the API could not be completed."""


class FaultError(StravaError):
    """The API answered with a status code of 400 or above."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(StravaError):
    """A successful response body did not match the expected schema."""
