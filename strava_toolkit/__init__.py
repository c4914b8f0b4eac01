"""Client library for the Strava API v3."""

from strava_toolkit.auth import (
    OAuth2Config,
    RefreshingTokenProvider,
    StaticTokenProvider,
    TokenProvider,
    token_provider_from_authorization_code,
    token_provider_from_refresh_token,
)
from strava_toolkit.clients import StravaClient
from strava_toolkit.exceptions import (
    AuthenticationError,
    DecodeError,
    FaultError,
    NetworkError,
    StravaError,
)
from strava_toolkit.models import (
    ActivityStats,
    ActivityTotal,
    DetailedAthlete,
    Fault,
    FaultDetail,
    Pagination,
    SummaryActivity,
    TimeFilter,
    new_pagination,
)

__all__ = [
    'ActivityStats',
    'ActivityTotal',
    'AuthenticationError',
    'DecodeError',
    'DetailedAthlete',
    'Fault',
    'FaultDetail',
    'FaultError',
    'NetworkError',
    'OAuth2Config',
    'Pagination',
    'RefreshingTokenProvider',
    'StaticTokenProvider',
    'StravaClient',
    'StravaError',
    'SummaryActivity',
    'TimeFilter',
    'TokenProvider',
    'new_pagination',
    'token_provider_from_authorization_code',
    'token_provider_from_refresh_token',
]
