from strava_toolkit.clients.base import BaseClient
from strava_toolkit.clients.strava import StravaClient

__all__ = ['BaseClient', 'StravaClient']
