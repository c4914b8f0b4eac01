"""Strava API v3 client implementation."""

import logging
import threading
from typing import List, Optional

from strava_toolkit.auth import TokenProvider
from strava_toolkit.clients.base import BaseClient, clean_empty_strings, decode_response
from strava_toolkit.config import Config
from strava_toolkit.models import (
    ActivityStats,
    DetailedAthlete,
    Pagination,
    SummaryActivity,
    TimeFilter,
)
from strava_toolkit.query import append_pagination, append_time_filter

logger = logging.getLogger(__name__)


def _parse_activities(data) -> List[SummaryActivity]:
    if not isinstance(data, list):
        raise TypeError(f"activity list must be a JSON array, got {type(data).__name__}")
    return [SummaryActivity.from_dict(item) for item in data]


class StravaClient(BaseClient):
    """Client for the Strava API.

    The athlete id used for athlete-scoped endpoints is either pinned with
    :meth:`set_athlete_id` or looked up once from ``/athlete`` and cached.
    """

    def __init__(self, token_provider: TokenProvider):
        super().__init__(token_provider, Config.STRAVA_BASE_URL)
        self.athlete_id: Optional[int] = None
        self._athlete_id_lock = threading.Lock()

    def set_athlete_id(self, athlete_id: int):
        """Use ``athlete_id`` for all further requests instead of looking it up."""
        with self._athlete_id_lock:
            self.athlete_id = athlete_id

    def fetch_authorized_athlete(self) -> DetailedAthlete:
        """Fetch the athlete the access token belongs to."""
        body = self._send_request(self.api_endpoint("/athlete"))
        return decode_response(body, DetailedAthlete.from_dict)

    def list_athlete_activities(
        self,
        time_filter: Optional[TimeFilter] = None,
        pagination: Optional[Pagination] = None,
    ) -> List[SummaryActivity]:
        """List the athlete's activities.

        Only a single page is requested; call again with
        ``pagination.next_page()`` to walk through the list.
        """
        query = {}
        append_time_filter(query, time_filter)
        append_pagination(query, pagination)

        body = self._send_request(self.api_endpoint("/athlete/activities"), query)
        activities = decode_response(body, _parse_activities)
        logger.debug(f"Retrieved {len(activities)} activities")
        return activities

    def fetch_athlete_stats(self) -> ActivityStats:
        """Fetch recent, year-to-date and all-time totals of the athlete."""
        athlete_id = self.resolve_athlete_id()

        body = self._send_request(self.api_endpoint("/athletes/%d/stats", athlete_id))
        return decode_response(clean_empty_strings(body), ActivityStats.from_dict)

    def resolve_athlete_id(self) -> int:
        """Return the pinned athlete id, looking it up on first use."""
        with self._athlete_id_lock:
            if self.athlete_id is None:
                athlete = self.fetch_authorized_athlete()
                self.athlete_id = athlete.id
                logger.info(f"Resolved authorized athlete id {athlete.id}")
            return self.athlete_id
