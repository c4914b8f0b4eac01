"""Query parameter helpers for list endpoints."""

from typing import Dict, Optional
from urllib.parse import urlencode

from strava_toolkit.models import Pagination, TimeFilter


def append_time_filter(query: Dict[str, str], time_filter: Optional[TimeFilter]):
    """Add ``before``/``after`` as epoch seconds. Unset bounds are skipped."""
    if time_filter is None:
        return
    if time_filter.before is not None:
        query["before"] = str(int(time_filter.before.timestamp()))
    if time_filter.after is not None:
        query["after"] = str(int(time_filter.after.timestamp()))


def append_pagination(query: Dict[str, str], pagination: Optional[Pagination]):
    """Add ``page``/``per_page``. Unset values are skipped."""
    if pagination is None:
        return
    if pagination.page is not None:
        query["page"] = str(pagination.page)
    if pagination.per_page is not None:
        query["per_page"] = str(pagination.per_page)


def encode_query(query: Dict[str, str]) -> str:
    """Encode query parameters with keys in alphabetical order."""
    return urlencode(sorted(query.items()))
