"""Request parameters and response records of the Strava API.

Response records mirror the JSON schema documented at
https://developers.strava.com/docs/reference/#api-models. Missing keys fall
back to zero values, the way the API's own clients treat them; a payload of the
wrong shape raises ``TypeError`` or ``ValueError``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


def _require_dict(data: Any, name: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{name} must be a JSON object, got {type(data).__name__}")
    return data


def _int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return int(value)


def _float(data: Dict[str, Any], key: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    return float(value)


def _bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    return value


def _str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string, got {value!r}")
    return value


def _datetime(data: Dict[str, Any], key: str) -> Optional[datetime]:
    value = _str(data, key)
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class TimeFilter:
    """Restricts activity listings to a time range."""

    before: Optional[datetime] = None
    after: Optional[datetime] = None


@dataclass
class Pagination:
    """Which page of a record list to request, and how many records per page.

    Use :func:`new_pagination` to build one from plain integers.
    """

    page: Optional[int] = None
    per_page: Optional[int] = None

    def next_page(self):
        """Move to the next page. Does nothing if no page is set."""
        if self.page is not None:
            self.page += 1


def new_pagination(page: int, per_page: int) -> Optional[Pagination]:
    """Build a pagination from two integers.

    Values of zero or less are treated as unset. When both are unset there is
    nothing to paginate and ``None`` is returned.
    """
    if page <= 0 and per_page <= 0:
        return None

    return Pagination(
        page=page if page > 0 else None,
        per_page=per_page if per_page > 0 else None,
    )


@dataclass(frozen=True)
class FaultDetail:
    """A single error entry of a fault."""

    code: str = ""
    field: str = ""
    resource: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "FaultDetail":
        data = _require_dict(data, "Error")
        return cls(
            code=_str(data, "code") or "",
            field=_str(data, "field") or "",
            resource=_str(data, "resource") or "",
        )


@dataclass(frozen=True)
class Fault:
    """Error envelope returned by the API for failed requests."""

    errors: List[FaultDetail] = field(default_factory=list)
    message: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Fault":
        data = _require_dict(data, "Fault")
        errors = data.get("errors") or []
        if not isinstance(errors, list):
            raise TypeError("Fault errors must be a JSON array")
        return cls(
            errors=[FaultDetail.from_dict(e) for e in errors],
            message=_str(data, "message") or "",
        )


@dataclass(frozen=True)
class DetailedAthlete:
    """The authenticated athlete."""

    id: int = 0
    username: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    sex: Optional[str] = None
    premium: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Any) -> "DetailedAthlete":
        data = _require_dict(data, "DetailedAthlete")
        return cls(
            id=_int(data, "id"),
            username=_str(data, "username"),
            firstname=_str(data, "firstname"),
            lastname=_str(data, "lastname"),
            city=_str(data, "city"),
            state=_str(data, "state"),
            country=_str(data, "country"),
            sex=_str(data, "sex"),
            premium=_bool(data, "premium"),
            created_at=_datetime(data, "created_at"),
            updated_at=_datetime(data, "updated_at"),
        )


@dataclass(frozen=True)
class SummaryActivity:
    """Summary of a single activity, as returned by activity listings."""

    id: int = 0
    name: str = ""
    distance: float = 0.0  # meters
    moving_time: int = 0  # seconds
    # e.g. Run, Ride, TrailRun, MountainBikeRide, Swim, ...
    sport_type: str = ""
    start_date_local: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Any) -> "SummaryActivity":
        data = _require_dict(data, "SummaryActivity")
        return cls(
            id=_int(data, "id"),
            name=_str(data, "name") or "",
            distance=_float(data, "distance"),
            moving_time=_int(data, "moving_time"),
            sport_type=_str(data, "sport_type") or "",
            start_date_local=_datetime(data, "start_date_local"),
        )


@dataclass(frozen=True)
class ActivityTotal:
    """Roll-up of metrics over a set of activities, in seconds and meters."""

    count: int = 0
    distance: float = 0.0
    moving_time: int = 0
    elapsed_time: int = 0
    elevation_gain: float = 0.0
    achievement_count: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> "ActivityTotal":
        if data is None:
            return cls()
        data = _require_dict(data, "ActivityTotal")
        return cls(
            count=_int(data, "count"),
            distance=_float(data, "distance"),
            moving_time=_int(data, "moving_time"),
            elapsed_time=_int(data, "elapsed_time"),
            elevation_gain=_float(data, "elevation_gain"),
            achievement_count=_int(data, "achievement_count"),
        )


@dataclass(frozen=True)
class ActivityStats:
    """Rolled-up statistics and totals for an athlete.

    ``recent_*`` totals cover the last four weeks, ``ytd_*`` the current year
    and ``all_*`` the athlete's whole history.
    """

    biggest_ride_distance: float = 0.0
    biggest_climb_elevation_gain: float = 0.0
    recent_ride_totals: ActivityTotal = field(default_factory=ActivityTotal)
    recent_run_totals: ActivityTotal = field(default_factory=ActivityTotal)
    recent_swim_totals: ActivityTotal = field(default_factory=ActivityTotal)
    ytd_ride_totals: ActivityTotal = field(default_factory=ActivityTotal)
    ytd_run_totals: ActivityTotal = field(default_factory=ActivityTotal)
    ytd_swim_totals: ActivityTotal = field(default_factory=ActivityTotal)
    all_ride_totals: ActivityTotal = field(default_factory=ActivityTotal)
    all_run_totals: ActivityTotal = field(default_factory=ActivityTotal)
    all_swim_totals: ActivityTotal = field(default_factory=ActivityTotal)

    TOTALS = (
        "recent_ride_totals",
        "recent_run_totals",
        "recent_swim_totals",
        "ytd_ride_totals",
        "ytd_run_totals",
        "ytd_swim_totals",
        "all_ride_totals",
        "all_run_totals",
        "all_swim_totals",
    )

    @classmethod
    def from_dict(cls, data: Any) -> "ActivityStats":
        data = _require_dict(data, "ActivityStats")
        totals = {name: ActivityTotal.from_dict(data.get(name)) for name in cls.TOTALS}
        return cls(
            biggest_ride_distance=_float(data, "biggest_ride_distance"),
            biggest_climb_elevation_gain=_float(data, "biggest_climb_elevation_gain"),
            **totals,
        )
