"""Data containers for Strava API payloads and fetch results.

Deserialization is strict about the fields the client relies on: a missing
or mistyped required field raises ``MalformedResponse`` instead of leaking a
``KeyError`` or ``TypeError`` to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .exceptions import MalformedResponse

_MISSING = object()


def _field(data: dict, name: str, kinds: tuple, where: str, default: Any = _MISSING) -> Any:
    value = data.get(name, _MISSING)
    if value is _MISSING or value is None:
        if default is not _MISSING:
            return default
        raise MalformedResponse(f"{where}: missing required field '{name}'")
    # bool is an int subclass; never accept it where a number is expected
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise MalformedResponse(f"{where}: field '{name}' has unexpected type {type(value).__name__}")
    return value


def _expect_object(data: Any, where: str) -> dict:
    if not isinstance(data, dict):
        raise MalformedResponse(f"{where}: expected a JSON object, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class AthleteInfo:
    """Athlete summary nested in the token response."""
    id: int
    username: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "AthleteInfo":
        data = _expect_object(data, "athlete")
        opt = {}
        for name in ("username", "firstname", "lastname", "city", "state", "country"):
            opt[name] = _field(data, name, (str,), "athlete", default=None)
        return cls(id=_field(data, "id", (int,), "athlete"), **opt)

    @property
    def display_name(self) -> str:
        full = " ".join(p for p in (self.firstname, self.lastname) if p)
        return full or self.username or str(self.id)

    @property
    def location(self) -> str | None:
        parts = [p for p in (self.city, self.state, self.country) if p]
        return ", ".join(parts) if parts else None


@dataclass(frozen=True)
class TokenResponse:
    """Result of a successful authorization-code exchange.

    Nothing here is persisted; the CLI prints it and storing the tokens is
    left to the user.
    """
    token_type: str
    access_token: str
    refresh_token: str
    expires_at: int
    expires_in: int
    athlete: AthleteInfo
    scope: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "TokenResponse":
        data = _expect_object(data, "token response")
        where = "token response"
        return cls(
            token_type=_field(data, "token_type", (str,), where),
            access_token=_field(data, "access_token", (str,), where),
            refresh_token=_field(data, "refresh_token", (str,), where),
            expires_at=_field(data, "expires_at", (int,), where),
            expires_in=_field(data, "expires_in", (int,), where),
            athlete=AthleteInfo.from_dict(_field(data, "athlete", (dict,), where)),
            scope=_field(data, "scope", (str,), where, default=None),
        )


@dataclass(frozen=True)
class Activity:
    """One summary activity from ``/athlete/activities``.

    Strava names the type tag ``type``; it is exposed as ``activity_type``.
    """
    id: int
    name: str
    distance: float
    moving_time: int
    elapsed_time: int
    total_elevation_gain: float
    activity_type: str
    start_date: str
    sport_type: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "Activity":
        data = _expect_object(data, "activity")
        activity_id = _field(data, "id", (int,), "activity")
        where = f"activity {activity_id}"
        distance = float(_field(data, "distance", (int, float), where))
        if distance < 0:
            raise MalformedResponse(f"{where}: negative distance {distance}")
        return cls(
            id=activity_id,
            name=_field(data, "name", (str,), where, default=""),
            distance=distance,
            moving_time=_field(data, "moving_time", (int,), where, default=0),
            elapsed_time=_field(data, "elapsed_time", (int,), where, default=0),
            total_elevation_gain=float(_field(data, "total_elevation_gain", (int, float), where, default=0.0)),
            activity_type=_field(data, "type", (str,), where),
            start_date=_field(data, "start_date", (str,), where, default=""),
            sport_type=_field(data, "sport_type", (str,), where, default=None),
        )


@dataclass
class FetchAccumulator:
    """Running totals owned by a single fetch loop; values only ever grow."""
    total_distance_meters: float = 0.0
    included_count: int = 0
    excluded_count: int = 0

    def include(self, activity: Activity) -> None:
        self.total_distance_meters += activity.distance
        self.included_count += 1

    def exclude(self, activity: Activity) -> None:
        self.excluded_count += 1


@dataclass(frozen=True)
class FetchSummary:
    """Finalized totals of a completed fetch."""
    total_distance_meters: float
    included_count: int
    excluded_count: int
    pages_fetched: int

    @property
    def kilometers(self) -> float:
        return self.total_distance_meters / 1000.0

    @classmethod
    def from_accumulator(cls, acc: FetchAccumulator, pages_fetched: int) -> "FetchSummary":
        return cls(
            total_distance_meters=acc.total_distance_meters,
            included_count=acc.included_count,
            excluded_count=acc.excluded_count,
            pages_fetched=pages_fetched,
        )
