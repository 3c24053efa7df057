"""Expansion of user-facing activity type shorthands.

``resolve("cycling,Walk")`` returns every cycling tag Strava uses plus the
literal ``Walk``. Tags that are not shorthands pass through unchanged, so
any Strava ``type`` value can be filtered on.
"""
from __future__ import annotations

from typing import Iterable

from .exceptions import NoActivityTypesSpecified

CYCLING_TYPES = (
    "Ride",
    "VirtualRide",
    "EBikeRide",
    "MountainBikeRide",
    "EMountainBikeRide",
    "GravelRide",
    "Handcycle",
    "Velomobile",
)

RUNNING_TYPES = (
    "Run",
    "TrailRun",
    "VirtualRun",
)

OTHER_TYPES = (
    # on foot
    "Walk",
    "Hike",
    "Wheelchair",
    # water
    "Swim",
    "Rowing",
    "VirtualRow",
    "Kayaking",
    "Canoeing",
    "StandUpPaddling",
    "Surfing",
    "Kitesurf",
    "Windsurf",
    "Sail",
    # winter
    "AlpineSki",
    "BackcountrySki",
    "NordicSki",
    "Snowboard",
    "Snowshoe",
    "IceSkate",
    # wheels
    "InlineSkate",
    "RollerSki",
    "Skateboard",
    # gym and classes
    "WeightTraining",
    "Workout",
    "Crossfit",
    "Elliptical",
    "StairStepper",
    "Yoga",
    "Pilates",
    "HighIntensityIntervalTraining",
    # other sports
    "RockClimbing",
    "Golf",
    "Soccer",
    "Tennis",
    "Badminton",
    "Squash",
    "TableTennis",
    "Pickleball",
    "Racquetball",
)

SHORTHANDS: dict[str, tuple[str, ...]] = {
    "cycling": CYCLING_TYPES,
    "running": RUNNING_TYPES,
    "all": CYCLING_TYPES + RUNNING_TYPES + OTHER_TYPES,
}


def resolve(text: str | None) -> frozenset[str]:
    """Expand a comma-separated list of tokens into a set of type tags.

    Raises ``NoActivityTypesSpecified`` when nothing is left after dropping
    empty segments.
    """
    types: set[str] = set()
    for segment in (text or "").split(","):
        token = segment.strip()
        if not token:
            continue
        types.update(SHORTHANDS.get(token.lower(), (token,)))
    if not types:
        raise NoActivityTypesSpecified("No activity types specified")
    return frozenset(types)


def describe(types: Iterable[str]) -> str:
    return ", ".join(sorted(types))
