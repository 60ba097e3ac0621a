"""
Smart activity naming.

Priority:
1. Matched race name (e.g. "2024 Beijing Marathon")
2. Distance category ("Half Marathon", "10K", ...)
3. Formatted distance for generic platform titles ("8.5 km run")
4. The original title
"""

import math
import re
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DistanceCategory:
    name: str
    min_distance: float  # inclusive, meters
    max_distance: float  # exclusive, meters


DISTANCE_CATEGORIES: tuple[DistanceCategory, ...] = (
    DistanceCategory("5K", 4500, 5500),
    DistanceCategory("10K", 9500, 10500),
    DistanceCategory("Half Marathon", 20500, 21500),
    DistanceCategory("Full Marathon", 41500, 42500),
    DistanceCategory("Ultra Marathon", 42500, math.inf),
)

GENERIC_NAMES = frozenset(
    name.lower()
    for name in (
        "Morning Run",
        "Afternoon Run",
        "Evening Run",
        "Night Run",
        "Lunch Run",
        "Run",
        "晨跑",
        "夜跑",
        "跑步",
    )
)

GENERIC_PATTERNS = (
    re.compile(r"^(morning|afternoon|evening|night|lunch)\s+run$", re.IGNORECASE),
    re.compile(r"^跑步$"),
    re.compile(r"^晨跑$"),
    re.compile(r"^夜跑$"),
    re.compile(r"^run$", re.IGNORECASE),
    re.compile(r"^running$", re.IGNORECASE),
)


def get_distance_category(distance_m: float) -> Optional[str]:
    """Category label for a distance, or None outside every range."""
    for category in DISTANCE_CATEGORIES:
        if category.min_distance <= distance_m < category.max_distance:
            return category.name
    return None


def format_distance_label(distance_m: float) -> str:
    """'8.5 km run', or '800 m run' under one kilometer."""
    km = distance_m / 1000
    if km < 1:
        return f"{round(distance_m)} m run"
    return f"{km:.1f} km run"


def generate_smart_name(
    distance_m: float,
    original_name: str,
    race_name: Optional[str] = None,
) -> str:
    if race_name:
        return race_name

    category = get_distance_category(distance_m)
    if category:
        return category

    if original_name.strip().lower() in GENERIC_NAMES:
        return format_distance_label(distance_m)

    return original_name


def should_replace_activity_name(name: str) -> bool:
    """True when a platform title is generic and carries no information."""
    return any(pattern.match(name.strip()) for pattern in GENERIC_PATTERNS)
