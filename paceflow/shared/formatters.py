"""
Formatting utilities for display and log output.
"""


def format_pace(pace_s_per_km: float | None, include_unit: bool = False) -> str:
    """
    Format pace as 'M:SS'.

    Args:
        pace_s_per_km: Pace in seconds per km
        include_unit: Append '/km'

    Returns:
        Formatted string (e.g., '5:30' or '5:30/km')
    """
    if pace_s_per_km is None:
        return "--"

    minutes = int(pace_s_per_km // 60)
    seconds = int(pace_s_per_km % 60)
    formatted = f"{minutes}:{seconds:02d}"

    return f"{formatted}/km" if include_unit else formatted


def format_duration(seconds: float) -> str:
    """
    Format duration as 'H:MM:SS' or 'M:SS'.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g., '1:05:09' or '25:00')
    """
    total = int(seconds)
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60

    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_distance_km(meters: float, precision: int = 2) -> str:
    """
    Format distance.

    Args:
        meters: Distance in meters

    Returns:
        Formatted string (e.g., '12.50 km')
    """
    return f"{meters / 1000:.{precision}f} km"
