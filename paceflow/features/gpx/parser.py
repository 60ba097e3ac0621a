"""
GPX Parser

Parses GPX XML into timestamped track points.

The parser is deliberately lenient: a GPX document can come from any
watch vendor, so every optional element is treated as optional and any
parse failure degrades to an empty result instead of raising.
"""

import logging
import math
import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Iterator, Optional

from paceflow.shared.geo import elevation_gain, track_distance
from .schemas import Coordinates, GPXData, GPXPoint, GPXTrack

logger = logging.getLogger(__name__)

# First <trkpt lat=".." lon=".."> in raw text (attribute order lat, lon only)
FIRST_TRKPT_PATTERN = re.compile(
    r"""<trkpt\s+lat=["']([^"']+)["']\s+lon=["']([^"']+)["']"""
)

# Fractional seconds of any length; fromisoformat before 3.11 takes only 3 or 6 digits
FRACTION_PATTERN = re.compile(r"\.(\d+)")


def _local_name(tag: str) -> str:
    """Strip '{namespace}' from an ElementTree tag."""
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> Iterator[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            yield child


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    for child in _children(element, name):
        if child.text is not None:
            return child.text.strip()
    return None


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        result = float(value)
    except ValueError:
        return None
    return result if math.isfinite(result) else None


def _pad_fraction(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 GPX timestamp; naive times are taken as UTC."""
    if not value:
        return None
    try:
        value = FRACTION_PATTERN.sub(_pad_fraction, value, count=1)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_heart_rate(trkpt: ET.Element) -> Optional[int]:
    """
    Read hr from <extensions>.

    Matches on local names, so gpxtpx:hr, ns3:hr and a bare <hr> all work
    regardless of which prefix the vendor bound to TrackPointExtension.
    """
    for extensions in _children(trkpt, "extensions"):
        for element in extensions.iter():
            if _local_name(element.tag) == "hr" and element.text:
                value = _parse_float(element.text.strip())
                if value is not None:
                    return int(round(value))
    return None


def _parse_point(trkpt: ET.Element) -> Optional[GPXPoint]:
    lat = _parse_float(trkpt.get("lat"))
    lon = _parse_float(trkpt.get("lon"))
    if lat is None or lon is None:
        return None

    return GPXPoint(
        lat=lat,
        lon=lon,
        ele=_parse_float(_child_text(trkpt, "ele")),
        time=_parse_time(_child_text(trkpt, "time")),
        hr=_parse_heart_rate(trkpt),
    )


def _parse_track(trk: ET.Element) -> Optional[GPXTrack]:
    points: list[GPXPoint] = []
    skipped = 0

    for trkseg in _children(trk, "trkseg"):
        for trkpt in _children(trkseg, "trkpt"):
            point = _parse_point(trkpt)
            if point is None:
                skipped += 1
                continue
            points.append(point)

    if skipped:
        logger.debug(f"Skipped {skipped} track points without valid lat/lon")

    if not points:
        return None

    return GPXTrack(
        points=points,
        name=_child_text(trk, "name"),
        type=_child_text(trk, "type"),
    )


def parse_gpx(gpx_xml: str) -> GPXData:
    """
    Parse a GPX document.

    Args:
        gpx_xml: GPX XML string

    Returns:
        GPXData with all non-empty tracks. Malformed input returns an
        empty GPXData (no tracks, all totals zero).
    """
    try:
        root = ET.fromstring(gpx_xml.lstrip("﻿").strip())

        tracks = []
        for trk in _children(root, "trk"):
            track = _parse_track(trk)
            if track is not None:
                tracks.append(track)

        times = [
            point.time
            for track in tracks
            for point in track.points
            if point.time is not None
        ]
        start_time = min(times) if times else None
        end_time = max(times) if times else None

        return GPXData(
            tracks=tracks,
            total_distance=sum(track_distance(t.points) for t in tracks),
            total_duration=(
                (end_time - start_time).total_seconds() if times else 0.0
            ),
            elevation_gain=sum(elevation_gain(t.points) for t in tracks),
            start_time=start_time,
            end_time=end_time,
        )
    except Exception as e:
        logger.warning(f"Failed to parse GPX, continuing without it: {e}")
        return GPXData()


def extract_first_coordinate(gpx_xml: Optional[str]) -> Optional[Coordinates]:
    """
    Pull the first track point's coordinate straight out of raw GPX text.

    This is a fast approximation for enrichment lookups, not a parser:
    it only sees <trkpt> tags written with lat before lon, and checks
    nothing beyond the two values being numeric.
    """
    if not gpx_xml:
        return None

    match = FIRST_TRKPT_PATTERN.search(gpx_xml)
    if not match:
        return None

    lat = _parse_float(match.group(1))
    lon = _parse_float(match.group(2))
    if lat is None or lon is None:
        return None

    return Coordinates(lat=lat, lon=lon)
