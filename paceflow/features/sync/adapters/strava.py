"""
Strava adapter.

Fetches running activities, their detail and GPS streams from the Strava
API and normalizes them into RawActivity records.

Strava API Limits:
- 200 requests per 15 minutes
- 2,000 requests per day

A sync of N activities costs roughly N * 2 + N / 50 requests (detail and
streams per activity, plus list pages), so keep `limit` modest.
"""

import logging
import time
import xml.etree.ElementTree as ET
from datetime import datetime, timedelta
from typing import Optional

import gpxpy.gpx
import httpx

from paceflow.features.activities.naming import generate_smart_name
from paceflow.shared.constants import (
    STRAVA_INDOOR_TYPES,
    STRAVA_RUNNING_TYPES,
    STRAVA_TO_ACTIVITY_TYPE,
    ActivityType,
    SourceKind,
)
from paceflow.shared.pace import speed_to_pace
from .base import (
    AdapterAPIError,
    AdapterAuthError,
    AdapterCredentials,
    RawActivity,
    SyncAdapterError,
    SyncAdapter,
)

logger = logging.getLogger(__name__)

GARMIN_TPX_NS = "http://www.garmin.com/xmlschemas/TrackPointExtension/v1"


def _parse_strava_time(value: str) -> datetime:
    """Strava timestamps look like '2024-03-10T00:30:00Z'."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def map_activity_type(strava_type: str) -> ActivityType:
    return STRAVA_TO_ACTIVITY_TYPE.get(strava_type, ActivityType.OTHER)


def is_running_activity(strava_type: str) -> bool:
    return strava_type in STRAVA_RUNNING_TYPES


def is_indoor_activity(strava_type: str) -> bool:
    return strava_type in STRAVA_INDOOR_TYPES


def build_gpx_from_streams(activity: dict, streams: dict[str, dict]) -> str:
    """
    Synthesize a GPX 1.1 document from Strava streams.

    Point time is start_date + time[i]; missing altitude is written as 0.
    Heart rate goes into a Garmin TrackPointExtension.

    Returns:
        GPX XML string, or '' when there is no latlng stream
    """
    latlng = (streams.get("latlng") or {}).get("data") or []
    times = (streams.get("time") or {}).get("data") or []
    altitude = (streams.get("altitude") or {}).get("data") or []
    heartrate = (streams.get("heartrate") or {}).get("data") or []

    if not latlng:
        return ""

    start_time = _parse_strava_time(activity["start_date"])

    gpx = gpxpy.gpx.GPX()
    gpx.creator = "PaceFlow Strava Sync"
    gpx.name = activity.get("name")
    gpx.time = start_time
    gpx.nsmap["gpxtpx"] = GARMIN_TPX_NS

    gpx_track = gpxpy.gpx.GPXTrack()
    gpx_track.name = activity.get("name")
    gpx_track.type = activity.get("type")
    gpx.tracks.append(gpx_track)

    gpx_segment = gpxpy.gpx.GPXTrackSegment()
    gpx_track.segments.append(gpx_segment)

    for i, (lat, lon) in enumerate(latlng):
        offset = times[i] if i < len(times) and times[i] is not None else 0
        ele = altitude[i] if i < len(altitude) and altitude[i] is not None else 0

        point = gpxpy.gpx.GPXTrackPoint(
            latitude=lat,
            longitude=lon,
            elevation=ele,
            time=start_time + timedelta(seconds=offset),
        )

        if i < len(heartrate) and heartrate[i] is not None:
            extension = ET.Element(f"{{{GARMIN_TPX_NS}}}TrackPointExtension")
            hr = ET.SubElement(extension, f"{{{GARMIN_TPX_NS}}}hr")
            hr.text = str(round(heartrate[i]))
            point.extensions.append(extension)

        gpx_segment.points.append(point)

    return gpx.to_xml(version="1.1")


class StravaAdapter(SyncAdapter):
    """
    Async adapter for the Strava API.

    Token refresh is lazy: every public call first checks the access
    token and refreshes it when it expires within the next five minutes.

    Usage:
        adapter = StravaAdapter(client_id, client_secret, refresh_token)
        if await adapter.authenticate():
            activities = await adapter.get_activities(limit=50)
    """

    source = SourceKind.STRAVA

    API_URL = "https://www.strava.com/api/v3"
    TOKEN_URL = "https://www.strava.com/oauth/token"

    PER_PAGE = 50
    DEFAULT_LIMIT = 100
    TOKEN_EXPIRY_BUFFER_S = 300
    STREAM_KEYS = "latlng,time,altitude,heartrate,distance"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        refresh_token: Optional[str] = None,
        access_token: Optional[str] = None,
        token_expires_at: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        """
        Args:
            client_id, client_secret, refresh_token: OAuth refresh credentials
            access_token: Pre-issued token; used as-is when no refresh
                credentials are available
            token_expires_at: Unix seconds expiry of access_token, if known
            transport: httpx transport override (tests)
            timeout: Per-request timeout in seconds
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self._refresh_token = refresh_token
        self._access_token = access_token
        self._token_expires_at = token_expires_at
        self._transport = transport
        self._timeout = timeout

    @classmethod
    def from_credentials(
        cls,
        credentials: AdapterCredentials,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "StravaAdapter":
        return cls(
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
            refresh_token=credentials.refresh_token,
            access_token=credentials.access_token,
            transport=transport,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._timeout)

    # -------------------------------------------------------------------------
    # Token Management
    # -------------------------------------------------------------------------

    @property
    def _can_refresh(self) -> bool:
        return bool(self.client_id and self.client_secret and self._refresh_token)

    async def _ensure_valid_token(self) -> str:
        """
        Return a usable access token, refreshing it if needed.

        Raises:
            AdapterAuthError: If no token is available or refresh fails
        """
        now = int(time.time())

        if self._access_token:
            if self._token_expires_at is not None:
                if self._token_expires_at > now + self.TOKEN_EXPIRY_BUFFER_S:
                    return self._access_token
            elif not self._can_refresh:
                # Expiry unknown and nothing to refresh with
                return self._access_token

        if not self._can_refresh:
            raise AdapterAuthError("Strava credentials not configured")

        logger.info("Refreshing Strava access token")
        async with self._client() as client:
            response = await client.post(
                self.TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "grant_type": "refresh_token",
                    "refresh_token": self._refresh_token,
                },
            )

        if response.status_code != 200:
            logger.error(f"Strava token refresh failed: {response.text}")
            raise AdapterAuthError(f"Token refresh failed: {response.status_code}")

        data = response.json()
        self._access_token = data["access_token"]
        self._refresh_token = data.get("refresh_token", self._refresh_token)
        self._token_expires_at = data.get("expires_at")

        return self._access_token

    async def _api_request(
        self,
        endpoint: str,
        params: Optional[dict] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Make an authenticated GET request.

        Raises:
            AdapterAuthError: If authentication fails
            AdapterAPIError: If API returns error
        """
        access_token = await self._ensure_valid_token()

        async def _send(http: httpx.AsyncClient) -> httpx.Response:
            return await http.get(
                f"{self.API_URL}{endpoint}",
                headers={"Authorization": f"Bearer {access_token}"},
                params=params,
            )

        if client is not None:
            response = await _send(client)
        else:
            async with self._client() as http:
                response = await _send(http)

        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if response.status_code == 401:
            raise AdapterAuthError("Invalid or expired token")
        elif response.status_code != 200:
            raise AdapterAPIError(
                f"API error: {response.status_code} - {response.text}"
            )

        return response.json()

    # -------------------------------------------------------------------------
    # SyncAdapter
    # -------------------------------------------------------------------------

    async def authenticate(self, credentials: Optional[AdapterCredentials] = None) -> bool:
        if credentials is not None:
            self.client_id = credentials.client_id or self.client_id
            self.client_secret = credentials.client_secret or self.client_secret
            self._refresh_token = credentials.refresh_token or self._refresh_token
            if credentials.access_token:
                self._access_token = credentials.access_token
                self._token_expires_at = None

        try:
            await self._ensure_valid_token()
            return True
        except (AdapterAuthError, httpx.HTTPError) as e:
            logger.error(f"Strava authentication failed: {e}")
            return False

    async def get_activities(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        limit: Optional[int] = None,
        after: Optional[int] = None,
    ) -> list[RawActivity]:
        """
        Page through /athlete/activities and fetch detail for running ones.

        Stops when `limit` running activities are collected or a short page
        signals the end of data. A failed detail fetch skips that activity.
        """
        total_limit = limit or self.DEFAULT_LIMIT
        activities: list[RawActivity] = []
        page = 1

        params: dict = {"per_page": self.PER_PAGE}
        if after is not None:
            params["after"] = int(after)
        elif start_date:
            params["after"] = int(start_date.timestamp())
        if end_date:
            params["before"] = int(end_date.timestamp())

        async with self._client() as client:
            while len(activities) < total_limit:
                page_items = await self._api_request(
                    "/athlete/activities",
                    params={**params, "page": page},
                    client=client,
                )

                if not page_items:
                    break

                for item in page_items:
                    if len(activities) >= total_limit:
                        break

                    activity_type = item.get("type", "")
                    if not is_running_activity(activity_type):
                        logger.info(
                            f"Skipping non-running activity {item.get('id')} "
                            f"(type: {activity_type})"
                        )
                        continue

                    try:
                        detail = await self._fetch_activity_detail(str(item["id"]), client)
                        activities.append(detail)
                    except (SyncAdapterError, httpx.HTTPError, KeyError, ValueError) as e:
                        logger.error(f"Failed to fetch activity {item.get('id')}: {e}")

                if len(page_items) < self.PER_PAGE:
                    break

                page += 1

        logger.info(f"Fetched {len(activities)} running activities from Strava")
        return activities

    async def get_activity_detail(self, activity_id: str) -> RawActivity:
        async with self._client() as client:
            return await self._fetch_activity_detail(activity_id, client)

    async def download_gpx(self, activity_id: str) -> str:
        """Build a GPX document from the activity's streams ('' without GPS)."""
        strava_id = self._validate_id(activity_id)
        async with self._client() as client:
            activity = await self._api_request(f"/activities/{strava_id}", client=client)
            streams = await self._fetch_streams(strava_id, client)
        return build_gpx_from_streams(activity, streams)

    async def health_check(self) -> bool:
        try:
            await self._api_request("/athlete")
            return True
        except (AdapterAuthError, AdapterAPIError, httpx.HTTPError) as e:
            logger.warning(f"Strava health check failed: {e}")
            return False

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_id(activity_id: str) -> int:
        try:
            return int(activity_id)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid activity ID: {activity_id}")

    async def _fetch_activity_detail(
        self, activity_id: str, client: httpx.AsyncClient
    ) -> RawActivity:
        strava_id = self._validate_id(activity_id)
        activity = await self._api_request(f"/activities/{strava_id}", client=client)
        streams = await self._fetch_streams(strava_id, client)
        return self.convert_activity(activity, streams)

    async def _fetch_streams(
        self, strava_id: int, client: httpx.AsyncClient
    ) -> dict[str, dict]:
        """Streams keyed by type. Any failure yields {} (continue without GPS)."""
        try:
            streams_list = await self._api_request(
                f"/activities/{strava_id}/streams",
                params={"keys": self.STREAM_KEYS},
                client=client,
            )
        except (SyncAdapterError, httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to fetch streams for activity {strava_id}: {e}")
            return {}

        if not isinstance(streams_list, list):
            logger.warning(f"Unexpected streams response format for activity {strava_id}")
            return {}

        logger.debug(f"Fetched {len(streams_list)} streams for activity {strava_id}")
        return {
            stream["type"]: stream
            for stream in streams_list
            if isinstance(stream, dict) and "type" in stream
        }

    def convert_activity(self, activity: dict, streams: dict[str, dict]) -> RawActivity:
        """Map a Strava detail payload (plus streams) to RawActivity."""
        gpx_data = None
        if streams.get("latlng") and streams.get("time"):
            gpx_data = build_gpx_from_streams(activity, streams) or None

        distance = activity.get("distance") or 0.0
        strava_type = activity.get("type", "")

        avg_hr = activity.get("average_heartrate")
        max_hr = activity.get("max_heartrate")
        calories = activity.get("calories")

        return RawActivity(
            id=str(activity["id"]),
            source=self.source,
            title=generate_smart_name(distance, activity.get("name") or ""),
            type=map_activity_type(strava_type),
            is_indoor=is_indoor_activity(strava_type),
            start_time=_parse_strava_time(activity["start_date"]),
            duration=activity.get("moving_time") or 0,
            distance=distance,
            average_pace=speed_to_pace(activity.get("average_speed")),
            best_pace=speed_to_pace(activity.get("max_speed")),
            elevation_gain=activity.get("total_elevation_gain"),
            average_heart_rate=round(avg_hr) if avg_hr else None,
            max_heart_rate=round(max_hr) if max_hr else None,
            calories=round(calories) if calories else None,
            gpx_data=gpx_data,
        )
