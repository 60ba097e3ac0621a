"""
Source adapters.

create_adapter() is the only place a SourceKind is mapped to a concrete
adapter class.
"""

from typing import Optional

import httpx

from paceflow.shared.constants import SourceKind
from .base import (
    AdapterAPIError,
    AdapterAuthError,
    AdapterCredentials,
    AdapterNotImplementedError,
    RawActivity,
    SyncAdapter,
    SyncAdapterError,
)
from .nike import NikeAdapter
from .strava import StravaAdapter


def create_adapter(
    source: SourceKind,
    credentials: AdapterCredentials,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SyncAdapter:
    """
    Build the adapter for a source.

    Raises:
        AdapterNotImplementedError: For sources without an adapter (garmin)
        ValueError: For values that are not a SourceKind
    """
    source = SourceKind(source)

    if source == SourceKind.STRAVA:
        return StravaAdapter.from_credentials(credentials, transport=transport)
    if source == SourceKind.NIKE:
        return NikeAdapter.from_credentials(credentials)
    raise AdapterNotImplementedError(f"{source.value} adapter not implemented yet")


__all__ = [
    "AdapterAPIError",
    "AdapterAuthError",
    "AdapterCredentials",
    "AdapterNotImplementedError",
    "NikeAdapter",
    "RawActivity",
    "StravaAdapter",
    "SyncAdapter",
    "SyncAdapterError",
    "create_adapter",
]
