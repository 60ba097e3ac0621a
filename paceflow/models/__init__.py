"""
Database Models

Feature models live next to their features and are imported lazily here
so that metadata is complete before tables are created.
"""

from paceflow.models.base import Base


def register_models():
    """Import every feature model so it is registered on Base.metadata."""
    from paceflow.features.activities.models import Activity, Split
    from paceflow.features.sync.models import SyncLog, UserProfile
    return Activity, Split, SyncLog, UserProfile


__all__ = ["Base", "register_models"]
