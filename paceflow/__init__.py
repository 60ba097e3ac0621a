"""
PaceFlow

Running-activity ingestion and enrichment pipeline: fetches activities
from fitness platforms, normalizes them, derives per-kilometer splits and
attaches race names and historical weather before storing them.
"""

__version__ = "0.1.0"
