"""
Activities feature.

- models: Activity and Split tables
- naming: display titles from distance and race matches
- splits: per-kilometer split generation
- processor: ingestion of raw activities and backfill jobs
"""
