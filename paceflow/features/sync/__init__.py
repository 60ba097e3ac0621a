"""
Activity sync.

Source adapters, session orchestration and sync bookkeeping.
"""
