"""
Feature modules for PaceFlow.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models (optional)
- schemas.py - dataclasses shared with other features (optional)
- service.py / processor.py - Business logic
- repository.py - Data access (optional)
"""
