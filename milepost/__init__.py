"""Milepost - roadmap tracking with derived progress and status checks."""

__version__ = "1.0.0"
