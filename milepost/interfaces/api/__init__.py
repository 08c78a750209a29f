"""API interface for Milepost.

This module exports the FastAPI router and app factory.
"""

from milepost.interfaces.api.routes import create_app, router

__all__ = ["router", "create_app"]
