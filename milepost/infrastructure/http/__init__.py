"""HTTP client for a remote Milepost server."""

from milepost.infrastructure.http.client import DEFAULT_API_URL, RoadmapClient

__all__ = ["DEFAULT_API_URL", "RoadmapClient"]
