"""Storage infrastructure for Milepost.

Persists the roadmap document as a single JSON file, returning Result
values for explicit error handling.
"""

from milepost.infrastructure.storage.json_storage import JsonStorage
from milepost.infrastructure.storage.repositories import RoadmapRepository, utc_timestamp
from milepost.infrastructure.storage.seed import build_seed_roadmap

__all__ = [
    "JsonStorage",
    "RoadmapRepository",
    "build_seed_roadmap",
    "utc_timestamp",
]
