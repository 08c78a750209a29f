"""Infrastructure layer for Milepost.

Exports:
    Storage:
        - JsonStorage: Low-level JSON file I/O
        - RoadmapRepository: Roadmap document persistence

    HTTP:
        - RoadmapClient: Async client for the REST API
"""

from milepost.infrastructure.http import RoadmapClient
from milepost.infrastructure.storage import JsonStorage, RoadmapRepository

__all__ = [
    "JsonStorage",
    "RoadmapRepository",
    "RoadmapClient",
]
