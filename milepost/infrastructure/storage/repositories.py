"""Repository for the persisted roadmap document.

The whole tree lives in one JSON file, ``{"roadmap": ..., "lastModified":
...}``. It is read wholesale and overwritten wholesale; there is no
per-node persistence.
"""

import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from milepost.application import DEFAULT_ROOT_TITLE, default_root
from milepost.domain.roadmap import Node, RoadmapDocument, backfill_defaults, needs_migration
from milepost.domain.shared.result import Err, Ok, Result
from milepost.infrastructure.storage.json_storage import JsonStorage
from milepost.infrastructure.storage.seed import build_seed_roadmap

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current time as an ISO 8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RoadmapRepository:
    """Load and save the roadmap document at ``data_file``."""

    def __init__(self, data_file: Path, storage: JsonStorage | None = None) -> None:
        self.data_file = Path(data_file)
        self._storage = storage or JsonStorage()

    def exists(self) -> bool:
        """Check if the data file exists."""
        return self.data_file.exists()

    def load(self) -> Result[RoadmapDocument, str]:
        """Read and validate the stored document."""
        result = self._storage.load_json(self.data_file)
        if isinstance(result, Err):
            return result

        try:
            return Ok(RoadmapDocument.model_validate(result.value))
        except ValidationError as e:
            return Err(f"Invalid roadmap data in {self.data_file}: {e}")

    def save(self, root: Node) -> Result[RoadmapDocument, str]:
        """Overwrite the stored document with ``root``, stamping the time."""
        document = RoadmapDocument(roadmap=root, last_modified=utc_timestamp())
        result = self._storage.save_json(self.data_file, document.to_json())
        if isinstance(result, Err):
            logger.error(f"Failed to save roadmap: {result.error}")
            return result
        return Ok(document)

    def initialize(
        self,
        title: str = DEFAULT_ROOT_TITLE,
        seed: bool = True,
    ) -> Result[RoadmapDocument, str]:
        """Prepare the data file at startup.

        Writes the starter roadmap (or an empty one when ``seed`` is off)
        if no file exists, then backfills missing statuses and weights and
        saves once if anything changed.
        """
        if not self.exists():
            root = build_seed_roadmap(title) if seed else default_root(title)
            created = self.save(root)
            if isinstance(created, Err):
                return created
            logger.info(f"Created roadmap data file at {self.data_file}")

        loaded = self.load()
        if isinstance(loaded, Err):
            return loaded

        document = loaded.value
        if not needs_migration(document.roadmap):
            return Ok(document)

        touched = backfill_defaults(document.roadmap)
        logger.info(f"Backfilled status/weight on {touched} roadmap item(s)")
        return self.save(document.roadmap)
