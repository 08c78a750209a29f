"""Async client for the roadmap REST API.

Load and save follow an optimistic, fire-and-forget policy: a failed load
is replaced by an empty default tree, and a failed save is only logged.
The in-memory tree is never rolled back, so the last save to reach the
server wins.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from milepost.application import DEFAULT_ROOT_TITLE, default_root
from milepost.domain.roadmap import Node, RoadmapDocument

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3001/api"


class RoadmapClient:
    """Fetches and stores the whole roadmap through ``/api/roadmap``."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        default_title: str = DEFAULT_ROOT_TITLE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.default_title = default_title
        self.last_modified: Optional[str] = None
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            # No timeout: a hung request leaves the caller on stale data.
            self._client = httpx.AsyncClient(timeout=None, transport=self._transport)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def load(self) -> Node:
        """Fetch the roadmap, or return the default tree if that fails."""
        try:
            client = await self._get_client()
            response = await client.get(f"{self.api_url}/roadmap")
            response.raise_for_status()
            document = RoadmapDocument.model_validate(response.json())
            self.last_modified = document.last_modified
            logger.info("Roadmap loaded successfully")
            return document.roadmap

        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load roadmap: {e}")
            return default_root(self.default_title)

    async def save(self, root: Node) -> bool:
        """Send the whole tree to the server.

        Returns:
            True if the server accepted it (any 2xx reply). On failure the
            error is logged and False returned; nothing is retried.
        """
        try:
            client = await self._get_client()
            response = await client.post(
                f"{self.api_url}/roadmap",
                json={"roadmap": root.to_json()},
            )
            response.raise_for_status()
            payload = response.json()
            data = payload.get("data") if isinstance(payload, dict) else None
            if isinstance(data, dict):
                self.last_modified = data.get("lastModified")
            else:
                logger.warning("Save acknowledged without a lastModified stamp")
            logger.info("Roadmap saved successfully")
            return True

        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to save roadmap: {e}")
            return False
