"""Shared httpx plumbing for the third-party OSRS tracker clients."""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """A tracker API call failed or returned something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TrackerClient:
    """Base async client; subclasses add the endpoint-specific calls."""

    service_name = "tracker"

    def __init__(self, base_url: str, user_agent: str = "reborn-iron-ranks", timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._http_client: Optional[httpx.AsyncClient] = None

    async def initialize(self):
        """Create the HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent},
            )

    async def close(self):
        """Clean up HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(self, method: str, path: str, params: dict = None):
        if self._http_client is None:
            await self.initialize()

        url = f"{self.base_url}{path}"
        try:
            response = await self._http_client.request(method, url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("%s %s %s failed: %s", self.service_name, method, path, exc)
            raise TrackerError(f"{self.service_name} request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "%s %s %s returned %d", self.service_name, method, path, response.status_code
            )
            raise TrackerError(
                f"{self.service_name} request failed",
                status_code=response.status_code,
                body=response.text[:500],
            )

        try:
            return response.json()
        except ValueError as exc:
            raise TrackerError(
                f"{self.service_name} returned invalid JSON",
                status_code=response.status_code,
                body=response.text[:500],
            ) from exc
