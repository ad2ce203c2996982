from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from jetfund.exceptions import UpstreamError
from jetfund.models.hackatime import HackatimeStatsResponse
from jetfund.tools import round_half_up

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]


class HackatimeService:
    """Client for the Hackatime per-user coding stats API."""

    def __init__(
        self,
        base_url: str,
        client_factory: ClientFactory | None = None,
        timeout: float = 30.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=timeout))

    async def fetch_user_stats(self, slack_id: str) -> HackatimeStatsResponse:
        url = f"{self.base_url}/users/{slack_id}/stats"
        async with self._client_factory() as client:
            try:
                response = await client.get(url, params={"features": "projects"})
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.warning(
                    "Hackatime API error: %s %s",
                    exc.response.status_code,
                    exc.response.reason_phrase,
                )
                raise UpstreamError("Failed to fetch Hackatime stats.") from exc
            except httpx.RequestError as exc:
                logger.warning("Hackatime API unreachable: %s", exc)
                raise UpstreamError("Failed to fetch Hackatime stats.") from exc

        try:
            return HackatimeStatsResponse.model_validate(response.json())
        except ValueError as exc:
            logger.warning("Hackatime API returned an unexpected payload: %s", exc)
            raise UpstreamError("Failed to fetch Hackatime stats.") from exc

    async def project_hours(self, slack_id: str, project_name: str) -> float:
        """Tracked hours for one Hackatime project; 0 when the project is not listed."""
        stats = await self.fetch_user_stats(slack_id)
        project = stats.data.find_project(project_name)
        if project is None:
            return 0.0
        return round_half_up(project.total_seconds / 3600)
