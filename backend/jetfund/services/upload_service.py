from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from jetfund.exceptions import RuleViolationError, UpstreamError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]


class UploadService:
    """Relays a screenshot through the intermediate host and the CDN.

    Both hops run inside one request. If the CDN step fails the file stays on
    the intermediate host.
    """

    def __init__(
        self,
        bucky_url: str,
        cdn_url: str,
        cdn_token: str,
        client_factory: ClientFactory | None = None,
        timeout: float = 30.0,
    ):
        self.bucky_url = bucky_url
        self.cdn_url = cdn_url
        self.cdn_token = cdn_token
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=timeout))

    @staticmethod
    def screenshot_name(filename: str | None) -> str:
        extension = ""
        if filename and "." in filename:
            extension = filename.rsplit(".", 1)[-1].strip()
        return f"screenshot.{extension or 'jpg'}"

    async def relay(
        self,
        filename: str | None,
        content: bytes,
        content_type: str | None = None,
    ) -> str:
        if not content:
            raise RuleViolationError("No file provided")

        files = {
            "file": (
                self.screenshot_name(filename),
                content,
                content_type or "application/octet-stream",
            )
        }
        async with self._client_factory() as client:
            try:
                bucky_response = await client.post(self.bucky_url, files=files)
            except httpx.RequestError as exc:
                logger.error("Bucky upload failed: %s", exc)
                raise UpstreamError("Bucky upload failed") from exc
            if bucky_response.is_error:
                logger.error("Bucky upload failed with status %s", bucky_response.status_code)
                raise UpstreamError("Bucky upload failed")
            intermediate_url = bucky_response.text.strip()

            try:
                cdn_response = await client.post(
                    self.cdn_url,
                    json=[intermediate_url],
                    headers={"Authorization": f"Bearer {self.cdn_token}"},
                )
            except httpx.RequestError as exc:
                logger.error("CDN upload failed: %s", exc)
                raise UpstreamError("CDN upload failed") from exc
            if cdn_response.is_error:
                logger.error(
                    "CDN upload failed with status %s; %s stays on the intermediate host",
                    cdn_response.status_code,
                    intermediate_url,
                )
                raise UpstreamError("CDN upload failed")

        try:
            return cdn_response.json()["files"][0]["deployedUrl"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.error("CDN returned an unexpected payload: %s", exc)
            raise UpstreamError("CDN upload failed") from exc
