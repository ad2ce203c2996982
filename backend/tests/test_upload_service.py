import json

import httpx
import pytest

from jetfund.exceptions import RuleViolationError, UpstreamError
from jetfund.services.upload_service import UploadService

BUCKY_URL = "https://bucky.test/"
CDN_URL = "https://cdn.test/api/v3/new"
DEPLOYED_URL = "https://cdn.test/files/abc/screenshot.png"


def _service(handler):
    return UploadService(
        bucky_url=BUCKY_URL,
        cdn_url=CDN_URL,
        cdn_token="beans",
        client_factory=lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _relay_handler(seen, bucky_status=200, cdn_status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if str(request.url) == BUCKY_URL:
            return httpx.Response(bucky_status, text="https://bucky.test/tmp/screenshot.png\n")
        return httpx.Response(cdn_status, json={"files": [{"deployedUrl": DEPLOYED_URL}]})

    return handler


def test_screenshot_name():
    assert UploadService.screenshot_name("My Game.PNG") == "screenshot.PNG"
    assert UploadService.screenshot_name("capture") == "screenshot.jpg"
    assert UploadService.screenshot_name(None) == "screenshot.jpg"


@pytest.mark.asyncio
async def test_relay_returns_cdn_url():
    seen = []

    url = await _service(_relay_handler(seen)).relay("shot.png", b"\x89PNG", "image/png")

    assert url == DEPLOYED_URL
    bucky_request, cdn_request = seen
    assert b'filename="screenshot.png"' in bucky_request.content
    assert cdn_request.headers["Authorization"] == "Bearer beans"
    assert json.loads(cdn_request.content) == ["https://bucky.test/tmp/screenshot.png"]


@pytest.mark.asyncio
async def test_relay_requires_file():
    with pytest.raises(RuleViolationError, match="No file provided"):
        await _service(_relay_handler([])).relay("shot.png", b"")


@pytest.mark.asyncio
async def test_relay_bucky_failure_skips_cdn():
    seen = []

    with pytest.raises(UpstreamError, match="Bucky upload failed"):
        await _service(_relay_handler(seen, bucky_status=502)).relay("shot.png", b"data")

    assert len(seen) == 1


@pytest.mark.asyncio
async def test_relay_cdn_failure():
    with pytest.raises(UpstreamError, match="CDN upload failed"):
        await _service(_relay_handler([], cdn_status=500)).relay("shot.png", b"data")
