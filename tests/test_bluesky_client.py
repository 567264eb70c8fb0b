from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import httpx
import pytest

from bsky_scheduler.bluesky.client import BlueskyClient, PostResponse, _timestamp
from bsky_scheduler.errors import BlueskyAPIError
from bsky_scheduler.models import AspectRatio

BLOB = {
    "$type": "blob",
    "ref": {"$link": "bafkreigh2akiscaildc"},
    "mimeType": "image/webp",
    "size": 46,
}
POST_URI = "at://did:plc:test/app.bsky.feed.post/3k2a"


def _handler(calls: list[httpx.Request], *, auth_status: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    def handle(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        path = request.url.path
        if path == "/xrpc/com.atproto.server.createSession":
            if auth_status != 200:
                return httpx.Response(auth_status, json={"error": "AuthenticationRequired"})
            return httpx.Response(200, json={"accessJwt": "jwt-token", "did": "did:plc:test"})
        if path == "/xrpc/com.atproto.repo.uploadBlob":
            return httpx.Response(200, json={"blob": BLOB})
        if path == "/xrpc/com.atproto.repo.createRecord":
            return httpx.Response(200, json={"uri": POST_URI, "cid": "bafyreid"})
        return httpx.Response(404)

    return handle


def _client(calls: list[httpx.Request], **kwargs) -> BlueskyClient:
    transport = httpx.MockTransport(_handler(calls, **kwargs))
    return BlueskyClient(
        "test.bsky.social",
        "test-password",
        client=httpx.Client(transport=transport),
    )


def _record(request: httpx.Request) -> dict:
    return json.loads(request.content)["record"]


def test_authenticate_stores_session() -> None:
    calls: list[httpx.Request] = []
    client = _client(calls)

    session = client.authenticate()

    assert session.access_jwt == "jwt-token"
    assert session.did == "did:plc:test"
    assert client.session == session
    assert json.loads(calls[0].content) == {"identifier": "test.bsky.social", "password": "test-password"}


def test_authentication_failure() -> None:
    client = _client([], auth_status=401)

    with pytest.raises(BlueskyAPIError) as excinfo:
        client.authenticate()

    assert str(excinfo.value) == "Authentication failed: 401 Unauthorized"
    assert excinfo.value.status_code == 401
    assert client.session is None


def test_calls_before_authentication_are_rejected() -> None:
    client = _client([])
    with pytest.raises(BlueskyAPIError, match="Not authenticated"):
        client.upload_image(b"\x00")
    with pytest.raises(BlueskyAPIError, match="Not authenticated"):
        client.create_post("hello")


def test_post_with_image_and_aspect_ratio(webp_100x200: bytes) -> None:
    calls: list[httpx.Request] = []
    client = _client(calls)

    response = client.post_with_image_and_aspect_ratio(webp_100x200, "New piece #AIart")

    assert response == PostResponse(uri=POST_URI, cid="bafyreid")
    assert [request.url.path.rsplit("/", 1)[-1] for request in calls] == [
        "com.atproto.server.createSession",
        "com.atproto.repo.uploadBlob",
        "com.atproto.repo.createRecord",
    ]

    upload = calls[1]
    assert upload.headers["Authorization"] == "Bearer jwt-token"
    assert upload.headers["Content-Type"] == "image/webp"
    assert upload.content == webp_100x200

    body = json.loads(calls[2].content)
    assert body["repo"] == "did:plc:test"
    assert body["collection"] == "app.bsky.feed.post"
    record = body["record"]
    assert record["text"] == "New piece #AIart"
    assert record["embed"] == {
        "$type": "app.bsky.embed.images",
        "images": [{"alt": "", "image": BLOB, "aspectRatio": {"width": 1, "height": 2}}],
    }
    assert record["facets"][0]["features"] == [{"$type": "app.bsky.richtext.facet#tag", "tag": "AIart"}]


def test_upload_uses_detected_content_type(jpeg_300x400: bytes, png_150x250: bytes) -> None:
    calls: list[httpx.Request] = []
    client = _client(calls)
    client.authenticate()

    client.upload_image(jpeg_300x400)
    client.upload_image(png_150x250)

    assert calls[1].headers["Content-Type"] == "image/jpeg"
    assert calls[2].headers["Content-Type"] == "image/png"


def test_unreadable_dimensions_post_without_aspect_ratio(caplog: pytest.LogCaptureFixture) -> None:
    calls: list[httpx.Request] = []
    client = _client(calls)

    with caplog.at_level(logging.WARNING, logger="bsky_scheduler.bluesky.client"):
        client.post_with_image_and_aspect_ratio(b"\x00\x01\x02\x03", "no tags here")

    assert calls[1].headers["Content-Type"] == "application/octet-stream"
    record = _record(calls[2])
    assert "aspectRatio" not in record["embed"]["images"][0]
    assert "facets" not in record
    assert "Posting without aspect ratio" in caplog.text


def test_post_with_image_skips_dimension_detection(webp_100x200: bytes) -> None:
    calls: list[httpx.Request] = []
    client = _client(calls)

    client.post_with_image(webp_100x200, "plain")

    assert "aspectRatio" not in _record(calls[2])["embed"]["images"][0]


def test_text_only_post_has_no_embed() -> None:
    calls: list[httpx.Request] = []
    client = _client(calls)
    client.authenticate()

    client.create_post("just text", aspect_ratio=AspectRatio(4, 3))

    assert "embed" not in _record(calls[1])


def test_timestamp_is_utc_with_milliseconds() -> None:
    moment = datetime(2024, 5, 1, 21, 30, 15, 123456, tzinfo=timezone(timedelta(hours=9)))
    assert _timestamp(moment) == "2024-05-01T12:30:15.123Z"
