from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from ..errors import BlueskyAPIError
from ..imaging.aspect import reduce_aspect_ratio
from ..imaging.dimensions import detect_dimensions
from ..imaging.sniffer import classify
from ..models import AspectRatio
from .facets import extract_hashtag_facets

logger = logging.getLogger(__name__)

BLUESKY_BASE_URL = "https://bsky.social"
POST_COLLECTION = "app.bsky.feed.post"
EMBED_IMAGES_TYPE = "app.bsky.embed.images"


@dataclass(frozen=True, slots=True)
class Session:
    access_jwt: str
    did: str


@dataclass(frozen=True, slots=True)
class PostResponse:
    uri: str
    cid: str


def _timestamp(now: Optional[datetime] = None) -> str:
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BlueskyClient:
    """Minimal AT Protocol client: log in, upload a blob, create a post."""

    def __init__(
        self,
        identifier: str,
        password: str,
        *,
        base_url: str = BLUESKY_BASE_URL,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.identifier = identifier
        self.password = password
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session: Optional[Session] = None
        self._client = client

    def authenticate(self) -> Session:
        response = self._post(
            "com.atproto.server.createSession",
            "Authentication",
            json={"identifier": self.identifier, "password": self.password},
        )
        data = response.json()
        self.session = Session(access_jwt=data["accessJwt"], did=data["did"])
        logger.info("Authenticated as %s", self.session.did)
        return self.session

    def upload_image(self, image_data: bytes) -> Dict[str, Any]:
        session = self._require_session()
        fmt = classify(image_data)
        content_type = fmt.mime_type if fmt is not None else "application/octet-stream"
        logger.debug("Uploading %s bytes as %s", len(image_data), content_type)
        response = self._post(
            "com.atproto.repo.uploadBlob",
            "Image upload",
            content=bytes(image_data),
            headers={**self._auth_headers(session), "Content-Type": content_type},
        )
        return response.json()["blob"]

    def create_post(
        self,
        text: str,
        image_blob: Optional[Dict[str, Any]] = None,
        aspect_ratio: Optional[AspectRatio] = None,
    ) -> PostResponse:
        session = self._require_session()
        record: Dict[str, Any] = {
            "$type": POST_COLLECTION,
            "text": text,
            "createdAt": _timestamp(),
        }
        facets = extract_hashtag_facets(text)
        if facets:
            record["facets"] = facets

        if image_blob is not None:
            image: Dict[str, Any] = {"alt": "", "image": image_blob}
            if aspect_ratio is not None:
                image["aspectRatio"] = aspect_ratio.as_dict()
            record["embed"] = {"$type": EMBED_IMAGES_TYPE, "images": [image]}

        response = self._post(
            "com.atproto.repo.createRecord",
            "Post creation",
            json={"repo": session.did, "collection": POST_COLLECTION, "record": record},
            headers=self._auth_headers(session),
        )
        data = response.json()
        return PostResponse(uri=data["uri"], cid=data["cid"])

    def post_with_image(self, image_data: bytes, text: str) -> PostResponse:
        self.authenticate()
        blob = self.upload_image(image_data)
        return self.create_post(text, blob)

    def post_with_image_and_aspect_ratio(self, image_data: bytes, text: str) -> PostResponse:
        """Post like :meth:`post_with_image`, attaching the image aspect ratio when readable.

        Dimension or ratio failures are logged and the post goes out without
        ``aspectRatio``.
        """

        aspect_ratio = self._aspect_ratio_for(image_data)
        self.authenticate()
        blob = self.upload_image(image_data)
        return self.create_post(text, blob, aspect_ratio)

    def _aspect_ratio_for(self, image_data: bytes) -> Optional[AspectRatio]:
        dimensions = detect_dimensions(image_data)
        if not dimensions.ok:
            logger.warning("Posting without aspect ratio: %s", dimensions.error)
            return None
        size = dimensions.unwrap()
        ratio = reduce_aspect_ratio(size.width, size.height)
        if not ratio.ok:
            logger.warning("Posting without aspect ratio: %s", ratio.error)
            return None
        reduced = ratio.unwrap()
        logger.info(
            "Detected %s %sx%s, aspect ratio %s:%s",
            size.format.value,
            size.width,
            size.height,
            reduced.width,
            reduced.height,
        )
        return reduced

    def _require_session(self) -> Session:
        if self.session is None:
            raise BlueskyAPIError("Not authenticated. Call authenticate() first.")
        return self.session

    @staticmethod
    def _auth_headers(session: Session) -> Dict[str, str]:
        return {"Authorization": f"Bearer {session.access_jwt}"}

    def _post(self, method: str, action: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}/xrpc/{method}"
        client = self._client
        should_close = False
        if client is None:
            client = httpx.Client(timeout=self.timeout, follow_redirects=True)
            should_close = True

        try:
            response = client.post(url, **kwargs)
        finally:
            if should_close:
                client.close()

        if response.is_error:
            raise BlueskyAPIError(
                f"{action} failed: {response.status_code} {response.reason_phrase}",
                url=url,
                status_code=response.status_code,
            )
        return response
