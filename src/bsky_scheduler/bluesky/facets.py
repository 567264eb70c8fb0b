from __future__ import annotations

import re
from typing import Any, Dict, List

_HASHTAG_PATTERN = re.compile(r"#[A-Za-z0-9_\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]+")

FACET_TAG_TYPE = "app.bsky.richtext.facet#tag"


def _utf8_offset(text: str, index: int) -> int:
    return len(text[:index].encode("utf-8"))


def extract_hashtag_facets(text: str) -> List[Dict[str, Any]]:
    """Build tag facets for every ``#hashtag`` in *text*.

    Bluesky indexes facets by UTF-8 byte offsets, not character offsets.
    """

    facets: List[Dict[str, Any]] = []
    for match in _HASHTAG_PATTERN.finditer(text):
        facets.append(
            {
                "index": {
                    "byteStart": _utf8_offset(text, match.start()),
                    "byteEnd": _utf8_offset(text, match.end()),
                },
                "features": [{"$type": FACET_TAG_TYPE, "tag": match.group(0)[1:]}],
            }
        )
    return facets
