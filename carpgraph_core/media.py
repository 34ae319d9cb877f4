from __future__ import annotations

import base64
import binascii
from enum import Enum
import logging
import re

from carpgraph_core.core.errors import MediaError
from carpgraph_core.core.graph import STRICT, DecodePolicy, Graph, decode, encode
from carpgraph_core.legacy import LegacyGraph

LOGGER = logging.getLogger(__name__)

MAX_MEDIA_LENGTH = 64 * 512
URL_PREFIX = "https://"
GRAPH_PREFIX = "--CARP2"
LEGACY_PREFIX = "--CARP"
LEGACY_CANVAS = (300, 200)

_URLSAFE_BASE64 = re.compile(r"[A-Za-z0-9_-]*={0,2}")


class MediaKind(Enum):
    NONE = "none"
    URL = "url"
    GRAPH = "graph"
    LEGACY = "legacy"


def classify_media(media: str) -> MediaKind | None:
    if not media:
        return MediaKind.NONE
    if media.startswith(URL_PREFIX):
        return MediaKind.URL
    if media.startswith(GRAPH_PREFIX):
        return MediaKind.GRAPH
    if media.startswith(LEGACY_PREFIX):
        return MediaKind.LEGACY
    return None


def validate_media(media: str, *, max_length: int = MAX_MEDIA_LENGTH) -> MediaKind:
    if len(media) > max_length:
        raise MediaError(f"media too long: {len(media)} > {max_length}")
    kind = classify_media(media)
    if kind is None:
        raise MediaError("media must be empty, an https:// URL, or a --CARP drawing")
    return kind


def encode_media(graph: Graph, *, max_length: int = MAX_MEDIA_LENGTH) -> str:
    media = GRAPH_PREFIX + base64.urlsafe_b64encode(encode(graph)).decode("ascii")
    if len(media) > max_length:
        raise MediaError(f"encoded drawing too long: {len(media)} > {max_length}")
    return media


def decode_media(
    media: str,
    *,
    policy: DecodePolicy = STRICT,
    max_length: int = MAX_MEDIA_LENGTH,
    canvas_size: tuple[int, int] = LEGACY_CANVAS,
) -> Graph:
    """Decode the drawing carried by a media field.

    Legacy line lists carry no dimensions, so they are placed on ``canvas_size``.
    """
    kind = validate_media(media, max_length=max_length)
    if kind is MediaKind.GRAPH:
        payload = media[len(GRAPH_PREFIX) :]
        if _URLSAFE_BASE64.fullmatch(payload) is None:
            raise MediaError("drawing payload contains characters outside the urlsafe base64 alphabet")
        try:
            raw = base64.urlsafe_b64decode(payload.encode("ascii"))
        except (binascii.Error, UnicodeEncodeError) as exc:
            raise MediaError("drawing payload is not valid base64") from exc
        return decode(raw, policy=policy)
    if kind is MediaKind.LEGACY:
        LOGGER.debug("converting legacy drawing media; length=%d", len(media))
        return LegacyGraph.from_lines_json(media[len(LEGACY_PREFIX) :], *canvas_size).to_graph()
    raise MediaError(f"media does not carry a drawing: {kind.value}")
