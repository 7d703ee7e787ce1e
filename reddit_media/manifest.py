from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Sequence

from .errors import ManifestParseError
from .models import Rendition

MANIFEST_ACCEPT = "application/dash+xml,video/vnd.mpeg.dash.mpd"
DEFAULT_MAX_RENDITIONS = 3


@dataclass(frozen=True)
class Representation:
    id: str | None = None
    height: int | None = None
    width: int | None = None
    bandwidth: int | None = None


@dataclass(frozen=True)
class AdaptationSet:
    content_type: str | None = None
    mime_type: str | None = None
    representations: Sequence[Representation] = ()


@dataclass(frozen=True)
class Period:
    adaptation_sets: Sequence[AdaptationSet] = ()


@dataclass(frozen=True)
class Manifest:
    periods: Sequence[Period] = ()


def manifest_url_for(video_url: str) -> str:
    return f"{video_url}/DASHPlaylist.mpd"


def _local_name(tag: str) -> str:
    # ElementTree spells namespaced tags as "{urn:...}Name".
    if tag.startswith("{"):
        return tag.rsplit("}", 1)[-1]
    return tag


def _children(node: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in node if _local_name(child.tag) == name]


def _int_attr(node: ET.Element, name: str) -> int | None:
    raw = (node.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ManifestParseError(f"Attribute {name}={raw!r} is not an integer") from e


def _str_attr(node: ET.Element, name: str) -> str | None:
    raw = (node.get(name) or "").strip()
    return raw or None


def parse_manifest(xml_text: str | bytes) -> Manifest:
    """
    Parse a DASH MPD document into its period / adaptation set / representation tree.

    Only the attributes needed for rendition selection are kept.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise ManifestParseError(f"Malformed DASH manifest: {e}") from e

    if _local_name(root.tag) != "MPD":
        raise ManifestParseError(
            f"Expected an MPD root element, got {_local_name(root.tag)!r}"
        )

    periods: list[Period] = []
    for period_node in _children(root, "Period"):
        sets: list[AdaptationSet] = []
        for set_node in _children(period_node, "AdaptationSet"):
            reprs = [
                Representation(
                    id=_str_attr(repr_node, "id"),
                    height=_int_attr(repr_node, "height"),
                    width=_int_attr(repr_node, "width"),
                    bandwidth=_int_attr(repr_node, "bandwidth"),
                )
                for repr_node in _children(set_node, "Representation")
            ]
            sets.append(
                AdaptationSet(
                    content_type=_str_attr(set_node, "contentType"),
                    mime_type=_str_attr(set_node, "mimeType"),
                    representations=tuple(reprs),
                )
            )
        periods.append(Period(adaptation_sets=tuple(sets)))

    return Manifest(periods=tuple(periods))


def first_video_adaptation_set(manifest: Manifest) -> AdaptationSet | None:
    # First set whose contentType is "video" wins; mimeType is not consulted.
    for period in manifest.periods:
        for adaptation in period.adaptation_sets:
            if adaptation.content_type == "video":
                return adaptation
    return None


def select_renditions(
    manifest: Manifest, *, limit: int = DEFAULT_MAX_RENDITIONS
) -> list[Rendition]:
    """
    Pick up to ``limit`` renditions from the first video adaptation set.

    Candidates need both height and width. They are ordered by (height, width)
    descending and only the first one is flagged as best.
    """
    if limit < 1:
        raise ValueError("limit must be >= 1")

    adaptation = first_video_adaptation_set(manifest)
    if adaptation is None:
        return []

    sizes = [
        (rep.height, rep.width)
        for rep in adaptation.representations
        if rep.height is not None and rep.width is not None
    ]
    sizes.sort(reverse=True)

    return [
        Rendition(height=height, width=width, is_best=(i == 0))
        for i, (height, width) in enumerate(sizes[:limit])
    ]
