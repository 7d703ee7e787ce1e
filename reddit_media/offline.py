from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

from .models import Rendition

OFFLINE_VIDEO_URL = "https://v.redd.it/offline0video"
OFFLINE_IMAGE_URL = "https://i.redd.it/offline0image.png"

# PNG signature plus a marker; never decoded.
_OFFLINE_PNG = b"\x89PNG\r\n\x1a\noffline"

_OFFLINE_MPD = """\
<?xml version="1.0" encoding="UTF-8"?>
<MPD xmlns="urn:mpeg:dash:schema:mpd:2011" type="static" mediaPresentationDuration="PT4S">
  <Period>
    <AdaptationSet contentType="audio" mimeType="audio/mp4">
      <Representation id="audio_128" bandwidth="128000"/>
    </AdaptationSet>
    <AdaptationSet contentType="video" mimeType="video/mp4">
      <Representation id="270" height="270" width="480" bandwidth="300000"/>
      <Representation id="480" height="480" width="854" bandwidth="900000"/>
      <Representation id="720" height="720" width="1280" bandwidth="2000000"/>
      <Representation id="1080" height="1080" width="1920" bandwidth="4500000"/>
    </AdaptationSet>
  </Period>
</MPD>
"""

_DEFAULT_POSTS: dict[str, tuple[str, ...]] = {
    "offline1": (
        "https://www.reddit.com/r/offline/comments/offline1/sample_post/",
        OFFLINE_VIDEO_URL,
    ),
    "offline2": (OFFLINE_IMAGE_URL,),
}


@dataclass
class OfflineRedditPostClient:
    """
    Network-free post source for smoke runs.

    Unknown post ids resolve to the default video post.
    """

    posts: Mapping[str, Sequence[str]] = field(default_factory=lambda: dict(_DEFAULT_POSTS))

    def fetch_post_urls(self, post_id: str) -> list[str]:
        urls = self.posts.get(post_id)
        if urls is None:
            urls = self.posts.get("offline1", ())
        return list(urls)


@dataclass
class OfflineHttpFetcher:
    """Serves the bundled MPD for manifest URLs and placeholder image bytes otherwise."""

    manifest_text: str = _OFFLINE_MPD
    image_bytes: bytes = _OFFLINE_PNG

    def get_bytes(self, url: str, *, headers: Any = None) -> bytes:
        _ = (url, headers)
        return self.image_bytes

    def get_text(self, url: str, *, headers: Any = None) -> str:
        _ = headers
        if url.endswith("/DASHPlaylist.mpd"):
            return self.manifest_text
        return ""


class OfflineRenditionDownloader:
    """Writes a deterministic placeholder file instead of invoking yt-dlp."""

    def download(self, manifest_url: str, rendition: Rendition, dest_dir: Path) -> Path:
        dest = Path(dest_dir)
        dest.mkdir(parents=True, exist_ok=True)
        path = dest / f"rendition_{rendition.height}.mp4"
        path.write_bytes(f"offline:{manifest_url}:{rendition.width}x{rendition.height}".encode())
        return path