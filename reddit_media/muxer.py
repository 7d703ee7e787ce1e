"""Quality-targeted DASH downloads muxed into a single container via yt-dlp + FFmpeg."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, Protocol

import yt_dlp
from yt_dlp.utils import DownloadError

from .config_schema import VideoConfig
from .errors import RenditionDownloadError
from .models import Rendition


class RenditionDownloader(Protocol):
    def download(self, manifest_url: str, rendition: Rendition, dest_dir: Path) -> Path: ...


def format_selector(rendition: Rendition) -> str:
    """
    yt-dlp format spec pinned to one rendition's exact size.

    Prefers the sized video plus best audio; falls back to the sized video alone
    for posts without an audio track.
    """
    size = f"[height={rendition.height}][width={rendition.width}]"
    return f"bestvideo{size}+bestaudio/best{size}/bestvideo{size}"


class YtDlpRenditionDownloader:
    """Downloads one rendition from a DASH manifest and merges video and audio."""

    def __init__(self, config: VideoConfig | None = None) -> None:
        self._config = config or VideoConfig()

    def _ydl_opts(self, rendition: Rendition, dest_dir: Path) -> dict[str, Any]:
        opts: dict[str, Any] = {
            "format": format_selector(rendition),
            "outtmpl": str(dest_dir / "rendition.%(ext)s"),
            "merge_output_format": self._config.container,
            "quiet": True,
            "no_warnings": True,
            "noprogress": True,
            "noplaylist": True,
        }
        if self._config.ffmpeg_location:
            opts["ffmpeg_location"] = self._config.ffmpeg_location
        return opts

    def download(self, manifest_url: str, rendition: Rendition, dest_dir: Path) -> Path:
        if not self._config.ffmpeg_location and shutil.which(self._config.muxer) is None:
            raise RenditionDownloadError(
                "FFmpeg not found. Please install FFmpeg and add it to your PATH."
            )

        dest = Path(dest_dir)
        dest.mkdir(parents=True, exist_ok=True)

        try:
            with yt_dlp.YoutubeDL(self._ydl_opts(rendition, dest)) as ydl:
                info = ydl.extract_info(manifest_url, download=True)
        except DownloadError as e:
            raise RenditionDownloadError(
                f"Failed to download {rendition.height}p rendition from {manifest_url}: {e}"
            ) from e

        path = _downloaded_path(info, dest)
        if path is None:
            raise RenditionDownloadError(
                f"Download produced no file for {rendition.height}p rendition of {manifest_url}"
            )
        return path


def _downloaded_path(info: Any, dest_dir: Path) -> Path | None:
    if isinstance(info, dict):
        for item in info.get("requested_downloads") or []:
            filepath = item.get("filepath") if isinstance(item, dict) else None
            if filepath and Path(filepath).exists():
                return Path(filepath)

    candidates = sorted(p for p in dest_dir.glob("rendition.*") if p.is_file())
    return candidates[0] if candidates else None
