from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Protocol

import requests

from .config import RedditCredentials
from .config_schema import AppConfig
from .errors import (
    GalleryUnsupportedError,
    ManifestFetchError,
    NoDownloadableFoundError,
    RenditionDownloadError,
)
from .http_client import HttpFetcher
from .links import GalleryLink, ImageLink, SelfReferenceLink, VideoLink, classify_link
from .manifest import MANIFEST_ACCEPT, manifest_url_for, parse_manifest, select_renditions
from .models import DownloadItem, DownloadType, Rendition, ResolvedContent
from .muxer import RenditionDownloader, YtDlpRenditionDownloader
from .reddit_client import RedditPostClient

_NO_DOWNLOADABLE = "No downloadable found in the given reddit post"


class _PostSource(Protocol):
    def fetch_post_urls(self, post_id: str) -> list[str]: ...


class _Fetcher(Protocol):
    def get_bytes(self, url: str, *, headers: Any = None) -> bytes: ...

    def get_text(self, url: str, *, headers: Any = None) -> str: ...


class _EventLog(Protocol):
    def info(self, event: str, *, url: str | None = None, **data: Any) -> None: ...


class RedditContentResolver:
    """
    Resolve a Reddit post into downloadable images or video renditions.

    Every step runs sequentially and any failure aborts the whole call; partial
    results are never returned.
    """

    def __init__(
        self,
        credentials: RedditCredentials | None = None,
        *,
        config: AppConfig | None = None,
        reddit: _PostSource | None = None,
        http: _Fetcher | None = None,
        downloader: RenditionDownloader | None = None,
        logger: _EventLog | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._logger = logger

        if reddit is not None:
            self._reddit = reddit
        elif credentials is not None:
            self._reddit = RedditPostClient(credentials)
        else:
            raise ValueError("credentials are required when no reddit client is given")

        self._owned_http = HttpFetcher(self._config.http) if http is None else None
        self._http = http or self._owned_http
        self._downloader = downloader or YtDlpRenditionDownloader(self._config.video)

    def close(self) -> None:
        if self._owned_http is not None:
            self._owned_http.close()

    def __enter__(self) -> "RedditContentResolver":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def resolve(self, post_id: str) -> ResolvedContent:
        pid = (post_id or "").strip()
        if not pid:
            raise ValueError("post_id must be a non-empty string")

        urls = self._reddit.fetch_post_urls(pid)
        if not urls:
            self._info("no_downloadable_found", post_id=pid, links=0)
            raise NoDownloadableFoundError(_NO_DOWNLOADABLE)

        items: list[DownloadItem] = []
        download_type = DownloadType.IMAGE

        for url in urls:
            link = classify_link(url)

            # A later link overwrites the type set by an earlier one; items are kept.
            if isinstance(link, ImageLink):
                download_type = DownloadType.IMAGE
                items.append(self._download_image(url, link))
            elif isinstance(link, VideoLink):
                download_type = DownloadType.VIDEO
                items.extend(self._download_video(url, pid))
            elif isinstance(link, SelfReferenceLink):
                self._info("self_reference_skipped", url=url)
            elif isinstance(link, GalleryLink):
                self._info("gallery_unsupported", url=url)
                raise GalleryUnsupportedError("Gallery is not supported currently")

        if not items:
            self._info("no_downloadable_found", post_id=pid, links=len(urls))
            raise NoDownloadableFoundError(_NO_DOWNLOADABLE)

        return ResolvedContent(download_type=download_type, items=tuple(items))

    def _download_image(self, url: str, link: ImageLink) -> DownloadItem:
        try:
            content = self._http.get_bytes(url)
        except requests.RequestException as e:
            raise RenditionDownloadError(f"Failed to download image {url}: {e}") from e

        self._info("image_downloaded", url=url, bytes=len(content))
        return DownloadItem(
            file_name=link.stem,
            extension=link.extension,
            rendition=Rendition(),
            content=content,
        )

    def _download_video(self, video_url: str, post_id: str) -> list[DownloadItem]:
        manifest_url = manifest_url_for(video_url)
        try:
            xml = self._http.get_text(manifest_url, headers={"Accept": MANIFEST_ACCEPT})
        except requests.RequestException as e:
            raise ManifestFetchError(f"Failed to fetch DASH manifest {manifest_url}: {e}") from e

        manifest = parse_manifest(xml)
        renditions = select_renditions(manifest, limit=self._config.video.max_renditions)
        self._info(
            "renditions_selected",
            url=manifest_url,
            renditions=[f"{r.width}x{r.height}" for r in renditions],
        )

        items: list[DownloadItem] = []
        for rendition in renditions:
            content = self._download_rendition(manifest_url, rendition)
            self._info(
                "rendition_downloaded",
                url=manifest_url,
                height=rendition.height,
                width=rendition.width,
                is_best=rendition.is_best,
                bytes=len(content),
            )
            items.append(
                DownloadItem(
                    file_name=post_id,
                    extension=self._config.video.container,
                    rendition=rendition,
                    content=content,
                )
            )
        return items

    def _download_rendition(self, manifest_url: str, rendition: Rendition) -> bytes:
        with tempfile.TemporaryDirectory(prefix="reddit_media_") as td:
            path = self._downloader.download(manifest_url, rendition, Path(td))
            try:
                return path.read_bytes()
            except OSError as e:
                raise RenditionDownloadError(
                    f"Failed to read downloaded rendition {path}: {e}"
                ) from e
            finally:
                path.unlink(missing_ok=True)

    def _info(self, event: str, *, url: str | None = None, **data: Any) -> None:
        if self._logger is not None:
            self._logger.info(event, url=url, **data)
