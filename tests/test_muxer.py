from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from typing import Any
from unittest import mock

from yt_dlp.utils import DownloadError

from reddit_media.config_schema import VideoConfig
from reddit_media.errors import RenditionDownloadError
from reddit_media.models import Rendition
from reddit_media.muxer import YtDlpRenditionDownloader, format_selector


class _FakeYoutubeDL:
    instances: list["_FakeYoutubeDL"] = []

    def __init__(self, opts: dict[str, Any]) -> None:
        self.opts = opts
        self.urls: list[str] = []
        _FakeYoutubeDL.instances.append(self)

    def __enter__(self) -> "_FakeYoutubeDL":
        return self

    def __exit__(self, *exc: object) -> None:
        return None

    def extract_info(self, url: str, download: bool = True) -> dict[str, Any]:
        self.urls.append(url)
        out = Path(self.opts["outtmpl"].replace("%(ext)s", "mp4"))
        out.write_bytes(b"muxed")
        return {"requested_downloads": [{"filepath": str(out)}]}


class _FailingYoutubeDL(_FakeYoutubeDL):
    def extract_info(self, url: str, download: bool = True) -> dict[str, Any]:
        raise DownloadError("Requested format is not available")


class TestFormatSelector(unittest.TestCase):
    def test_pins_height_and_width(self) -> None:
        selector = format_selector(Rendition(height=720, width=1280))
        self.assertEqual(
            selector,
            "bestvideo[height=720][width=1280]+bestaudio"
            "/best[height=720][width=1280]"
            "/bestvideo[height=720][width=1280]",
        )


class TestYtDlpRenditionDownloader(unittest.TestCase):
    def setUp(self) -> None:
        _FakeYoutubeDL.instances.clear()

    def test_download_returns_merged_file(self) -> None:
        downloader = YtDlpRenditionDownloader(VideoConfig(ffmpeg_location="/opt/ffmpeg"))
        rendition = Rendition(height=1080, width=1920, is_best=True)

        with tempfile.TemporaryDirectory() as td:
            with mock.patch("reddit_media.muxer.yt_dlp.YoutubeDL", _FakeYoutubeDL):
                path = downloader.download("https://v.redd.it/a/DASHPlaylist.mpd", rendition, Path(td))

            self.assertEqual(path.read_bytes(), b"muxed")
            self.assertEqual(path.parent, Path(td))

        ydl = _FakeYoutubeDL.instances[0]
        self.assertEqual(ydl.urls, ["https://v.redd.it/a/DASHPlaylist.mpd"])
        self.assertEqual(ydl.opts["merge_output_format"], "mp4")
        self.assertEqual(ydl.opts["ffmpeg_location"], "/opt/ffmpeg")
        self.assertEqual(ydl.opts["format"], format_selector(rendition))

    def test_download_error_is_wrapped(self) -> None:
        downloader = YtDlpRenditionDownloader(VideoConfig(ffmpeg_location="/opt/ffmpeg"))

        with tempfile.TemporaryDirectory() as td:
            with mock.patch("reddit_media.muxer.yt_dlp.YoutubeDL", _FailingYoutubeDL):
                with self.assertRaises(RenditionDownloadError):
                    downloader.download(
                        "https://v.redd.it/a/DASHPlaylist.mpd",
                        Rendition(height=480, width=854),
                        Path(td),
                    )

    def test_missing_ffmpeg(self) -> None:
        downloader = YtDlpRenditionDownloader()

        with tempfile.TemporaryDirectory() as td:
            with mock.patch("reddit_media.muxer.shutil.which", return_value=None):
                with self.assertRaises(RenditionDownloadError):
                    downloader.download(
                        "https://v.redd.it/a/DASHPlaylist.mpd",
                        Rendition(height=480, width=854),
                        Path(td),
                    )


if __name__ == "__main__":
    unittest.main()
