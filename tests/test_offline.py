from __future__ import annotations

import unittest

from reddit_media.manifest import parse_manifest, select_renditions
from reddit_media.offline import OFFLINE_IMAGE_URL, OFFLINE_VIDEO_URL, OfflineHttpFetcher


class TestOfflineHttpFetcher(unittest.TestCase):
    def test_image_bytes_are_a_signature_placeholder(self) -> None:
        data = OfflineHttpFetcher().get_bytes(OFFLINE_IMAGE_URL)

        self.assertTrue(data.startswith(b"\x89PNG\r\n\x1a\n"))
        self.assertEqual(data[8:], b"offline")

    def test_serves_manifest_only_for_playlist_urls(self) -> None:
        fetcher = OfflineHttpFetcher()

        xml = fetcher.get_text(f"{OFFLINE_VIDEO_URL}/DASHPlaylist.mpd")
        heights = [r.height for r in select_renditions(parse_manifest(xml))]

        self.assertEqual(heights, [1080, 720, 480])
        self.assertEqual(fetcher.get_text(OFFLINE_VIDEO_URL), "")


if __name__ == "__main__":
    unittest.main()
