from __future__ import annotations

import json
import unittest

from pydantic import ValidationError

from reddit_media.models import DownloadItem, DownloadType, Rendition, ResolvedContent


def _video_content() -> ResolvedContent:
    return ResolvedContent(
        download_type=DownloadType.VIDEO,
        items=(
            DownloadItem(
                file_name="abc",
                extension="mp4",
                rendition=Rendition(height=1080, width=1920, is_best=True),
                content=b"\x00\x01best",
            ),
            DownloadItem(
                file_name="abc",
                extension="mp4",
                rendition=Rendition(height=720, width=1280),
                content=b"\xff\xfe mid",
            ),
        ),
    )


class TestModels(unittest.TestCase):
    def test_image_items_default_rendition(self) -> None:
        item = DownloadItem(file_name="pic", extension="png", content=b"x")
        self.assertEqual(item.rendition, Rendition(height=0, width=0, is_best=False))
        self.assertEqual(item.size, 1)

    def test_items_are_immutable(self) -> None:
        item = DownloadItem(file_name="pic", extension="png", content=b"x")
        with self.assertRaises(ValidationError):
            item.extension = "jpg"  # type: ignore[misc]

    def test_json_round_trip_preserves_order_and_best_flag(self) -> None:
        original = _video_content()

        restored = ResolvedContent.from_json(original.to_json())

        self.assertEqual(restored, original)
        self.assertEqual(restored.download_type, DownloadType.VIDEO)
        self.assertEqual(len(restored.items), 2)
        self.assertEqual([i.extension for i in restored.items], ["mp4", "mp4"])
        self.assertEqual([i.rendition.is_best for i in restored.items], [True, False])
        self.assertEqual(restored.items[1].content, b"\xff\xfe mid")

    def test_json_envelope_shape(self) -> None:
        payload = json.loads(_video_content().to_json())

        self.assertEqual(payload["download_type"], "video")
        self.assertEqual(payload["items"][0]["rendition"]["height"], 1080)
        self.assertIsInstance(payload["items"][0]["content"], str)

    def test_rejects_unknown_download_type(self) -> None:
        with self.assertRaises(ValidationError):
            ResolvedContent.model_validate({"download_type": "gallery", "items": []})


if __name__ == "__main__":
    unittest.main()
