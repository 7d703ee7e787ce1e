from __future__ import annotations

from dataclasses import dataclass
from typing import Union

IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")
VIDEO_HOST_PREFIX = "https://v.redd.it"


@dataclass(frozen=True)
class ImageLink:
    stem: str
    extension: str


@dataclass(frozen=True)
class VideoLink:
    pass


@dataclass(frozen=True)
class SelfReferenceLink:
    post_id: str


@dataclass(frozen=True)
class GalleryLink:
    pass


@dataclass(frozen=True)
class UnrecognizedLink:
    pass


LinkClassification = Union[ImageLink, VideoLink, SelfReferenceLink, GalleryLink, UnrecognizedLink]


def extract_reddit_id(url: str) -> str | None:
    """
    Return the post id from a ``reddit.com/r/<sub>/comments/<id>/...`` URL.

    Returns None for non-subreddit URLs or when no segment follows ``comments``.
    """
    if "reddit.com/r/" not in url:
        return None

    parts = url.split("/")
    try:
        index = parts.index("comments")
    except ValueError:
        return None

    if index + 1 >= len(parts):
        return None
    return parts[index + 1]


def extract_image_info(url: str) -> tuple[str, str] | None:
    # Extension match is case-sensitive: "photo.JPG" is not an image link.
    last_part = url.split("/")[-1]
    stem, sep, extension = last_part.rpartition(".")
    if not sep:
        return None
    if extension not in IMAGE_EXTENSIONS:
        return None
    return stem, extension


def is_video_link(url: str) -> bool:
    return url.startswith(VIDEO_HOST_PREFIX)


def is_gallery_link(url: str) -> bool:
    return "/gallery/" in url


def classify_link(url: str) -> LinkClassification:
    """
    Classify a post link purely from its string shape.

    Checks run in a fixed order: image, video, self-reference, gallery.
    """
    image = extract_image_info(url)
    if image is not None:
        return ImageLink(stem=image[0], extension=image[1])

    if is_video_link(url):
        return VideoLink()

    post_id = extract_reddit_id(url)
    if post_id is not None:
        return SelfReferenceLink(post_id=post_id)

    if is_gallery_link(url):
        return GalleryLink()

    return UnrecognizedLink()
