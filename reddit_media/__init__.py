from __future__ import annotations

from .config import RedditCredentials, load_config, resolve_credentials
from .config_schema import AppConfig
from .errors import (
    AuthenticationError,
    ConfigError,
    GalleryUnsupportedError,
    ManifestFetchError,
    ManifestParseError,
    NoDownloadableFoundError,
    PostFetchError,
    RenditionDownloadError,
    ResolutionError,
)
from .models import DownloadItem, DownloadType, Rendition, ResolvedContent
from .resolver import RedditContentResolver

__all__ = [
    "AppConfig",
    "AuthenticationError",
    "ConfigError",
    "DownloadItem",
    "DownloadType",
    "GalleryUnsupportedError",
    "ManifestFetchError",
    "ManifestParseError",
    "NoDownloadableFoundError",
    "PostFetchError",
    "RedditContentResolver",
    "RedditCredentials",
    "Rendition",
    "RenditionDownloadError",
    "ResolutionError",
    "ResolvedContent",
    "load_config",
    "resolve_credentials",
]
