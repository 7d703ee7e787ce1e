from __future__ import annotations


class ConfigError(RuntimeError):
    """Raised when configuration is missing or invalid."""


class ResolutionError(RuntimeError):
    """Base class for failures while resolving a Reddit post into downloads."""


class AuthenticationError(ResolutionError):
    """Raised when an authenticated Reddit session cannot be established."""


class PostFetchError(ResolutionError):
    """Raised when post data cannot be retrieved from the Reddit API."""


class NoDownloadableFoundError(ResolutionError):
    """Raised when a post has no usable image or video links."""


class GalleryUnsupportedError(ResolutionError):
    """Raised when a post links to a gallery, which is not supported."""


class ManifestFetchError(ResolutionError):
    """Raised when a DASH manifest cannot be fetched."""


class ManifestParseError(ResolutionError):
    """Raised when a DASH manifest is not a valid MPD document."""


class RenditionDownloadError(ResolutionError):
    """Raised when a media download, mux, or read-back fails."""
