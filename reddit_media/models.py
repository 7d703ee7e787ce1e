from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt


class DownloadType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class Rendition(BaseModel):
    """One selectable video quality. Images carry the zero default."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    height: NonNegativeInt = 0
    width: NonNegativeInt = 0
    is_best: bool = False


class DownloadItem(BaseModel):
    # Bytes travel as base64 in JSON; python-mode validation keeps raw bytes untouched.
    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    file_name: str
    extension: str
    rendition: Rendition = Field(default_factory=Rendition)
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class ResolvedContent(BaseModel):
    """
    The resolver's output envelope: a discriminant plus the ordered downloads.

    Serializes to JSON with base64 payloads via to_json()/from_json().
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    download_type: DownloadType
    items: tuple[DownloadItem, ...]

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, payload: str | bytes) -> "ResolvedContent":
        return cls.model_validate_json(payload)
