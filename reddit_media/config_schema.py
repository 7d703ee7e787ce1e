from __future__ import annotations

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _validate_env_var_name(value: str) -> str:
    name = (value or "").strip()
    if not _ENV_NAME_RE.fullmatch(name):
        raise ValueError("must be a valid environment variable name")
    return name


PositiveInt = Annotated[int, Field(ge=1)]
PositiveFloat = Annotated[float, Field(gt=0)]


class RedditConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    username_env: str = "USERNAME"
    password_env: str = "PASSWORD"
    client_id_env: str = "CLIENT_TOKEN"
    client_secret_env: str = "SECRET_TOKEN"
    user_agent: str = "myapp/0.1"

    @field_validator("username_env", "password_env", "client_id_env", "client_secret_env")
    @classmethod
    def _env_names_must_be_valid(cls, v: str) -> str:
        return _validate_env_var_name(v)

    @field_validator("user_agent")
    @classmethod
    def _user_agent_must_be_set(cls, v: str) -> str:
        ua = (v or "").strip()
        if not ua:
            raise ValueError("must be non-empty")
        return ua


class HttpConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout_seconds: PositiveFloat = 30.0
    user_agent: str = "reddit-media/0.1"


class VideoConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_renditions: PositiveInt = 3
    container: Literal["mp4"] = "mp4"
    muxer: Literal["ffmpeg"] = "ffmpeg"
    ffmpeg_location: str | None = None


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    reddit: RedditConfig = Field(default_factory=RedditConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    video: VideoConfig = Field(default_factory=VideoConfig)
