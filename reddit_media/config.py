from __future__ import annotations

import hashlib
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import ValidationError

from .config_schema import AppConfig
from .errors import ConfigError


@dataclass(frozen=True)
class RedditCredentials:
    username: str
    password: str = field(repr=False)
    client_id: str
    client_secret: str = field(repr=False)
    user_agent: str = "myapp/0.1"


def load_config(path: str | Path) -> AppConfig:
    """
    Load a YAML config file and validate it into a typed AppConfig.

    Raises ConfigError with a readable validation message on failure.
    """
    p = Path(path)

    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    try:
        raw_text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {p}") from e

    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML in {p}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(f"Top-level YAML in {p} must be a mapping/object")

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(_format_pydantic_errors(e, p)) from e


def resolve_credentials(
    config: AppConfig, *, environ: Mapping[str, str] | None = None
) -> RedditCredentials:
    """
    Read the Reddit script-app credentials named by the config from the environment.

    All four variables must be present and non-empty; every missing name is reported.
    """
    env = os.environ if environ is None else environ
    reddit = config.reddit

    names = (
        reddit.username_env,
        reddit.password_env,
        reddit.client_id_env,
        reddit.client_secret_env,
    )
    missing = [name for name in names if not (env.get(name) or "").strip()]
    if missing:
        joined = ", ".join(missing)
        raise ConfigError(f"Missing required environment variables: {joined}")

    return RedditCredentials(
        username=env[reddit.username_env].strip(),
        password=env[reddit.password_env].strip(),
        client_id=env[reddit.client_id_env].strip(),
        client_secret=env[reddit.client_secret_env].strip(),
        user_agent=reddit.user_agent,
    )


def config_sha256(config: AppConfig) -> str:
    """
    Compute a stable SHA-256 hash of the config values for reproducibility.
    """
    payload = json.dumps(
        config.model_dump(mode="json"),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")
    return hashlib.sha256(payload).hexdigest()


def _format_pydantic_errors(err: ValidationError, path: Path) -> str:
    lines: list[str] = [f"Invalid configuration in {path}:"]
    for item in err.errors():
        loc = ".".join(str(part) for part in item.get("loc", [])) or "<root>"
        msg = item.get("msg", "invalid value")
        lines.append(f"- {loc}: {msg}")
    return "\n".join(lines)
