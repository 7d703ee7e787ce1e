from __future__ import annotations

from typing import Mapping

import requests

from .config_schema import HttpConfig


class HttpFetcher:
    """Plain GET helper over a shared requests session. No retries."""

    def __init__(
        self,
        config: HttpConfig | None = None,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config or HttpConfig()
        self._session = session or requests.Session()
        self._owns_session = session is None

    def _get(self, url: str, headers: Mapping[str, str] | None) -> requests.Response:
        resp = self._session.get(
            url,
            headers={"User-Agent": self._config.user_agent, **(headers or {})},
            timeout=self._config.timeout_seconds,
        )
        resp.raise_for_status()
        return resp

    def get_bytes(self, url: str, *, headers: Mapping[str, str] | None = None) -> bytes:
        return self._get(url, headers).content

    def get_text(self, url: str, *, headers: Mapping[str, str] | None = None) -> str:
        return self._get(url, headers).text

    def close(self) -> None:
        # A caller-supplied session stays open for its owner.
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()
