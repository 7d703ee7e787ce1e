from __future__ import annotations

from typing import Any, Iterable, Protocol

import praw
from praw.exceptions import PRAWException
from prawcore.exceptions import PrawcoreException

from .config import RedditCredentials
from .errors import AuthenticationError, PostFetchError


class _UserAPI(Protocol):
    def me(self) -> Any: ...


class _RedditAPI(Protocol):
    user: _UserAPI

    def info(self, *, fullnames: list[str]) -> Iterable[Any]: ...


def submission_fullname(post_id: str) -> str:
    pid = (post_id or "").strip()
    if pid.startswith("t3_"):
        return pid
    return f"t3_{pid}"


class RedditPostClient:
    """
    Thin wrapper around praw for the one call the resolver needs.

    Uses the script-app password grant, so the session acts as the configured user.
    """

    def __init__(
        self,
        credentials: RedditCredentials,
        *,
        reddit: _RedditAPI | None = None,
    ) -> None:
        self._credentials = credentials
        self._authenticated = False

        if reddit is not None:
            self._reddit = reddit
        else:
            try:
                self._reddit = praw.Reddit(
                    client_id=credentials.client_id,
                    client_secret=credentials.client_secret,
                    username=credentials.username,
                    password=credentials.password,
                    user_agent=credentials.user_agent,
                    check_for_updates=False,
                )
            except (PRAWException, PrawcoreException) as e:
                raise AuthenticationError(f"Failed to get a reddit client. Reason: {e}") from e

    def authenticate(self) -> None:
        if self._authenticated:
            return

        try:
            me = self._reddit.user.me()
        except (PRAWException, PrawcoreException) as e:
            raise AuthenticationError(f"Failed to get a reddit client. Reason: {e}") from e

        if me is None:
            raise AuthenticationError(
                "Failed to get a reddit client. Reason: session is not authenticated"
            )
        self._authenticated = True

    def fetch_post_urls(self, post_id: str) -> list[str]:
        """
        Return the non-null ``url`` of every thing in the submission listing, in order.
        """
        self.authenticate()

        fullname = submission_fullname(post_id)
        try:
            things = list(self._reddit.info(fullnames=[fullname]))
        except (PRAWException, PrawcoreException) as e:
            raise PostFetchError(f"Failed to fetch reddit post {fullname}: {e}") from e

        urls: list[str] = []
        for thing in things:
            url = getattr(thing, "url", None)
            if isinstance(url, str):
                urls.append(url)
        return urls
