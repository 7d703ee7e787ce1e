from __future__ import annotations

import unittest
from typing import Any

from prawcore.exceptions import PrawcoreException

from reddit_media.config import RedditCredentials
from reddit_media.errors import AuthenticationError, PostFetchError
from reddit_media.reddit_client import RedditPostClient, submission_fullname


class _Thing:
    def __init__(self, url: Any) -> None:
        self.url = url


class _FakeUser:
    def __init__(self, me: Any = "someone", exc: BaseException | None = None) -> None:
        self._me = me
        self._exc = exc
        self.calls = 0

    def me(self) -> Any:
        self.calls += 1
        if self._exc is not None:
            raise self._exc
        return self._me


class _FakeReddit:
    def __init__(
        self,
        things: list[_Thing],
        *,
        user: _FakeUser | None = None,
        info_exc: BaseException | None = None,
    ) -> None:
        self.user = user or _FakeUser()
        self._things = things
        self._info_exc = info_exc
        self.fullnames: list[list[str]] = []

    def info(self, *, fullnames: list[str]) -> Any:
        self.fullnames.append(list(fullnames))
        if self._info_exc is not None:
            raise self._info_exc
        return iter(self._things)


_CREDS = RedditCredentials(
    username="u", password="p", client_id="id", client_secret="s", user_agent="ua"
)


class TestRedditPostClient(unittest.TestCase):
    def test_collects_non_null_urls_in_order(self) -> None:
        fake = _FakeReddit(
            [_Thing("https://v.redd.it/a"), _Thing(None), _Thing("https://i.redd.it/b.png")]
        )
        client = RedditPostClient(_CREDS, reddit=fake)  # type: ignore[arg-type]

        urls = client.fetch_post_urls("abc")

        self.assertEqual(urls, ["https://v.redd.it/a", "https://i.redd.it/b.png"])
        self.assertEqual(fake.fullnames, [["t3_abc"]])

    def test_authenticates_once(self) -> None:
        fake = _FakeReddit([])
        client = RedditPostClient(_CREDS, reddit=fake)  # type: ignore[arg-type]

        client.fetch_post_urls("a")
        client.fetch_post_urls("b")

        self.assertEqual(fake.user.calls, 1)

    def test_auth_failure(self) -> None:
        fake = _FakeReddit([], user=_FakeUser(exc=PrawcoreException("invalid_grant")))
        client = RedditPostClient(_CREDS, reddit=fake)  # type: ignore[arg-type]

        with self.assertRaises(AuthenticationError):
            client.fetch_post_urls("abc")
        self.assertEqual(fake.fullnames, [])

    def test_anonymous_session_is_rejected(self) -> None:
        fake = _FakeReddit([], user=_FakeUser(me=None))
        client = RedditPostClient(_CREDS, reddit=fake)  # type: ignore[arg-type]

        with self.assertRaises(AuthenticationError):
            client.authenticate()

    def test_fetch_failure(self) -> None:
        fake = _FakeReddit([], info_exc=PrawcoreException("503"))
        client = RedditPostClient(_CREDS, reddit=fake)  # type: ignore[arg-type]

        with self.assertRaises(PostFetchError):
            client.fetch_post_urls("abc")

    def test_fullname(self) -> None:
        self.assertEqual(submission_fullname("abc"), "t3_abc")
        self.assertEqual(submission_fullname("t3_abc"), "t3_abc")


if __name__ == "__main__":
    unittest.main()
