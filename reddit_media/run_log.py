from __future__ import annotations

import json
import traceback
import uuid
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Any, TextIO

_MESSAGE_LIMIT = 2000
_TRACEBACK_LIMIT = 12000


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _error_details(exc: BaseException) -> dict[str, str]:
    tb = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return {
        "type": type(exc).__name__,
        "message": _clip(str(exc), _MESSAGE_LIMIT),
        "traceback": _clip(tb, _TRACEBACK_LIMIT),
    }


class RunLogger:
    """
    JSONL event log for one ``resolve`` invocation.

    Every line carries ``ts``, ``level``, ``event`` and ``session_id``. Once a post is
    bound, lines also carry its ``post_id``; resolver events add the media ``url``
    they concern, and anything else lands under ``data``.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        overwrite: bool = True,
        session_id: str | None = None,
    ) -> None:
        self._path = Path(path)
        self._truncate_on_open = overwrite
        self._session_id = (session_id or "").strip() or uuid.uuid4().hex
        self._post_id: str | None = None
        self._fp: TextIO | None = None
        self._lock = Lock()

    @classmethod
    def open(
        cls,
        path: str | Path,
        *,
        overwrite: bool = True,
        session_id: str | None = None,
    ) -> "RunLogger":
        logger = cls(path, overwrite=overwrite, session_id=session_id)
        with logger._lock:
            logger._open_locked()
        return logger

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def close(self) -> None:
        with self._lock:
            if self._fp is None:
                return
            fp, self._fp = self._fp, None
            fp.close()

    def bind_post(self, post_id: str | None) -> None:
        self._post_id = (post_id or "").strip() or None

    def info(self, event: str, *, url: str | None = None, **data: Any) -> None:
        self._emit("INFO", event, url, data)

    def exception(
        self,
        event: str,
        *,
        exc: BaseException,
        url: str | None = None,
        **data: Any,
    ) -> None:
        self._emit("ERROR", event, url, {**data, "error": _error_details(exc)})

    def _emit(self, level: str, event: str, url: str | None, data: dict[str, Any]) -> None:
        record: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "event": event,
            "session_id": self._session_id,
        }
        if self._post_id:
            record["post_id"] = self._post_id
        if url:
            record["url"] = url
        if data:
            record["data"] = data

        line = json.dumps(record, ensure_ascii=False, sort_keys=True, separators=(",", ":"), default=str)
        with self._lock:
            fp = self._open_locked()
            fp.write(line + "\n")
            fp.flush()

    def _open_locked(self) -> TextIO:
        if self._fp is None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # Only the first open truncates; reopening after close() appends.
            mode = "w" if self._truncate_on_open else "a"
            self._truncate_on_open = False
            self._fp = self._path.open(mode, encoding="utf-8", newline="\n")
        return self._fp
