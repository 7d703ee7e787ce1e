from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from .models import DownloadItem, ResolvedContent

MANIFEST_FILE_NAME = "downloads.json"

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_stem(value: str) -> str:
    stem = _UNSAFE_CHARS_RE.sub("_", (value or "").strip()).strip("._")
    return stem or "download"


def item_file_name(item: DownloadItem) -> str:
    stem = _safe_stem(item.file_name)
    # Images carry the zero rendition, so any height marks a video item.
    if item.rendition.height > 0:
        stem = f"{stem}_{item.rendition.height}p"
    return f"{stem}.{item.extension}"


def _unique_path(directory: Path, name: str, taken: set[str]) -> Path:
    candidate = name
    base, dot, ext = name.rpartition(".")
    n = 1
    while candidate in taken:
        n += 1
        candidate = f"{base}_{n}{dot}{ext}" if dot else f"{name}_{n}"
    taken.add(candidate)
    return directory / candidate


def write_downloads(content: ResolvedContent, out_dir: str | Path) -> list[Path]:
    """
    Write every item of a resolved post to ``out_dir`` and record them in downloads.json.

    Returns the media file paths in item order.
    """
    directory = Path(out_dir)
    directory.mkdir(parents=True, exist_ok=True)

    taken: set[str] = set()
    written: list[Path] = []
    records: list[dict[str, Any]] = []

    for item in content.items:
        path = _unique_path(directory, item_file_name(item), taken)
        path.write_bytes(item.content)
        written.append(path)
        records.append(
            {
                "path": path.name,
                "file_name": item.file_name,
                "extension": item.extension,
                "bytes": item.size,
                "rendition": item.rendition.model_dump(mode="json"),
            }
        )

    summary = {
        "download_type": content.download_type.value,
        "items": records,
    }
    (directory / MANIFEST_FILE_NAME).write_text(
        json.dumps(summary, ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )
    return written
