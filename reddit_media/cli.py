from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .config import config_sha256, load_config, resolve_credentials
from .errors import ConfigError, ResolutionError
from .export import MANIFEST_FILE_NAME, write_downloads
from .links import extract_reddit_id
from .resolver import RedditContentResolver
from .run_log import RunLogger


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="reddit_media")

    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve = subparsers.add_parser(
        "resolve",
        help="Download the images or video renditions attached to a Reddit post.",
    )
    resolve.add_argument(
        "--config",
        required=True,
        help="Path to YAML config file.",
    )
    target = resolve.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--url",
        help="Reddit post URL, e.g. https://reddit.com/r/sub/comments/1234/title/",
    )
    target.add_argument(
        "--post-id",
        help="Bare Reddit post id.",
    )
    resolve.add_argument(
        "--out",
        required=True,
        help="Output directory for downloaded files and the run log.",
    )
    resolve.add_argument(
        "--offline",
        action="store_true",
        help="Run without network calls using stub collaborators.",
    )
    resolve.set_defaults(_handler=_cmd_resolve)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _post_id_from_args(args: argparse.Namespace) -> str:
    if args.post_id is not None:
        pid = args.post_id.strip()
        if not pid:
            raise ConfigError("--post-id must be non-empty")
        return pid

    pid = extract_reddit_id(args.url or "")
    if not pid:
        raise ConfigError("No valid reddit link was found.")
    return pid


def _build_resolver(args: argparse.Namespace, log: RunLogger) -> RedditContentResolver:
    cfg = load_config(args.config)
    log.info(
        "config_loaded",
        config_path=str(args.config),
        config_sha256=config_sha256(cfg),
        offline=bool(args.offline),
    )

    if args.offline:
        from .offline import (
            OfflineHttpFetcher,
            OfflineRedditPostClient,
            OfflineRenditionDownloader,
        )

        return RedditContentResolver(
            config=cfg,
            reddit=OfflineRedditPostClient(),
            http=OfflineHttpFetcher(),
            downloader=OfflineRenditionDownloader(),
            logger=log,
        )

    credentials = resolve_credentials(cfg)
    return RedditContentResolver(credentials, config=cfg, logger=log)


def _cmd_resolve(args: argparse.Namespace) -> int:
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    log_path = out_dir / "run.log"
    with RunLogger.open(log_path, overwrite=True) as log:
        log.info(
            "resolve_command_started",
            config_path=str(args.config),
            out_dir=str(out_dir),
        )

        try:
            post_id = _post_id_from_args(args)
            log.bind_post(post_id)

            with _build_resolver(args, log) as resolver:
                content = resolver.resolve(post_id)
            paths = write_downloads(content, out_dir)

            log.info(
                "resolve_command_completed",
                download_type=content.download_type.value,
                items=len(content.items),
                files=[p.name for p in paths],
            )
        except Exception as e:
            log.exception("resolve_command_failed", exc=e)
            raise

    print(f"post_id={post_id}")
    print(f"download_type={content.download_type.value}")
    print(f"items={len(content.items)}")
    for path in paths:
        print(f"file={path}")
    print(f"summary={out_dir / MANIFEST_FILE_NAME}")
    print(f"run_log={log_path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except ConfigError as e:
        _eprint(str(e))
        return 2
    except ResolutionError as e:
        _eprint(str(e))
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
