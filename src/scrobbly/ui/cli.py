from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import BaseModel, TypeAdapter, ValidationError

from scrobbly.app import build_lastfm_account
from scrobbly.config import configure_logging
from scrobbly.domain.types import ScrobbleRecord

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from scrobbly.app import LastFmAccount

log = logging.getLogger(__name__)


class ScrobbleRecordInput(BaseModel):
    artist: str
    track: str
    timestamp: datetime
    album: str | None = None
    album_artist: str | None = None

    def to_record(self) -> ScrobbleRecord:
        timestamp = self.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        return ScrobbleRecord(
            artist=self.artist,
            track=self.track,
            timestamp=timestamp,
            album=self.album or None,
            album_artist=self.album_artist or None,
        )


_RECORDS_ADAPTER = TypeAdapter(list[ScrobbleRecordInput])


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage a Last.fm scrobbling account")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("login", help="Authorize this application with Last.fm")
    subparsers.add_parser("logout", help="Forget the stored Last.fm session")
    subparsers.add_parser("status", help="Show account and quota status")
    subparsers.add_parser("enable", help="Enable scrobbling")
    subparsers.add_parser("disable", help="Disable scrobbling")

    scrobble = subparsers.add_parser("scrobble", help="Submit scrobbles from a JSON file")
    scrobble.add_argument(
        "file",
        type=Path,
        help="JSON list of objects with artist, track, timestamp and optional album fields",
    )

    now_playing = subparsers.add_parser("now-playing", help="Update the now playing track")
    now_playing.add_argument("--artist", required=True)
    now_playing.add_argument("--track", required=True)
    now_playing.add_argument("--album")

    tags = subparsers.add_parser("tags", help="Show top tags for an artist, album or track")
    tags.add_argument("--artist", required=True)
    group = tags.add_mutually_exclusive_group()
    group.add_argument("--track")
    group.add_argument("--album")

    return parser.parse_args(list(argv))


def _load_records(path: Path) -> tuple[ScrobbleRecord, ...]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        inputs = _RECORDS_ADAPTER.validate_python(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"Invalid scrobble file {path}: {exc}") from exc
    return tuple(item.to_record() for item in inputs)


async def _tags(account: LastFmAccount, args: argparse.Namespace) -> int:
    if args.track:
        result = await account.get_track_tags(args.artist, args.track)
    elif args.album:
        result = await account.get_album_tags(args.artist, args.album)
    else:
        result = await account.get_artist_tags(args.artist)
    if not result.ok:
        log.error("Tag lookup failed: %s", result.error)
        return 1
    log.info("Tags: %s", ", ".join(result.value) or "(none)")
    return 0


async def _run(args: argparse.Namespace, records: tuple[ScrobbleRecord, ...]) -> int:
    account = build_lastfm_account()
    try:
        await account.load()
        exit_code = await _dispatch(account, args, records)
        await account.save()
        return exit_code
    finally:
        await account.aclose()


async def _dispatch(
    account: LastFmAccount, args: argparse.Namespace, records: tuple[ScrobbleRecord, ...]
) -> int:
    command = args.command
    if command == "login":
        if not await account.authenticate():
            return 1
        log.info("Logged in as %s", account.account_id)
    elif command == "logout":
        account.logout()
        log.info("Logged out")
    elif command == "enable":
        account.submission_enabled = True
    elif command == "disable":
        account.submission_enabled = False
    elif command == "status":
        log.info(
            "Account: %s, scrobbling %s, %s/%s scrobbles in the last 24h",
            account.account_id or "(not logged in)",
            "enabled" if account.submission_enabled else "disabled",
            account.current_count,
            account.limit,
        )
    elif command == "scrobble":
        result = await account.submit(records)
        if not result.success:
            log.error(
                "Scrobbling failed after %s/%s batches: %s",
                result.accepted_batches,
                result.total_batches,
                result.error_message,
            )
            return 1
        log.info("Scrobbled %s records", len(records))
    elif command == "now-playing":
        error = await account.update_now_playing(args.artist, args.track, args.album)
        if error is not None:
            log.error("Updating now playing failed: %s", error)
            return 1
    elif command == "tags":
        return await _tags(account, args)
    else:
        raise ValueError(f"Unsupported command: {command}")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(verbose=parsed_args.verbose)
        records: tuple[ScrobbleRecord, ...] = ()
        if parsed_args.command == "scrobble":
            records = _load_records(parsed_args.file)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        exit_code = asyncio.run(_run(parsed_args, records))
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
