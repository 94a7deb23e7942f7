"""CLI commands for the playlist tracker.

Provides commands for:
- Fetching a playlist catalog
- Showing recently viewed playlists
- Showing watch progress for a playlist
- Marking videos done (or not done) by hand
- Serving the web viewer
"""

import json
import logging
import sys
from typing import Optional

from ..argparse_shared import (
    add_json_argument,
    add_log_level_argument,
    add_playlist_argument,
    get_base_parser,
)
from ..config import Config
from ..db.factory import create_storage_from_config
from ..errors import CatalogError
from ..tracker.history import HistoryStore
from ..tracker.progress import ProgressStore
from ..utils.formatting import extract_playlist_id
from ..youtube.catalog import create_catalog_fetcher

logger = logging.getLogger(__name__)


def resolve_playlist_id(value: str) -> Optional[str]:
    """Accept either a playlist URL or a bare playlist ID."""
    playlist_id = extract_playlist_id(value)
    if playlist_id:
        return playlist_id
    value = value.strip()
    if value and not any(ch in value for ch in "/?&=# "):
        return value
    return None


def _fetch_or_exit(args, config: Config):
    playlist_id = resolve_playlist_id(args.playlist)
    if not playlist_id:
        print(f"Error: could not find a playlist ID in {args.playlist!r}")
        sys.exit(1)

    fetcher = create_catalog_fetcher(config)
    try:
        return fetcher.fetch(playlist_id)
    except CatalogError as e:
        print(f"Error: {e.message}")
        sys.exit(1)


def fetch_playlist(args, config: Config):
    """
    Fetch a playlist and print its videos in playback order.

    Exits with status 1 on an unusable argument or any catalog error.
    """
    catalog = _fetch_or_exit(args, config)

    if args.json:
        print(json.dumps(catalog.to_dict(), indent=2))
        return

    print(f"\n{catalog.title}")
    if catalog.channel_title:
        print(f"  Channel: {catalog.channel_title}")
    print(f"  Videos: {len(catalog)}")
    for index, video in enumerate(catalog.videos, start=1):
        print(f"  {index:>3}. [{video.duration_display:>8}] {video.title}")


def show_history(args, config: Config):
    """Print recently viewed playlists, most recent first."""
    storage = create_storage_from_config(config)
    try:
        entries = HistoryStore(storage, limit=config.HISTORY_LIMIT).entries()
        if args.json:
            print(json.dumps([entry.to_dict() for entry in entries], indent=2))
            return
        if not entries:
            print("No recent playlists yet")
            return
        for entry in entries:
            viewed = entry.viewed_at.strftime("%Y-%m-%d %H:%M")
            print(f"  {viewed}  {entry.title} ({entry.channel_title})")
            print(f"      {entry.url}")
    finally:
        storage.close()


def show_progress(args, config: Config):
    """Fetch a playlist and print each video's completion state."""
    catalog = _fetch_or_exit(args, config)
    storage = create_storage_from_config(config)
    try:
        progress = ProgressStore(storage, threshold=config.COMPLETION_THRESHOLD)
        percent = progress.playlist_percent(catalog.video_ids)
        done = progress.completed_count(catalog.video_ids)

        print(f"\n{catalog.title}: {round(percent)}% ({done}/{len(catalog)} videos)")
        for index, video in enumerate(catalog.videos, start=1):
            record = progress.get(video.id)
            if record.completed:
                mark = " done"
            elif record.current_time > 0:
                mark = f"{round(record.percent):>4}%"
            else:
                mark = "    -"
            print(f"  {index:>3}. {mark}  {video.title}")
    finally:
        storage.close()


def mark_video(args, config: Config):
    """Set or clear the completion mark of a video."""
    storage = create_storage_from_config(config)
    try:
        progress = ProgressStore(storage, threshold=config.COMPLETION_THRESHOLD)
        record = progress.set_completed(args.video_id, not args.undo)
        state = "completed" if record.completed else "not completed"
        print(f"Video {args.video_id} marked {state}")
    finally:
        storage.close()


def serve(args, config: Config):
    """Run the web viewer with uvicorn."""
    import uvicorn

    from ..web.app import create_app

    uvicorn.run(create_app(config), host=args.host, port=args.port or config.WEB_PORT)


def create_parser():
    """Create the argument parser."""
    parser = get_base_parser()
    add_log_level_argument(parser)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # fetch command
    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch a playlist and list its videos",
    )
    add_playlist_argument(fetch_parser)
    add_json_argument(fetch_parser)

    # history command
    history_parser = subparsers.add_parser(
        "history",
        help="Show recently viewed playlists",
    )
    add_json_argument(history_parser)

    # progress command
    progress_parser = subparsers.add_parser(
        "progress",
        help="Show watch progress for a playlist",
    )
    add_playlist_argument(progress_parser)

    # mark command
    mark_parser = subparsers.add_parser(
        "mark",
        help="Mark a video as done",
    )
    mark_parser.add_argument("video_id", help="YouTube video ID")
    mark_parser.add_argument(
        "--undo",
        action="store_true",
        help="Clear the completion mark instead",
    )

    # serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the web viewer",
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=None, help="Port (default: PORT or 8080)")

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Load configuration
    config = Config(env_file=args.env_file)

    # Route to appropriate command
    commands = {
        "fetch": fetch_playlist,
        "history": show_history,
        "progress": show_progress,
        "mark": mark_video,
        "serve": serve,
    }

    command_func = commands.get(args.command)
    if command_func:
        command_func(args, config)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
