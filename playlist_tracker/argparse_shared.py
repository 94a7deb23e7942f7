import argparse

def get_base_parser(description: str = "Track progress through YouTube playlists") -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("-e", "--env-file", help="Path to a custom .env file", default=None)
    return parser

def add_log_level_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-l", "--log-level", help="Set log level (DEBUG, INFO, WARNING, ERROR)", default="WARNING")

def add_playlist_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("playlist", help="Playlist URL (with a list= parameter) or bare playlist ID")

def add_json_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Print the raw JSON payload")
