"""Tests for CLI commands."""

import json
from unittest.mock import Mock, patch

import pytest

from playlist_tracker.cli import tracker_commands
from playlist_tracker.cli.tracker_commands import create_parser, main, resolve_playlist_id
from playlist_tracker.errors import PlaylistNotFoundError

from conftest import make_catalog


@pytest.fixture
def db_env(monkeypatch, tmp_path):
    """Point the CLI at a throwaway SQLite file."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")


class TestResolvePlaylistId:
    """Tests for resolve_playlist_id."""

    def test_url(self):
        assert resolve_playlist_id("https://www.youtube.com/playlist?list=PLabc") == "PLabc"

    def test_bare_id(self):
        assert resolve_playlist_id("PLabc-123_x") == "PLabc-123_x"

    def test_url_without_list(self):
        assert resolve_playlist_id("https://www.youtube.com/watch?v=abc") is None


class TestParser:
    """Tests for the argument parser."""

    def test_fetch_command(self):
        args = create_parser().parse_args(["fetch", "PL1", "--json"])
        assert args.command == "fetch"
        assert args.playlist == "PL1"
        assert args.json is True

    def test_mark_undo(self):
        args = create_parser().parse_args(["mark", "vid", "--undo"])
        assert args.video_id == "vid"
        assert args.undo is True

    def test_no_command_exits(self):
        with pytest.raises(SystemExit):
            main([])


class TestCommands:
    """Tests for command handlers."""

    def test_fetch_prints_catalog(self, capsys, db_env):
        fetcher = Mock()
        fetcher.fetch.return_value = make_catalog("PL1", count=2)

        with patch.object(tracker_commands, "create_catalog_fetcher", return_value=fetcher):
            main(["fetch", "https://x/?list=PL1"])

        out = capsys.readouterr().out
        assert "Test Playlist" in out
        assert "Video PL1-v2" in out
        fetcher.fetch.assert_called_once_with("PL1")

    def test_fetch_json(self, capsys, db_env):
        fetcher = Mock()
        fetcher.fetch.return_value = make_catalog("PL1", count=1)

        with patch.object(tracker_commands, "create_catalog_fetcher", return_value=fetcher):
            main(["fetch", "PL1", "--json"])

        data = json.loads(capsys.readouterr().out)
        assert data["videos"][0]["id"] == "PL1-v1"

    def test_fetch_error_exits(self, capsys, db_env):
        fetcher = Mock()
        fetcher.fetch.side_effect = PlaylistNotFoundError("Playlist not found or is private.")

        with patch.object(tracker_commands, "create_catalog_fetcher", return_value=fetcher):
            with pytest.raises(SystemExit) as exc_info:
                main(["fetch", "PL1"])

        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().out

    def test_fetch_bad_argument_exits(self, db_env):
        with pytest.raises(SystemExit):
            main(["fetch", "https://www.youtube.com/watch?v=abc"])

    def test_mark_then_progress(self, capsys, db_env):
        main(["mark", "PL1-v1"])
        assert "marked completed" in capsys.readouterr().out

        fetcher = Mock()
        fetcher.fetch.return_value = make_catalog("PL1", count=2)
        with patch.object(tracker_commands, "create_catalog_fetcher", return_value=fetcher):
            main(["progress", "PL1"])

        out = capsys.readouterr().out
        assert "50% (1/2 videos)" in out

    def test_history_empty(self, capsys, db_env):
        main(["history"])
        assert "No recent playlists yet" in capsys.readouterr().out
