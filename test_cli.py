"""Tests for the command-line front end and the activity log."""
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

import cli
from activity_log import ActivityLog
from launcher import Launcher, LaunchOutcome, LaunchStatus
from youtube_api import SearchResult, YouTubeAPIError


RESULTS = [
    SearchResult(title="Bohemian Rhapsody - Queen", video_id="fJ9rUzIMcZQ"),
    SearchResult(title="Bohemian Rhapsody (Live Aid)", video_id="abcdefghijk"),
]


@pytest.fixture
def youtube_api():
    api = MagicMock()
    api.search.return_value = list(RESULTS)
    return api


class TestCLI:
    def test_search_lists_results(self, youtube_api, capsys):
        code = cli.CLI(youtube_api, Launcher(platform="linux")).search("Bohemian Rhapsody")

        out = capsys.readouterr().out
        assert code == 0
        assert "1. Bohemian Rhapsody - Queen" in out
        assert "https://music.youtube.com/watch?v=abcdefghijk" in out
        assert "[OK] Found 2 result(s)" in out

    def test_search_error(self, youtube_api, capsys):
        youtube_api.search.side_effect = YouTubeAPIError("HTTP 403: quotaExceeded")

        code = cli.CLI(youtube_api, Launcher(platform="darwin")).search("x")

        assert code == 1
        assert "quotaExceeded" in capsys.readouterr().err

    def test_play_no_results(self, youtube_api, capsys):
        youtube_api.search.return_value = []

        code = cli.CLI(youtube_api, Launcher(platform="darwin")).play("zzzz")

        assert code == 0
        assert "No search results found for: zzzz" in capsys.readouterr().out

    def test_play_dry_run_shows_command(self, youtube_api, capsys):
        code = cli.CLI(youtube_api, Launcher(platform="win32")).play("Bohemian Rhapsody", dry_run=True)

        out = capsys.readouterr().out
        assert code == 0
        assert "'start'" in out
        assert "https://music.youtube.com/watch?v=fJ9rUzIMcZQ" in out

    def test_play_launches(self, youtube_api, capsys):
        launcher = Launcher(platform="darwin")
        outcome = LaunchOutcome(url=RESULTS[0].music_url, platform="darwin", status=LaunchStatus.LAUNCHED)

        with patch.object(launcher, "launch", AsyncMock(return_value=outcome)) as launch:
            code = cli.CLI(youtube_api, launcher).play("Bohemian Rhapsody")

        assert code == 0
        launch.assert_awaited_once_with("https://music.youtube.com/watch?v=fJ9rUzIMcZQ")
        assert "[OK] Playing top result: Bohemian Rhapsody - Queen" in capsys.readouterr().out

    def test_play_unsupported_platform(self, youtube_api, capsys):
        code = cli.CLI(youtube_api, Launcher(platform="linux")).play("Bohemian Rhapsody")

        assert code == 1
        assert "not supported on linux" in capsys.readouterr().out


class TestMain:
    def test_missing_api_key(self, monkeypatch, capsys):
        monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
        with patch("cli.load_dotenv"):
            code = cli.main(["Yesterday"])

        assert code == 1
        assert "YOUTUBE_API_KEY" in capsys.readouterr().err

    def test_search_only_builds_query(self, monkeypatch):
        monkeypatch.setenv("YOUTUBE_API_KEY", "k")
        with patch("cli.load_dotenv"), patch.object(cli.CLI, "search", return_value=0) as search:
            code = cli.main(["Bohemian Rhapsody", "--artist", "Queen", "--search-only"])

        assert code == 0
        search.assert_called_once_with("Bohemian Rhapsody Queen")

    def test_empty_song_is_usage_error(self, monkeypatch):
        monkeypatch.setenv("YOUTUBE_API_KEY", "k")
        with patch("cli.load_dotenv"), pytest.raises(SystemExit) as exc_info:
            cli.main(["  "])
        assert exc_info.value.code == 2


class TestActivityLog:
    def test_bounded(self):
        log = ActivityLog(max_entries=3)
        for i in range(5):
            log.record(f"event {i}")

        assert len(log) == 3
        assert log.messages() == ["event 2", "event 3", "event 4"]

    def test_mirrors_to_logging(self, caplog):
        log = ActivityLog()
        with caplog.at_level(logging.WARNING, logger="activity_log"):
            entry = log.record("launch failed", logging.WARNING)

        assert entry.level == logging.WARNING
        assert "launch failed" in caplog.text
