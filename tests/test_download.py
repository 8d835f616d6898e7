"""Tests for the download client."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from devsetup.download import CURL, WGET, Downloader, select_downloader
from devsetup.errors import NoDownloaderError


class TestFetch:
    """Tests for Downloader.fetch retry behavior."""

    def test_always_failing_downloader_is_invoked_three_times(self, temp_dir):
        downloader = Downloader(CURL)
        with patch("devsetup.download.run_command", return_value=("", 22)) as mock_run, patch(
            "devsetup.download.time.sleep"
        ) as mock_sleep:
            result = downloader.fetch("https://example.com/tool.tar.gz", temp_dir / "tool.tar.gz")

        assert result is False
        assert mock_run.call_count == 3
        # No sleep after the final attempt
        assert mock_sleep.call_count == 2
        mock_sleep.assert_called_with(2.0)

    def test_success_after_retry(self, temp_dir):
        downloader = Downloader(CURL)
        with patch(
            "devsetup.download.run_command", side_effect=[("", 6), ("", 0)]
        ) as mock_run, patch("devsetup.download.time.sleep") as mock_sleep:
            assert downloader.fetch("https://example.com/a", temp_dir / "a") is True

        assert mock_run.call_count == 2
        assert mock_sleep.call_count == 1

    def test_first_try_success_does_not_sleep(self, temp_dir):
        downloader = Downloader(WGET)
        with patch("devsetup.download.run_command", return_value=("", 0)), patch(
            "devsetup.download.time.sleep"
        ) as mock_sleep:
            assert downloader.fetch("https://example.com/a", temp_dir / "a") is True
        mock_sleep.assert_not_called()

    def test_configured_attempts(self, temp_dir):
        downloader = Downloader(CURL, attempts=5, retry_delay=0.5)
        with patch("devsetup.download.run_command", return_value=("", 1)) as mock_run, patch(
            "devsetup.download.time.sleep"
        ) as mock_sleep:
            assert downloader.fetch("https://example.com/a", temp_dir / "a") is False
        assert mock_run.call_count == 5
        mock_sleep.assert_called_with(0.5)


class TestBackendCommands:
    def test_curl_command(self):
        command = CURL.command_for("https://example.com/x y", Path("/tmp/out file"))
        assert command.startswith("curl -fsSL -o ")
        assert "'/tmp/out file'" in command
        assert "'https://example.com/x y'" in command

    def test_wget_command(self):
        command = WGET.command_for("https://example.com/x", Path("/tmp/out"))
        assert command == "wget -q -O /tmp/out https://example.com/x"


class TestSelectDownloader:
    """Tests for select_downloader."""

    def test_prefers_curl(self):
        packages = MagicMock()
        with patch("devsetup.download.command_exists", return_value=True):
            downloader = select_downloader(packages)
        assert downloader.backend is CURL
        packages.install.assert_not_called()

    def test_falls_back_to_wget(self):
        packages = MagicMock()
        with patch("devsetup.download.command_exists", side_effect=lambda name: name == "wget"):
            downloader = select_downloader(packages, attempts=2, retry_delay=0)
        assert downloader.backend is WGET
        assert downloader.attempts == 2

    def test_installs_curl_when_missing(self):
        present: set[str] = set()
        packages = MagicMock()

        def install(name, *args, **kwargs):
            present.add(name)
            return True

        packages.install.side_effect = install
        with patch("devsetup.download.command_exists", side_effect=lambda name: name in present):
            downloader = select_downloader(packages)

        packages.install.assert_called_once_with("curl")
        assert downloader.backend is CURL

    def test_no_downloader_is_fatal(self):
        packages = MagicMock()
        packages.install.return_value = False
        with patch("devsetup.download.command_exists", return_value=False):
            with pytest.raises(NoDownloaderError) as exc_info:
                select_downloader(packages)
        assert exc_info.value.remediation == "install curl or wget"
