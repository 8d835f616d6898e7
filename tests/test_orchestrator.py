"""Tests for the top-level installation run."""

import logging
import re
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from devsetup.config import Settings, VersionPin
from devsetup.errors import NoDownloaderError, UnsupportedPlatformError
from devsetup.installer import COMPONENT_NAMES, InstallStatus, build_components
from devsetup.orchestrator import install_all_components, resolve_selection, run_installation
from devsetup.system import Arch, HostProfile, OsFamily

from tests.conftest import FakeStrategy, FakeTool, fake_component

HOST = HostProfile(OsFamily.LINUX, Arch.AMD64)


@pytest.fixture(autouse=True)
def detach_run_log():
    """Close handlers that run_installation attaches to the devsetup logger."""
    yield
    logger = logging.getLogger("devsetup")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    work_dir = temp_dir / "work"
    work_dir.mkdir()
    return Settings(retry_delay=0, log_dir=temp_dir / "logs", work_dir=work_dir)


def read_log(settings: Settings) -> str:
    (log_file,) = list(settings.log_dir.glob("install_*.log"))
    return log_file.read_text()


class TestResolveSelection:
    def test_nothing_requested_selects_all(self):
        selection = resolve_selection({name: False for name in COMPONENT_NAMES})
        assert all(selection.values())
        assert list(selection) == list(COMPONENT_NAMES)

    def test_subset(self):
        selection = resolve_selection({"go": True, "ffmpeg": True})
        assert [name for name, wanted in selection.items() if wanted] == ["go", "ffmpeg"]

    def test_all_overrides_subset(self):
        assert all(resolve_selection({"go": True}, install_all=True).values())


class TestComponentCatalog:
    def test_installation_order(self):
        assert [c.name for c in build_components()] == [
            "deno", "python", "pip", "go", "ffmpeg", "ytdlp", "ntgcalls"
        ]
        assert tuple(c.name for c in build_components()) == COMPONENT_NAMES

    def test_versions_come_from_settings(self):
        settings = Settings()
        settings.versions["go"] = VersionPin(required="1.22", target="1.22.4")
        go = next(c for c in build_components(settings) if c.name == "go")
        assert go.required_version == "1.22"
        assert go.target_version == "1.22.4"

    def test_windows_has_no_python_strategy(self):
        python = next(c for c in build_components() if c.name == "python")
        assert python.strategies_for(HostProfile(OsFamily.WINDOWS, Arch.AMD64)) == ()


def six_components(failing_index: int):
    tools = [FakeTool() for _ in range(6)]
    strategies = [
        FakeStrategy(f"strategy-{i}", tool, succeeds=i != failing_index) for i, tool in enumerate(tools)
    ]
    names = ["alpha", "beta", "gamma", "delta", "epsilon", "zeta"]
    return [
        fake_component(name, tool, (strategy,))
        for name, tool, strategy in zip(names, tools, strategies)
    ], strategies


class TestInstallAllComponents:
    def test_failure_is_isolated(self, make_context):
        components, strategies = six_components(failing_index=1)
        ctx = make_context()
        with patch("devsetup.orchestrator.build_components", return_value=components):
            outcomes = install_all_components(ctx, {c.name: True for c in components})

        assert [o.status for o in outcomes] == [
            InstallStatus.INSTALLED,
            InstallStatus.FAILED,
            InstallStatus.INSTALLED,
            InstallStatus.INSTALLED,
            InstallStatus.INSTALLED,
            InstallStatus.INSTALLED,
        ]
        assert all(len(s.calls) == 1 for s in strategies)
        assert ctx.state.warning_count == 1
        assert ctx.state.exit_code == 1

    def test_unselected_are_skipped_in_order(self, make_context):
        components, strategies = six_components(failing_index=-1)
        with patch("devsetup.orchestrator.build_components", return_value=components):
            outcomes = install_all_components(make_context(), {"gamma": True})
        assert [o.status for o in outcomes].count(InstallStatus.SKIPPED) == 5
        assert outcomes[2].status == InstallStatus.INSTALLED
        assert [len(s.calls) for s in strategies] == [0, 0, 1, 0, 0, 0]


class TestRunInstallation:
    def test_partial_failure_exit_code(self, settings, home_dir, capsys):
        components, strategies = six_components(failing_index=1)
        with patch("devsetup.orchestrator.detect_host", return_value=HOST), patch(
            "devsetup.orchestrator.select_downloader", return_value=MagicMock()
        ), patch("devsetup.orchestrator.build_components", return_value=components):
            code = run_installation({c.name: True for c in components}, settings=settings, home=home_dir)

        assert code == 1
        assert all(len(s.calls) == 1 for s in strategies)
        out = capsys.readouterr().out
        assert "INSTALLATION SUMMARY" in out
        assert "Installation completed with 1 warning(s)" in out
        assert "Beta installation failed" in out
        assert "ERROR: Beta installation failed" in read_log(settings)

    def test_success(self, settings, home_dir, capsys):
        components, _ = six_components(failing_index=-1)
        with patch("devsetup.orchestrator.detect_host", return_value=HOST), patch(
            "devsetup.orchestrator.select_downloader", return_value=MagicMock()
        ), patch("devsetup.orchestrator.build_components", return_value=components):
            code = run_installation({c.name: True for c in components}, settings=settings, home=home_dir)

        assert code == 0
        out = capsys.readouterr().out
        assert "Installation completed successfully!" in out
        assert f"Detailed log saved to: {settings.log_dir}" in out
        assert "Installation completed with 0 warnings" in read_log(settings)

    def test_quiet_skips_summary(self, settings, home_dir, capsys):
        components, _ = six_components(failing_index=-1)
        with patch("devsetup.orchestrator.detect_host", return_value=HOST), patch(
            "devsetup.orchestrator.select_downloader", return_value=MagicMock()
        ), patch("devsetup.orchestrator.build_components", return_value=components):
            code = run_installation(
                {c.name: True for c in components}, settings=settings, quiet=True, home=home_dir
            )

        assert code == 0
        out = capsys.readouterr().out
        assert "INSTALLATION SUMMARY" not in out
        assert "Checking" not in out

    def test_unsupported_platform_is_fatal(self, settings, home_dir, capsys):
        components, strategies = six_components(failing_index=-1)
        error = UnsupportedPlatformError("Unsupported OS: SunOS", "use Linux/macOS/Windows")
        with patch("devsetup.orchestrator.detect_host", side_effect=error), patch(
            "devsetup.orchestrator.select_downloader"
        ) as mock_select, patch("devsetup.orchestrator.build_components", return_value=components):
            code = run_installation({c.name: True for c in components}, settings=settings, home=home_dir)

        assert code == 1
        mock_select.assert_not_called()
        assert all(s.calls == [] for s in strategies)
        err = capsys.readouterr().err
        assert "CRITICAL: Unsupported OS: SunOS" in err
        assert "Please use Linux/macOS/Windows manually." in err
        assert re.search(
            r"^\[\d{4}-\d\d-\d\d \d\d:\d\d:\d\d\] CRITICAL: Unsupported OS: SunOS$",
            read_log(settings),
            re.MULTILINE,
        )

    def test_no_downloader_is_fatal(self, settings, home_dir, capsys):
        components, strategies = six_components(failing_index=-1)
        error = NoDownloaderError("Could not install curl/wget", "install curl or wget")
        with patch("devsetup.orchestrator.detect_host", return_value=HOST), patch(
            "devsetup.orchestrator.select_downloader", side_effect=error
        ), patch("devsetup.orchestrator.build_components", return_value=components):
            code = run_installation({c.name: True for c in components}, settings=settings, home=home_dir)

        assert code == 1
        assert all(s.calls == [] for s in strategies)
        assert "Please install curl or wget manually." in capsys.readouterr().err
        assert "CRITICAL: Could not install curl/wget" in read_log(settings)

    def test_rerun_leaves_profiles_unchanged(self, settings, home_dir, monkeypatch):
        (home_dir / ".bashrc").write_text("# bash\n")
        monkeypatch.setenv("PATH", "/usr/bin")
        tool_bin = home_dir / ".tool" / "bin"

        class PathStrategy:
            def describe(self):
                return "path"

            def run(self, ctx, spec):
                ctx.add_to_path(tool_bin)

        # The tool is never found, so both runs go through installation.
        components = [fake_component("tool", FakeTool(), (PathStrategy(),))]

        def run_once():
            with patch("devsetup.orchestrator.detect_host", return_value=HOST), patch(
                "devsetup.orchestrator.select_downloader", return_value=MagicMock()
            ), patch("devsetup.orchestrator.build_components", return_value=components):
                run_installation({"tool": True}, settings=settings, skip_summary=True, home=home_dir)
            return (home_dir / ".bashrc").read_bytes()

        first = run_once()
        second = run_once()
        assert first == second
        assert first.decode().count(str(tool_bin)) == 1
