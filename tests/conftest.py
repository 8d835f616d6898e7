"""Pytest fixtures and utilities for devsetup tests."""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest

from devsetup.config import Settings
from devsetup.console import set_quiet
from devsetup.errors import StrategyError
from devsetup.installer.models import ComponentSpec, InstallContext, ProbeResult
from devsetup.logs import setup_logging
from devsetup.state import RunState
from devsetup.system import Arch, HostProfile, OsFamily


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_path(monkeypatch) -> None:
    """Restore PATH after tests that let installers mutate it."""
    monkeypatch.setenv("PATH", os.environ.get("PATH", ""))


@pytest.fixture(autouse=True)
def reset_quiet() -> Generator[None, None, None]:
    yield
    set_quiet(False)


@pytest.fixture
def run_state(temp_dir: Path) -> RunState:
    return RunState(log_path=temp_dir / "install.log")


@pytest.fixture
def run_log(run_state: RunState) -> Generator[Path, None, None]:
    """Attach the run log file for the duration of a test."""
    handler = setup_logging(run_state.log_path)
    yield run_state.log_path
    logger = logging.getLogger("devsetup")
    logger.removeHandler(handler)
    handler.close()


@pytest.fixture
def linux_host() -> HostProfile:
    return HostProfile(OsFamily.LINUX, Arch.AMD64)


@pytest.fixture
def home_dir(temp_dir: Path) -> Path:
    home = temp_dir / "home"
    home.mkdir()
    return home


@pytest.fixture
def make_context(run_state: RunState, linux_host: HostProfile, home_dir: Path, temp_dir: Path):
    """Factory for an InstallContext wired to mock collaborators."""

    def _create(host: HostProfile | None = None, **overrides) -> InstallContext:
        work_dir = temp_dir / "work"
        work_dir.mkdir(exist_ok=True)
        values = dict(
            host=host or linux_host,
            state=run_state,
            settings=Settings(retry_delay=0),
            downloader=MagicMock(name="downloader"),
            packages=MagicMock(name="packages"),
            home=home_dir,
            work_dir=work_dir,
        )
        values.update(overrides)
        return InstallContext(**values)

    return _create


@dataclass
class FakeTool:
    """A tool whose presence is toggled by FakeStrategy runs."""
    version: str | None = None
    probes: int = 0

    def probe(self, ctx: InstallContext, spec: ComponentSpec) -> ProbeResult | None:
        self.probes += 1
        if self.version is None:
            return None
        return ProbeResult(spec.name, self.version)


@dataclass(frozen=True)
class FakeStrategy:
    label: str
    tool: FakeTool
    succeeds: bool = True
    installs_version: str = "1.0.0"
    calls: list = field(default_factory=list, compare=False)

    def describe(self) -> str:
        return self.label

    def run(self, ctx: InstallContext, spec: ComponentSpec) -> None:
        self.calls.append(spec.name)
        if not self.succeeds:
            raise StrategyError(f"{self.label} failed")
        self.tool.version = self.installs_version


def fake_component(
    name: str,
    tool: FakeTool,
    strategies: tuple,
    required_version: str | None = None,
) -> ComponentSpec:
    return ComponentSpec(
        name=name,
        display_name=name.capitalize(),
        probe=tool.probe,
        strategies={family: strategies for family in OsFamily},
        required_version=required_version,
    )
