"""Top-level installation run."""

import logging
from pathlib import Path
from typing import Mapping

import click

from .config import Settings
from .console import (
    print_critical,
    print_info,
    print_step,
    print_success,
    print_warning,
    set_quiet,
)
from .download import select_downloader
from .environment import reload_hint
from .errors import FatalError, format_critical
from .installer import COMPONENT_NAMES, InstallContext, InstallOutcome, build_components, install_component
from .logs import setup_logging
from .packages import PackageInstaller
from .paths import get_log_path
from .state import EXIT_FAILURE, RunState
from .summary import render_summary
from .system import detect_host

_logging = logging.getLogger(__name__)


def resolve_selection(requested: Mapping[str, bool], install_all: bool = False) -> dict[str, bool]:
    """Turn per-component flags into the full selection mapping.

    Nothing requested (or an explicit install-all) selects every component.
    """
    if install_all or not any(requested.values()):
        return {name: True for name in COMPONENT_NAMES}
    return {name: bool(requested.get(name, False)) for name in COMPONENT_NAMES}


def install_all_components(
    ctx: InstallContext, selection: Mapping[str, bool]
) -> list[InstallOutcome]:
    """Run every installer in order; one failure never stops the others."""
    return [
        install_component(spec, ctx, selection.get(spec.name, False))
        for spec in build_components(ctx.settings)
    ]


def _finish(state: RunState, outcomes: list[InstallOutcome], home: Path, settings: Settings,
            quiet: bool, skip_summary: bool) -> int:
    profile = reload_hint(state, home, settings.profiles)
    if profile is not None:
        print_info(f"PATH was updated; run 'source {profile}' or open a new shell")

    if not (quiet or skip_summary):
        click.echo("")
        click.echo(render_summary(outcomes, state.log_path))

    _logging.info(f"Installation completed with {state.warning_count} warnings")

    if state.status():
        if not quiet:
            click.echo("")
            print_success("Installation completed successfully!")
    else:
        click.echo("")
        print_warning(f"Installation completed with {state.warning_count} warning(s)")
        print_warning("Some components failed. Check messages above.")
        if not quiet:
            print_warning(f"Review log file: {state.log_path}")

    return state.exit_code


def run_installation(
    selection: Mapping[str, bool],
    settings: Settings | None = None,
    quiet: bool = False,
    skip_summary: bool = False,
    debug: bool = False,
    home: Path | None = None,
) -> int:
    """Provision the selected components and return the process exit code.

    Fatal preconditions (unknown platform, no downloader) end the run
    immediately with a non-zero code; component failures are counted and
    reported after every component has been attempted.
    """
    settings = settings or Settings()
    home = home or Path.home()
    state = RunState(log_path=get_log_path(settings.log_dir))
    setup_logging(state.log_path, debug)
    set_quiet(quiet)

    selected = [name for name, wanted in selection.items() if wanted]
    _logging.info(f"Installation started for: {', '.join(selected) or 'nothing'}")

    try:
        print_step("Detecting system...")
        host = detect_host()
        print_success(f"System: {host}")

        print_step("Starting installation...")
        packages = PackageInstaller(host, state)
        downloader = select_downloader(
            packages, attempts=settings.download_attempts, retry_delay=settings.retry_delay
        )
    except FatalError as e:
        _logging.critical(e.message)
        print_critical(*format_critical(e))
        return EXIT_FAILURE

    ctx = InstallContext(
        host=host,
        state=state,
        settings=settings,
        downloader=downloader,
        packages=packages,
        home=home,
        work_dir=settings.work_dir or Path.cwd(),
    )
    outcomes = install_all_components(ctx, selection)
    return _finish(state, outcomes, home, settings, quiet, skip_summary)


__all__ = ["resolve_selection", "install_all_components", "run_installation"]
