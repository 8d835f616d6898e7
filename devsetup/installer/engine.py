"""Per-component installation state machine."""

import logging
import shutil
from typing import Callable, Iterable, Tuple, TypeVar

from devsetup.console import print_soft_error, print_step, print_success, print_warning
from devsetup.errors import StrategyError
from devsetup.versions import version_ge

from .models import (
    ComponentSpec,
    InstallContext,
    InstallOutcome,
    InstallStatus,
    ProbeResult,
    Strategy,
)

S = TypeVar("S")
R = TypeVar("R")

# Failures that stay inside one strategy attempt.
RECOVERABLE_ERRORS = (StrategyError, OSError, shutil.Error)

_logging = logging.getLogger(__name__)


def _describe(strategy: object) -> str:
    describe = getattr(strategy, "describe", None)
    return describe() if callable(describe) else type(strategy).__name__


def try_strategies(
    strategies: Iterable[S], attempt: Callable[[S], R]
) -> Tuple[S | None, R | None]:
    """Attempt each strategy once, in order, until one succeeds.

    Returns:
        The winning strategy and its result, or ``(None, None)`` if every
        strategy raised a recoverable error
    """
    for strategy in strategies:
        try:
            result = attempt(strategy)
        except RECOVERABLE_ERRORS as e:
            _logging.info(f"Strategy {_describe(strategy)} failed: {e}")
            continue
        return strategy, result
    return None, None


def is_satisfied(spec: ComponentSpec, found: ProbeResult | None) -> bool:
    if found is None:
        return False
    if spec.required_version is None:
        return True
    return version_ge(found.version, spec.required_version)


def install_component(spec: ComponentSpec, ctx: InstallContext, selected: bool = True) -> InstallOutcome:
    """Drive one component from probe to a terminal state.

    Never raises for soft failures: a component that cannot be installed is
    recorded on the run state once and reported as FAILED.
    """
    if not selected:
        return InstallOutcome(spec.name, spec.display_name, InstallStatus.SKIPPED)

    print_step(f"Checking {spec.display_name}...")
    found = spec.probe(ctx, spec)

    if found is not None and is_satisfied(spec, found):
        print_success(f"{spec.display_name} found ({found.version or 'installed'})")
        _logging.info(f"{spec.display_name} already satisfied: {found.executable} {found.version or ''}".rstrip())
        if spec.on_ready:
            spec.on_ready(ctx, found)
        return InstallOutcome(
            spec.name, spec.display_name, InstallStatus.ALREADY_SATISFIED, found.version
        )

    if found is not None:
        print_warning(
            f"{spec.display_name} {found.version or '(unknown version)'} is too old "
            f"(need {spec.required_version}+), installing..."
        )
    else:
        print_warning(f"{spec.display_name} not found, installing...")

    def attempt(strategy: Strategy) -> ProbeResult:
        _logging.info(f"Trying {_describe(strategy)} for {spec.display_name}")
        strategy.run(ctx, spec)
        result = spec.probe(ctx, spec)
        if result is None:
            raise StrategyError(f"{spec.display_name} not reachable after {_describe(strategy)}")
        return result

    strategy, result = try_strategies(spec.strategies_for(ctx.host), attempt)

    if strategy is None or result is None:
        message = f"{spec.display_name} installation failed"
        print_soft_error(message)
        ctx.state.record_failure(message)
        return InstallOutcome(spec.name, spec.display_name, InstallStatus.FAILED)

    if spec.on_ready:
        spec.on_ready(ctx, result)
    print_success(f"{spec.display_name} installed ({result.version or 'unknown version'})")
    _logging.info(f"{spec.display_name} installed via {_describe(strategy)}")
    return InstallOutcome(
        spec.name,
        spec.display_name,
        InstallStatus.INSTALLED,
        result.version,
        _describe(strategy),
    )


__all__ = ["try_strategies", "install_component", "is_satisfied", "RECOVERABLE_ERRORS"]
