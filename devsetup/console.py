"""Terminal output helpers.

All user-facing messages go through these functions so that quiet mode is
honored in one place.
"""

import click

_quiet_enabled = False


def set_quiet(enabled: bool):
    """Enable or disable quiet mode globally."""
    global _quiet_enabled
    _quiet_enabled = enabled


def print_step(message: str) -> None:
    if _quiet_enabled:
        return
    click.secho(f"\n▶ {message}", fg="blue")


def print_success(message: str) -> None:
    if _quiet_enabled:
        click.echo(f"✓ {message}")
        return
    click.secho(f"✓ {message}", fg="green")


def print_warning(message: str) -> None:
    if _quiet_enabled:
        click.echo(f"⚠ {message}")
        return
    click.secho(f"⚠ {message}", fg="yellow")


def print_info(message: str) -> None:
    if _quiet_enabled:
        return
    click.secho(f"ℹ {message}", fg="cyan")


def print_soft_error(message: str) -> None:
    click.secho(f"✗ {message}", fg="red")


def print_critical(headline: str, remediation: str) -> None:
    click.secho(f"\n✗ {headline}", fg="red", bold=True, err=True)
    click.secho(f"{remediation}\n", fg="red", bold=True, err=True)


__all__ = [
    "set_quiet",
    "print_step",
    "print_success",
    "print_warning",
    "print_info",
    "print_soft_error",
    "print_critical",
]
