"""End-of-run summary table."""

from pathlib import Path

import click

from .installer.models import InstallOutcome, InstallStatus

_LABELS = {
    InstallStatus.ALREADY_SATISFIED: ("Present", "green"),
    InstallStatus.INSTALLED: ("Installed", "green"),
    InstallStatus.SKIPPED: ("Skipped", "yellow"),
    InstallStatus.FAILED: ("Failed", "red"),
}

RULE = "-" * 50


def render_summary(outcomes: list[InstallOutcome], log_path: Path) -> str:
    lines = [
        click.style("=" * 50, fg="blue", bold=True),
        click.style("             INSTALLATION SUMMARY".ljust(50), fg="blue", bold=True),
        click.style("=" * 50, fg="blue", bold=True),
        click.style(f"{'Component':<12} | {'Status':<12} | {'Version':<15}", fg="cyan", bold=True),
        RULE,
    ]
    for outcome in outcomes:
        label, color = _LABELS[outcome.status]
        version = outcome.detected_version or "-"
        lines.append(
            f"{outcome.display_name:<12} | {click.style(f'{label:<12}', fg=color)} | {version:<15}"
        )
    lines.append(RULE)
    lines.append("")
    lines.append(click.style(f"Detailed log saved to: {log_path}", fg="cyan"))
    return "\n".join(lines)


__all__ = ["render_summary"]
