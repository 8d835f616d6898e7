"""Command-line entry point for devsetup."""

import sys
from pathlib import Path

import click

from devsetup.config import ConfigError, load_settings
from devsetup.errors import format_error
from devsetup.orchestrator import resolve_selection, run_installation
from devsetup.paths import get_config_path

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

EPILOG = """\b
Examples:
  devsetup                      # Install everything
  devsetup --deno               # Install only Deno
  devsetup --ntgcalls           # Install only ntgcalls (useful for Docker)
  devsetup --go --ffmpeg        # Install only Go and FFmpeg
  devsetup --python --pip       # Install only Python and pip
  devsetup --all --quiet        # Install everything in quiet mode
"""


@click.command(context_settings=CONTEXT_SETTINGS, epilog=EPILOG)
@click.option("--all", "-a", "install_all", is_flag=True, help="Install all components (default)")
@click.option("--go", "-g", is_flag=True, help="Install Go only")
@click.option("--deno", "-d", is_flag=True, help="Install Deno only")
@click.option("--python", "-p", is_flag=True, help="Install Python only")
@click.option("--pip", is_flag=True, help="Install pip only")
@click.option("--ffmpeg", "-f", is_flag=True, help="Install FFmpeg only")
@click.option("--yt-dlp", "--ytdlp", "-y", "ytdlp", is_flag=True, help="Install yt-dlp only")
@click.option("--ntgcalls", "-n", is_flag=True, help="Install ntgcalls only")
@click.option("--quiet", "-q", is_flag=True, help="Quiet mode (minimal output)")
@click.option("--skip-summary", is_flag=True, help="Skip final summary")
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: ~/.config/devsetup/config.yaml)",
)
def cli(
    install_all: bool,
    go: bool,
    deno: bool,
    python: bool,
    pip: bool,
    ffmpeg: bool,
    ytdlp: bool,
    ntgcalls: bool,
    quiet: bool,
    skip_summary: bool,
    debug: bool,
    config_path: Path | None,
):
    """Install development tools: Deno, Python, pip, Go, FFmpeg, yt-dlp and ntgcalls."""
    try:
        settings = load_settings(config_path or get_config_path())
    except ConfigError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)

    requested = {
        "deno": deno,
        "python": python,
        "pip": pip,
        "go": go,
        "ffmpeg": ffmpeg,
        "ytdlp": ytdlp,
        "ntgcalls": ntgcalls,
    }
    selection = resolve_selection(requested, install_all=install_all)
    sys.exit(
        run_installation(
            selection,
            settings=settings,
            quiet=quiet,
            skip_summary=skip_summary,
            debug=debug,
        )
    )


def main():
    cli()


if __name__ == "__main__":
    main()
