"""CLI handling for alistclip.

This module provides the command-line interface for alistclip, handling
argument parsing via click, logging configuration, and dispatching to
upload or download mode. Any failure exits with status 1 after a message
on stderr.

Usage:
    alistclip --upload [--env-file PATH] [--verbose]
    alistclip --download [--env-file PATH] [--verbose]
    alistclip-upload [--env-file PATH] [--verbose]
    alistclip-download [--env-file PATH] [--verbose]
"""

import asyncio
import sys

import click

from alistclip.main_logging import configure_logging
from alistclip.main_options import ModeOption

_env_file_option = click.option(
    "--env-file",
    default=".env",
    show_default=True,
    type=click.Path(dir_okay=False),
    help="Dotenv file with ALIST_* settings (loaded if present)",
)
_verbose_option = click.option(
    "--verbose",
    is_flag=True,
    help="Enable DEBUG-level logging",
)


@click.command()
@click.option(
    "--upload",
    is_flag=True,
    cls=ModeOption,
    conflicts_with=["download"],
    help="Upload the clipboard to Alist",
)
@click.option(
    "--download",
    is_flag=True,
    cls=ModeOption,
    conflicts_with=["upload"],
    help="Download the latest Alist clipboard entry",
)
@_env_file_option
@_verbose_option
def main(upload: bool, download: bool, env_file: str, verbose: bool) -> None:
    """Synchronize the clipboard through an Alist server directory."""
    if not upload and not download:
        raise click.UsageError("Either --upload or --download must be specified")

    configure_logging(verbose)

    _run_mode(upload, env_file)


@click.command()
@_env_file_option
@_verbose_option
def upload_main(env_file: str, verbose: bool) -> None:
    """Upload the clipboard to the Alist clipboard directory."""
    configure_logging(verbose)
    _run_mode(True, env_file)


@click.command()
@_env_file_option
@_verbose_option
def download_main(env_file: str, verbose: bool) -> None:
    """Set the clipboard from the latest file in the Alist clipboard directory."""
    configure_logging(verbose)
    _run_mode(False, env_file)


def _run_mode(upload: bool, env_file: str) -> None:
    """Run the appropriate mode (upload or download).

    Args:
        upload: True for upload mode, False for download mode.
        env_file: Path of the dotenv file to load.
    """
    from alistclip.config import AlistConfig
    from alistclip.download import run_download
    from alistclip.errors import ClipboardError, SyncError
    from alistclip.upload import run_upload

    try:
        config = AlistConfig.from_env(env_file)
        if upload:
            remote_path = asyncio.run(run_upload(config))
            click.echo(f"Successfully uploaded clipboard content to {remote_path}", err=True)
        else:
            asyncio.run(run_download(config))
            click.echo("Successfully set clipboard content from Alist", err=True)
    except (SyncError, ClipboardError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
