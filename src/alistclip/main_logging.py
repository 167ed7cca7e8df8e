"""Logging configuration for the alistclip CLI."""
import logging
import sys


def configure_logging(verbose: bool) -> None:
    """Send progress messages to stderr.

    Args:
        verbose: If True, set DEBUG level; otherwise INFO level.

    Errors and progress always go to stderr so stdout stays clean.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
