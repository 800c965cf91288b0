"""Operator-facing output and logging setup.

Progress lines go to stdout with a colored severity prefix. Diagnostic
logging goes through the standard logging module and is only shown with
--debug.
"""

import logging
import sys

import click

LOG_FORMAT = "[DEBUG] %(name)s: %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Configure the devstrap logger hierarchy.

    Args:
        debug: If True, emit DEBUG records to stderr; otherwise only warnings
    """
    logger = logging.getLogger("devstrap")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)

    if not any(getattr(h, "_devstrap", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._devstrap = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


def info(message: str) -> None:
    click.echo(f"{click.style('[INFO]', fg='green')} {message}")


def warning(message: str) -> None:
    click.echo(f"{click.style('[WARNING]', fg='yellow')} {message}")


def error(message: str) -> None:
    click.echo(f"{click.style('[ERROR]', fg='red')} {message}", err=True)


def question(message: str) -> str:
    """Return a prompt label with the question prefix, for click.prompt/confirm."""
    return f"{click.style('[?]', fg='blue')} {message}"


def blank() -> None:
    click.echo("")


__all__ = [
    "setup_logging",
    "info",
    "warning",
    "error",
    "question",
    "blank",
]
