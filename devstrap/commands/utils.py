"""Shared helpers for commands."""

import sys

import click

from devstrap import console
from devstrap.config import ConfigError, Settings, load_config
from devstrap.context import ProvisionContext
from devstrap.errors import DevstrapError, PlatformError, UnknownToolError, format_suggestion
from devstrap.platform import MENU_CHOICES, resolve_platform

# Exit codes
EXIT_SUCCESS = 0
EXIT_PROVISION_FAILED = 1
EXIT_PLATFORM_ERROR = 3
EXIT_CONFIG_ERROR = 4

platform_option = click.option(
    "--platform",
    "platform_name",
    type=click.Choice([p.value for p in MENU_CHOICES], case_sensitive=False),
    help="Skip detection and use this platform",
)
yes_option = click.option(
    "--yes", "-y", is_flag=True, help="Accept the detected platform and answer yes to prompts"
)
dry_run_option = click.option(
    "--dry-run", is_flag=True, help="Print commands instead of running them"
)


def exit_code_for(error: DevstrapError) -> int:
    if isinstance(error, ConfigError):
        return EXIT_CONFIG_ERROR
    if isinstance(error, PlatformError):
        return EXIT_PLATFORM_ERROR
    return EXIT_PROVISION_FAILED


def fail(error: DevstrapError) -> None:
    """Print a single error line and exit with the matching code."""
    message = str(error)
    if isinstance(error, UnknownToolError):
        message = format_suggestion(message, "run 'devstrap list' to see available tools")
    console.error(message)
    sys.exit(exit_code_for(error))


def build_context(
    platform_name: str | None,
    assume_yes: bool = False,
    dry_run: bool = False,
    interactive: bool = True,
    settings: Settings | None = None,
) -> ProvisionContext:
    """Resolve the platform and build the run context.

    Raises:
        ConfigError: If the user config is invalid
        PlatformError: If the platform cannot be determined
    """
    settings = settings or load_config()
    platform = resolve_platform(platform_name, assume_yes=assume_yes, interactive=interactive)
    return ProvisionContext.from_environment(
        platform, settings=settings, dry_run=dry_run, assume_yes=assume_yes
    )


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_PROVISION_FAILED",
    "EXIT_PLATFORM_ERROR",
    "EXIT_CONFIG_ERROR",
    "platform_option",
    "yes_option",
    "dry_run_option",
    "exit_code_for",
    "fail",
    "build_context",
]
