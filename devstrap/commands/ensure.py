"""Ensure command implementation."""

import click

from devstrap import DevstrapError, setup_logging
from devstrap.commands.utils import (
    build_context,
    dry_run_option,
    fail,
    platform_option,
    yes_option,
)
from devstrap.installer import EnsureResult, ToolRegistry


@click.command()
@click.argument("tool_names", nargs=-1, required=True, metavar="TOOL...")
@platform_option
@yes_option
@dry_run_option
@click.pass_context
def ensure(ctx, tool_names: tuple[str, ...], platform_name: str | None, yes: bool, dry_run: bool):
    """Install specific tools if they are missing."""
    setup_logging(ctx.obj.get("debug", False))

    try:
        run_ctx = build_context(platform_name, assume_yes=yes, dry_run=dry_run)
        registry = ToolRegistry(run_ctx)
        tools = [registry.get(name) for name in tool_names]
        results = registry.ensure_all(tools)
    except DevstrapError as e:
        fail(e)
        return

    installed = [n for n, r in results.items() if r == EnsureResult.INSTALLED]
    unsupported = [n for n, r in results.items() if r == EnsureResult.UNSUPPORTED]

    click.echo("")
    if installed:
        click.echo(f"✅ Installed: {', '.join(installed)}")
    if unsupported:
        click.echo(f"⚪ Unsupported on {run_ctx.platform.display_name}: {', '.join(unsupported)}")
    if not installed and not unsupported:
        click.echo("Nothing to do: all requested tools are already installed.")
    for message in run_ctx.summary.warnings:
        click.echo(f"Note: {message}")
