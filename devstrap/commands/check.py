"""Check command implementation."""

import click

from devstrap import DevstrapError, setup_logging
from devstrap.commands.utils import build_context, fail, platform_option
from devstrap.installer import ToolRegistry
from devstrap.tui import display_tool_table


@click.command()
@platform_option
@click.option("--missing", "-m", is_flag=True, help="Show only tools that are not installed")
@click.pass_context
def check(ctx, platform_name: str | None, missing: bool):
    """Show which tools are already installed."""
    setup_logging(ctx.obj.get("debug", False))

    try:
        run_ctx = build_context(platform_name, interactive=False)
    except DevstrapError as e:
        fail(e)
        return

    statuses = ToolRegistry(run_ctx).scan()

    header = f"Tool status ({run_ctx.platform.display_name})"
    click.secho(header, bold=True)
    click.secho("-" * len(header), dim=True)
    display_tool_table(statuses, show_all=not missing)
