"""List command implementation."""

import click

from devstrap import DevstrapError, setup_logging
from devstrap.commands.utils import build_context, fail, platform_option
from devstrap.installer import ToolRegistry, render_plan


@click.command(name="list")
@platform_option
@click.option(
    "--verbose", "-v", is_flag=True, help="Show the commands each tool runs on this platform"
)
@click.pass_context
def list_tools(ctx, platform_name: str | None, verbose: bool):
    """List the tool catalog in installation order."""
    setup_logging(ctx.obj.get("debug", False))

    try:
        run_ctx = build_context(platform_name, interactive=False)
    except DevstrapError as e:
        fail(e)
        return

    registry = ToolRegistry(run_ctx)
    tools = registry.tools()

    if verbose:
        click.echo(render_plan(tools, run_ctx.platform))
        return

    for tool in tools:
        support = "" if tool.supports(run_ctx.platform) else " (unsupported)"
        optional = " (optional)" if tool.optional else ""
        click.echo(f"{tool.name}: [{tool.stage.label}] {tool.description}{optional}{support}")
