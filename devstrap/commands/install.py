"""Install command implementation."""

import logging
import sys

import click

from devstrap import DevstrapError, setup_logging
from devstrap.commands.utils import (
    build_context,
    dry_run_option,
    fail,
    platform_option,
    yes_option,
)
from devstrap.installer import Stage, ToolRegistry
from devstrap.orchestrator import ProvisionOptions, provision
from devstrap.tui import select_tools_interactive

_logging = logging.getLogger(__name__)

# Stages offered by --select; bootstrap and shell tools are always ensured
SELECTABLE_STAGES = {
    Stage.CORE,
    Stage.DEVELOPER,
    Stage.VERSION_MANAGERS,
    Stage.CREDENTIALS,
    Stage.SHELL_ENHANCEMENTS,
}


@click.command()
@platform_option
@yes_option
@dry_run_option
@click.option("--skip", "skip", multiple=True, metavar="TOOL", help="Do not install TOOL (repeatable)")
@click.option("--no-optional", is_flag=True, help="Skip optional tools (password managers)")
@click.option("--no-update", is_flag=True, help="Do not update system packages first")
@click.option("--no-shell", is_flag=True, help="Do not install or switch the default shell")
@click.option("--no-dotfiles", is_flag=True, help="Do not clone and stow dotfiles")
@click.option("--select", "select", is_flag=True, help="Pick tools interactively before installing")
@click.pass_context
def install(
    ctx,
    platform_name: str | None,
    yes: bool,
    dry_run: bool,
    skip: tuple[str, ...],
    no_optional: bool,
    no_update: bool,
    no_shell: bool,
    no_dotfiles: bool,
    select: bool,
):
    """Provision this machine: tools, default shell and dotfiles."""
    debug = ctx.obj.get("debug", False)
    setup_logging(debug)

    try:
        run_ctx = build_context(platform_name, assume_yes=yes, dry_run=dry_run)
        registry = ToolRegistry(run_ctx)
        for name in skip:
            registry.get(name)

        options = ProvisionOptions.from_settings(
            run_ctx,
            update_system=not no_update,
            setup_shell=not no_shell,
            link_dotfiles=not no_dotfiles,
        )
        options.skip_tools = options.skip_tools | frozenset(skip)
        if no_optional:
            options.include_optional = False

        if select:
            deselected = _select_tools(registry, options)
            if deselected is None:
                click.echo("Installation cancelled.")
                return
            options.skip_tools = options.skip_tools | frozenset(deselected)

        provision(run_ctx, registry, options)
    except DevstrapError as e:
        fail(e)


def _select_tools(registry: ToolRegistry, options: ProvisionOptions) -> list[str] | None:
    if not sys.stdin.isatty():
        click.echo("--select requires an interactive terminal; installing all tools.", err=True)
        return []

    statuses = [
        s
        for s in registry.scan(include_optional=options.include_optional)
        if s.stage in SELECTABLE_STAGES and s.name not in options.skip_tools
    ]
    _logging.debug(f"Offering {len(statuses)} tools for selection")
    return select_tools_interactive(statuses)
