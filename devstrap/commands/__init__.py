"""CLI command definitions for devstrap."""

import click

from devstrap import __version__
from devstrap.commands.check import check
from devstrap.commands.config import config
from devstrap.commands.ensure import ensure
from devstrap.commands.install import install
from devstrap.commands.link import link
from devstrap.commands.list import list_tools


@click.group()
@click.version_option(__version__, prog_name="devstrap")
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.pass_context
def cli(ctx, debug):
    """Bootstrap a development environment on macOS, Fedora or Arch Linux."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


# Register all commands
cli.add_command(install)
cli.add_command(ensure)
cli.add_command(check)
cli.add_command(list_tools, name="list")
cli.add_command(link)
cli.add_command(config)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
