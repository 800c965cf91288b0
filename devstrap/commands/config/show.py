"""Show config command implementation."""

import click

from devstrap.commands.utils import fail
from devstrap.config import ConfigError, dump_config, load_config
from devstrap.paths import get_config_path


@click.command(name="show")
def config_show():
    """Print the effective configuration as YAML."""
    config_path = get_config_path()
    try:
        settings = load_config(config_path)
    except ConfigError as e:
        fail(e)
        return

    source = str(config_path) if config_path.exists() else "packaged defaults"
    click.echo(f"# Source: {source}")
    click.echo(dump_config(settings), nl=False)
