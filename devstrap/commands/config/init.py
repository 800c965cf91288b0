"""Initialize config command implementation."""

import sys

import click

from devstrap import console
from devstrap.config import Settings, save_config
from devstrap.paths import get_config_path


@click.command(name="init")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Force re-initialization, overwriting existing config",
)
def config_init(force: bool):
    """Write the default configuration file.

    Creates ~/.config/devstrap/config.yaml (or $DEVSTRAP_CONFIG) with the
    packaged defaults. Use --force to overwrite an existing config (creates a
    backup first).
    """
    config_path = get_config_path()

    if config_path.exists() and not force:
        console.error(f"Config file already exists: {config_path}")
        click.echo("Use --force to re-initialize (creates backup first).")
        sys.exit(1)

    if config_path.exists():
        backup_path = config_path.with_suffix(".yaml.bak")
        click.echo(f"Backing up existing config to {backup_path}...")
        config_path.rename(backup_path)

    save_config(Settings(), config_path)
    click.echo(f"✅ Config written to {config_path}")
