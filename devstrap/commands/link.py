"""Link command implementation."""

import click

from devstrap import DevstrapError, setup_logging
from devstrap.commands.utils import (
    build_context,
    dry_run_option,
    fail,
    platform_option,
    yes_option,
)
from devstrap.dotfiles import DotfileLinker, LinkOutcome


@click.command()
@platform_option
@yes_option
@dry_run_option
@click.option("--no-pull", is_flag=True, help="Do not offer to update an existing checkout")
@click.pass_context
def link(ctx, platform_name: str | None, yes: bool, dry_run: bool, no_pull: bool):
    """Clone the dotfiles repository and stow its packages into $HOME."""
    setup_logging(ctx.obj.get("debug", False))

    try:
        run_ctx = build_context(platform_name, assume_yes=yes, dry_run=dry_run)
        results = DotfileLinker.from_settings(run_ctx).run(pull=False if no_pull else None)
    except DevstrapError as e:
        fail(e)
        return

    failed = [name for name, outcome in results.items() if outcome == LinkOutcome.FAILED]
    adopted = [name for name, outcome in results.items() if outcome == LinkOutcome.ADOPTED]
    click.echo("")
    click.echo(f"Linked {len(results) - len(failed)} of {len(results)} packages.")
    if adopted:
        click.echo(f"Adopted existing files for: {', '.join(adopted)}")
    if failed:
        click.echo(f"Needs manual attention: {', '.join(failed)}")
