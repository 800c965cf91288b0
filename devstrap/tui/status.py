"""Tool status display functions for TUI."""

import click

from ..installer import ToolStatus


def format_status_line(status: ToolStatus, max_name_width: int = 10) -> str:
    """Format a single tool status line for display.

    Args:
        status: The tool status to format
        max_name_width: Width to pad the name column for alignment

    Returns:
        Formatted string with icon, name, stage and path info
    """
    icon = status.status_icon
    name = status.name.ljust(max_name_width)
    stage = status.stage.label

    if status.present:
        return f"{icon} {name}  {stage:<18} {status.path or ''}"
    if not status.supported:
        return f"{icon} {name}  {stage:<18} unsupported on this platform"
    suffix = " (optional)" if status.optional else ""
    return f"{icon} {name}  {stage:<18} missing{suffix}"


def get_color_for_status(status: ToolStatus) -> str:
    """Get the color name for a tool status (for click.secho)."""
    if status.present:
        return "green"
    if not status.supported:
        return "white"
    return "yellow" if status.optional else "red"


def display_tool_table(statuses: list[ToolStatus], show_all: bool = True) -> None:
    """Display tool status as a formatted table with colors.

    Args:
        statuses: Tool statuses in catalog order
        show_all: If True, show every tool; if False, only missing ones

    Example output:
        ✅ git        core               /usr/bin/git
        ❌ lazygit    developer          missing
        ⚪ homebrew   bootstrap          unsupported on this platform
    """
    to_show = statuses if show_all else [s for s in statuses if not s.present]

    if not to_show:
        click.secho("All tools installed!", fg="green")
        return

    max_name_width = max(len(s.name) for s in to_show)
    for status in to_show:
        click.secho(format_status_line(status, max_name_width), fg=get_color_for_status(status))

    supported = [s for s in statuses if s.supported]
    present = sum(1 for s in supported if s.present)
    click.echo("")
    if present == len(supported):
        click.secho(f"  [{present}/{len(supported)}] All tools ready", fg="green")
    else:
        missing = len(supported) - present
        click.secho(
            f"  [{present}/{len(supported)}] {missing} tools need installing",
            fg="yellow",
        )
