"""Tool selection UI functions."""

import sys

import questionary

from ..installer import ToolStatus


def _format_tool_choice(status: ToolStatus) -> str:
    state = "installed" if status.present else "missing"
    label = f"{status.name:<15} [{status.stage.label}] {state}"
    if status.optional:
        label += " (optional)"
    return label


def select_tools_interactive(statuses: list[ToolStatus]) -> list[str] | None:
    """Let the operator choose which tools to provision.

    Missing tools start checked; installed and unsupported ones are left out
    of the list because ensuring them is a no-op.

    Returns:
        Names of the tools the operator UNchecked (to be skipped), or None if
        the operator cancelled

    Raises:
        RuntimeError: If not running in a TTY
    """
    if not sys.stdin.isatty():
        raise RuntimeError("Interactive tool selector requires a TTY")

    candidates = [s for s in statuses if s.supported and not s.present]
    if not candidates:
        return []

    choices = [
        questionary.Choice(title=_format_tool_choice(s), value=s.name, checked=True)
        for s in candidates
    ]

    try:
        selected = questionary.checkbox(
            "Select tools to install:",
            choices=choices,
            instruction="Space to toggle, Enter to confirm",
        ).ask()
    except KeyboardInterrupt:
        return None

    if selected is None:
        return None

    return [s.name for s in candidates if s.name not in selected]
