"""TUI utilities for interactive provisioning.

- questionary for rich interactive prompts (when TTY available)
- click for plain colored output and CI/headless fallbacks
- TTY guards before all interactive prompts
"""

from .status import display_tool_table, format_status_line, get_color_for_status
from .tools import select_tools_interactive

__all__ = [
    "display_tool_table",
    "format_status_line",
    "get_color_for_status",
    "select_tools_interactive",
]
