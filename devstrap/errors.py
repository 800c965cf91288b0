"""Error types and formatting utilities for consistent error messages.

This module defines the exception hierarchy used across devstrap and the
helpers that turn those exceptions into user-facing text.

Error Style Guide:
- User-facing errors are printed once, with a red [ERROR] prefix
- Use present tense: 'must be', 'is required'
- Include actionable hints where helpful
- Be concise but informative

Severity:
- Fatal errors derive from DevstrapError and stop the run at the CLI boundary
- Skippable conditions (already installed, unsupported, stow conflicts) are
  never raised; they are logged and recorded on the run summary
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devstrap.execution import CommandResult


class DevstrapError(Exception):
    """Base class for every fatal devstrap error."""


class PlatformError(DevstrapError):
    """Raised when the platform is undetected, unsupported or wrongly selected."""


class ProvisionError(DevstrapError):
    """Raised when a provisioning step cannot complete."""


class UnknownToolError(ProvisionError):
    """Raised when a tool name is not present in the registry."""

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = available or []
        message = f"unknown tool '{name}'"
        if self.available:
            message += f". Available: {', '.join(self.available)}"
        super().__init__(message)


class CommandError(DevstrapError):
    """Raised when an external command exits with a non-zero status.

    The structured result is kept on the exception so callers and tests can
    inspect the exit code and any captured output.
    """

    def __init__(self, result: "CommandResult"):
        self.result = result
        message = f"command failed with exit code {result.returncode}: {result.command}"
        detail = (result.stderr or result.stdout).strip()
        if detail:
            message += f"\n{detail}"
        super().__init__(message)


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Examples:
        >>> format_suggestion("unknown tool 'foo'", "run 'devstrap list' to see available tools")
        "unknown tool 'foo'. Hint: run 'devstrap list' to see available tools"
    """
    return f"{message}. Hint: {suggestion}"


__all__ = [
    "DevstrapError",
    "PlatformError",
    "ProvisionError",
    "UnknownToolError",
    "CommandError",
    "format_suggestion",
]
