"""devstrap: bootstrap a development environment on macOS, Fedora or Arch."""

from devstrap.console import setup_logging
from devstrap.errors import (
    CommandError,
    DevstrapError,
    PlatformError,
    ProvisionError,
    UnknownToolError,
    format_suggestion,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "setup_logging",
    "CommandError",
    "DevstrapError",
    "PlatformError",
    "ProvisionError",
    "UnknownToolError",
    "format_suggestion",
]
