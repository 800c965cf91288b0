"""Host platform detection and confirmation."""

import logging
import platform as _platform
from enum import Enum
from pathlib import Path

import click

from devstrap import console
from devstrap.errors import PlatformError

_logging = logging.getLogger(__name__)


class Platform(Enum):
    MACOS = "macos"
    FEDORA = "fedora"
    ARCH = "arch"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_linux(self) -> bool:
        return self in (Platform.FEDORA, Platform.ARCH)


_DISPLAY_NAMES = {
    Platform.MACOS: "macOS",
    Platform.FEDORA: "Fedora Linux",
    Platform.ARCH: "Arch Linux",
    Platform.UNKNOWN: "unknown",
}

# Order of the manual selection menu
MENU_CHOICES = [Platform.MACOS, Platform.FEDORA, Platform.ARCH]

# Release marker files, checked in order after the kernel name
RELEASE_MARKERS = [
    ("etc/arch-release", Platform.ARCH),
    ("etc/fedora-release", Platform.FEDORA),
]


def parse_platform(name: str) -> Platform:
    """Parse a user-supplied platform name.

    Raises:
        ValueError: If the name is not one of the supported platforms
    """
    value = name.strip().lower()
    for choice in MENU_CHOICES:
        if choice.value == value:
            return choice
    names = ", ".join(p.value for p in MENU_CHOICES)
    raise ValueError(f"Unknown platform '{name}'. Supported: {names}")


def detect_platform(system: str | None = None, root: Path = Path("/")) -> Platform:
    """Identify the host from OS signals, in priority order.

    Args:
        system: Kernel name override (defaults to platform.system())
        root: Filesystem root used to look up release marker files

    Returns:
        The detected Platform, or Platform.UNKNOWN when nothing matches
    """
    system = system if system is not None else _platform.system()
    if system == "Darwin":
        return Platform.MACOS

    for marker, detected in RELEASE_MARKERS:
        if (root / marker).exists():
            return detected

    _logging.debug(f"No platform signal matched (system={system!r}, root={root})")
    return Platform.UNKNOWN


def select_platform_menu() -> Platform:
    """Ask the operator to pick a platform from a numbered menu.

    A single invalid answer is fatal; there is no retry loop.

    Raises:
        PlatformError: If the answer is not a listed menu number
    """
    console.blank()
    console.info("Please select your operating system:")
    for number, choice in enumerate(MENU_CHOICES, 1):
        click.echo(f"  {number}) {choice.display_name}")

    answer = click.prompt(
        console.question(f"Enter your choice (1-{len(MENU_CHOICES)})"),
        default="",
        show_default=False,
    ).strip()

    if not answer.isdigit() or not 1 <= int(answer) <= len(MENU_CHOICES):
        raise PlatformError("Invalid choice. Exiting.")

    selected = MENU_CHOICES[int(answer) - 1]
    console.info(f"Selected: {selected.value}")
    return selected


def confirm_platform(detected: Platform, assume_yes: bool = False) -> Platform:
    """Confirm a detected platform with the operator, or fall back to the menu.

    Args:
        detected: Result of detect_platform()
        assume_yes: Accept a known detection without prompting

    Returns:
        The confirmed or selected Platform (never UNKNOWN)

    Raises:
        PlatformError: If nothing was detected in non-interactive mode, or the
            menu answer was invalid
    """
    if detected != Platform.UNKNOWN:
        console.info(f"Detected: {detected.value}")
        if assume_yes:
            return detected
        if click.confirm(console.question("Is this correct?"), default=False):
            return detected
    elif assume_yes:
        raise PlatformError(
            "Unsupported OS. Pass --platform with one of: "
            + ", ".join(p.value for p in MENU_CHOICES)
        )

    return select_platform_menu()


def resolve_platform(
    requested: str | None,
    assume_yes: bool = False,
    interactive: bool = True,
) -> Platform:
    """Return the platform for this run.

    An explicit ``requested`` name wins. Otherwise the host is detected and,
    when ``interactive``, confirmed with the operator.

    Raises:
        PlatformError: If the platform cannot be determined
    """
    if requested:
        try:
            return parse_platform(requested)
        except ValueError as e:
            raise PlatformError(str(e)) from e

    detected = detect_platform()
    if interactive:
        return confirm_platform(detected, assume_yes=assume_yes)

    if detected == Platform.UNKNOWN:
        raise PlatformError("Could not detect a supported platform; pass --platform")
    return detected


__all__ = [
    "Platform",
    "MENU_CHOICES",
    "parse_platform",
    "detect_platform",
    "select_platform_menu",
    "confirm_platform",
    "resolve_platform",
]
