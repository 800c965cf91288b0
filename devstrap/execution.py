"""External command execution."""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import click

from devstrap.errors import CommandError

_logging = logging.getLogger(__name__)

Command = str | Sequence[str]


@dataclass(frozen=True)
class CommandResult:
    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def display_command(command: Command) -> str:
    """Render a command the way a user would type it."""
    if isinstance(command, str):
        return command
    return shlex.join(command)


class CommandRunner:
    """Runs external commands synchronously.

    String commands are handed to the shell so pipelines such as
    ``curl ... | sh`` work; sequences are executed directly. Output is
    streamed to the terminal unless ``capture`` is requested.

    In dry-run mode mutating commands are echoed instead of executed and
    report success. Commands flagged ``read_only`` always run, since later
    decisions depend on their output.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def run(
        self,
        command: Command,
        *,
        check: bool = True,
        capture: bool = False,
        cwd: Path | None = None,
        input: str | None = None,
        read_only: bool = False,
    ) -> CommandResult:
        display = display_command(command)

        if self.dry_run and not read_only:
            click.echo(f"[DRY-RUN] Would execute: {display}")
            return CommandResult(display, 0)

        _logging.debug(f"Running command: {display}")
        try:
            completed = subprocess.run(
                command if isinstance(command, str) else list(command),
                shell=isinstance(command, str),
                cwd=cwd,
                input=input,
                text=True,
                capture_output=capture or input is not None,
            )
        except OSError as e:
            _logging.debug(f"Command execution failed: {type(e).__name__}: {e}")
            result = CommandResult(display, 127, "", str(e))
        else:
            result = CommandResult(
                display,
                completed.returncode,
                completed.stdout or "",
                completed.stderr or "",
            )

        if result.stderr:
            _logging.debug(f"stderr: {result.stderr.strip()}")
        if check and not result.ok:
            raise CommandError(result)
        return result


__all__ = [
    "Command",
    "CommandResult",
    "CommandRunner",
    "display_command",
]
