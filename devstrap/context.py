"""Run context shared by every provisioning component."""

import os
import platform as _platform
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Mapping

from devstrap.config import Settings
from devstrap.execution import CommandRunner
from devstrap.paths import SHELLS_FILE, expand_home, local_bin_dir
from devstrap.platform import Platform

if TYPE_CHECKING:
    from devstrap.dotfiles import LinkOutcome
    from devstrap.installer import EnsureResult


class Severity(Enum):
    NOTE = "note"
    WARNING = "warning"


@dataclass(frozen=True)
class SummaryEntry:
    severity: Severity
    message: str


@dataclass
class RunSummary:
    """Follow-up notes and outcomes accumulated during a run."""
    entries: list[SummaryEntry] = field(default_factory=list)
    tool_results: dict[str, "EnsureResult"] = field(default_factory=dict)
    link_results: dict[str, "LinkOutcome"] = field(default_factory=dict)

    def note(self, message: str) -> None:
        if not any(e.message == message for e in self.entries):
            self.entries.append(SummaryEntry(Severity.NOTE, message))

    def warn(self, message: str) -> None:
        if not any(e.message == message for e in self.entries):
            self.entries.append(SummaryEntry(Severity.WARNING, message))

    @property
    def notes(self) -> list[str]:
        return [e.message for e in self.entries if e.severity == Severity.NOTE]

    @property
    def warnings(self) -> list[str]:
        return [e.message for e in self.entries if e.severity == Severity.WARNING]


@dataclass
class ProvisionContext:
    """Everything a component needs to know about the current run.

    The platform is fixed for the lifetime of the context. ``search_path`` is
    the executable lookup path used by probes; it starts as $PATH and grows
    when ~/.local/bin is set up mid-run.
    """
    platform: Platform
    runner: CommandRunner
    home: Path
    search_path: list[str]
    environ: Mapping[str, str]
    settings: Settings = field(default_factory=Settings)
    summary: RunSummary = field(default_factory=RunSummary)
    machine: str = field(default_factory=_platform.machine)
    shells_file: Path = SHELLS_FILE
    assume_yes: bool = False

    @classmethod
    def from_environment(
        cls,
        platform: Platform,
        settings: Settings | None = None,
        dry_run: bool = False,
        assume_yes: bool = False,
    ) -> "ProvisionContext":
        environ = dict(os.environ)
        return cls(
            platform=platform,
            runner=CommandRunner(dry_run=dry_run),
            home=Path.home(),
            search_path=[p for p in environ.get("PATH", "").split(os.pathsep) if p],
            environ=environ,
            settings=settings or Settings(),
            assume_yes=assume_yes,
        )

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    @property
    def local_bin(self) -> Path:
        return local_bin_dir(self.home)

    @property
    def user(self) -> str:
        return self.environ.get("USER", "")

    def expand(self, path: str | Path) -> Path:
        return expand_home(path, self.home)

    def which(self, name: str) -> str | None:
        return shutil.which(name, path=os.pathsep.join(self.search_path))

    def on_search_path(self, directory: Path) -> bool:
        return str(directory) in self.search_path

    def prepend_search_path(self, directory: Path) -> None:
        if not self.on_search_path(directory):
            self.search_path.insert(0, str(directory))


__all__ = [
    "Severity",
    "SummaryEntry",
    "RunSummary",
    "ProvisionContext",
]
