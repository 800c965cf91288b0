"""Data models for the installer registry."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Mapping

from devstrap.platform import Platform
from devstrap.probe import Probe

if TYPE_CHECKING:
    from .steps import Step


class Stage(Enum):
    """Installation stages, in the order they run."""
    BOOTSTRAP = 1
    SHELL = 2
    CORE = 3
    DEVELOPER = 4
    VERSION_MANAGERS = 5
    CREDENTIALS = 6
    SHELL_ENHANCEMENTS = 7

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").lower()


class EnsureResult(Enum):
    INSTALLED = "installed"
    ALREADY_PRESENT = "already-present"
    UNSUPPORTED = "unsupported"


class RiskLevel(Enum):
    SAFE = "safe"
    PRIVILEGED = "privileged"
    DANGEROUS = "dangerous"


Procedure = tuple["Step", ...]


@dataclass(frozen=True)
class Tool:
    name: str
    probe: Probe
    stage: Stage
    procedures: Mapping[Platform, Procedure]
    description: str = ""
    optional: bool = False
    notes: Mapping[Platform, tuple[str, ...]] = field(default_factory=dict)

    def procedure_for(self, platform: Platform) -> Procedure | None:
        return self.procedures.get(platform)

    def supports(self, platform: Platform) -> bool:
        return platform in self.procedures

    def notes_for(self, platform: Platform) -> tuple[str, ...]:
        return self.notes.get(platform, ())


@dataclass
class ToolStatus:
    name: str
    stage: Stage
    present: bool
    supported: bool
    path: str | None = None
    optional: bool = False

    @property
    def status_icon(self) -> str:
        if self.present:
            return "✅"
        if not self.supported:
            return "⚪"
        return "❌"


__all__ = [
    "Stage",
    "EnsureResult",
    "RiskLevel",
    "Procedure",
    "Tool",
    "ToolStatus",
]
