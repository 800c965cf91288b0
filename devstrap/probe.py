"""Capability probes: is a tool already on this machine?"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devstrap.context import ProvisionContext


@dataclass(frozen=True)
class Probe:
    """Presence check for a tool.

    A tool is present if ANY of its executables resolves on the search path
    or ANY of its marker directories exists. Listing several executables
    accepts equivalent binaries (fd/fdfind, paru/yay).
    """
    executables: tuple[str, ...] = ()
    directories: tuple[str, ...] = ()

    def __post_init__(self):
        if not self.executables and not self.directories:
            raise ValueError("probe needs at least one executable or directory")

    def locate(self, ctx: "ProvisionContext") -> str | None:
        for name in self.executables:
            path = ctx.which(name)
            if path:
                return path
        for directory in self.directories:
            resolved = ctx.expand(directory)
            if resolved.is_dir():
                return str(resolved)
        return None

    def is_present(self, ctx: "ProvisionContext") -> bool:
        return self.locate(ctx) is not None

    def describe(self) -> str:
        parts = [f"which {name}" for name in self.executables]
        parts += [f"dir {path}" for path in self.directories]
        return " || ".join(parts)


def executable(*names: str) -> Probe:
    return Probe(executables=tuple(names))


def directory(*paths: str) -> Probe:
    return Probe(directories=tuple(paths))


__all__ = ["Probe", "executable", "directory"]
