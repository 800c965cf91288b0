"""Install steps: the building blocks of per-platform tool procedures.

Each step knows how to run itself against a ProvisionContext and how to
describe the commands it would run, for plan rendering. External commands
run with check=True, so a failing package manager raises CommandError and
stops the run.
"""

import logging
import re
import shlex
import shutil
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import click
from packaging.version import InvalidVersion, Version

from devstrap import console
from devstrap.context import ProvisionContext
from devstrap.errors import ProvisionError
from devstrap.platform import Platform

from .models import RiskLevel

_logging = logging.getLogger(__name__)

PACKAGE_MANAGERS: dict[Platform, tuple[str, ...]] = {
    Platform.MACOS: ("brew", "install"),
    Platform.FEDORA: ("sudo", "dnf", "install", "-y"),
    Platform.ARCH: ("sudo", "pacman", "-S", "--noconfirm"),
}

AUR_HELPERS = ("paru", "yay")


def find_aur_helper(ctx: ProvisionContext) -> str | None:
    """Return the first AUR helper on the search path (paru preferred)."""
    for helper in AUR_HELPERS:
        if ctx.which(helper):
            return helper
    return None


def infer_risk_level(command: str) -> RiskLevel:
    pipe_pattern = re.compile(r"\|\s*(sudo\s+)?(sh|bash)\b", re.IGNORECASE)
    if pipe_pattern.search(command) or "$(curl" in command:
        return RiskLevel.DANGEROUS
    if command.startswith("sudo ") or "makepkg -si" in command:
        return RiskLevel.PRIVILEGED
    return RiskLevel.SAFE


class Step(ABC):
    @abstractmethod
    def run(self, ctx: ProvisionContext) -> None: ...

    @abstractmethod
    def describe(self, platform: Platform) -> list[str]:
        """Return the commands this step runs, one line each."""

    def missing_prerequisite(self, ctx: ProvisionContext) -> str | None:
        """Reason this step cannot run on this machine, or None if it can."""
        return None


@dataclass(frozen=True)
class Install(Step):
    """Install packages with the platform's package manager."""
    packages: tuple[str, ...]
    cask: bool = False

    def argv(self, platform: Platform) -> list[str]:
        if platform not in PACKAGE_MANAGERS:
            raise ProvisionError(f"No package manager known for {platform.display_name}")
        if self.cask and platform != Platform.MACOS:
            raise ProvisionError("Homebrew casks are only available on macOS")
        argv = list(PACKAGE_MANAGERS[platform])
        if self.cask:
            argv.append("--cask")
        return argv + list(self.packages)

    def run(self, ctx: ProvisionContext) -> None:
        ctx.runner.run(self.argv(ctx.platform))

    def describe(self, platform: Platform) -> list[str]:
        return [shlex.join(self.argv(platform))]


@dataclass(frozen=True)
class Run(Step):
    """Run a single command.

    Arguments may reference ``{user}``, ``{home}`` and ``{local_bin}``.
    """
    argv: tuple[str, ...]
    stdin: str | None = None

    def resolve(self, ctx: ProvisionContext) -> list[str]:
        values = {"user": ctx.user, "home": ctx.home, "local_bin": ctx.local_bin}
        return [arg.format(**values) for arg in self.argv]

    def run(self, ctx: ProvisionContext) -> None:
        ctx.runner.run(self.resolve(ctx), input=self.stdin)

    def describe(self, platform: Platform) -> list[str]:
        line = shlex.join(self.argv)
        if self.stdin is not None:
            line += " <<< ..."
        return [line]


@dataclass(frozen=True)
class Script(Step):
    """Run a shell pipeline, typically a vendor's ``curl | sh`` installer."""
    command: str

    def run(self, ctx: ProvisionContext) -> None:
        ctx.runner.run(self.command)

    def describe(self, platform: Platform) -> list[str]:
        return [self.command]


@dataclass(frozen=True)
class EnsureDir(Step):
    path: str

    def run(self, ctx: ProvisionContext) -> None:
        target = ctx.expand(self.path)
        if ctx.dry_run:
            click.echo(f"[DRY-RUN] Would create directory: {target}")
            return
        target.mkdir(parents=True, exist_ok=True)

    def describe(self, platform: Platform) -> list[str]:
        return [f"mkdir -p {self.path}"]


@dataclass(frozen=True)
class VersionGate(Step):
    """Pick one of two step sequences by comparing a release version.

    ``query`` prints the version (e.g. ``rpm -E %fedora``). Versions below
    ``threshold`` run ``below``; anything else runs ``at_or_above``.
    """
    query: str
    threshold: str
    below: tuple[Step, ...]
    at_or_above: tuple[Step, ...]
    notice: str | None = None

    def current_version(self, ctx: ProvisionContext) -> Version | None:
        """Run the query; None means it was unavailable during a dry run."""
        result = ctx.runner.run(
            self.query, check=not ctx.dry_run, capture=True, read_only=True
        )
        raw = result.stdout.strip()
        try:
            return Version(raw) if result.ok else None
        except InvalidVersion as e:
            if ctx.dry_run:
                return None
            raise ProvisionError(
                f"Could not parse version {raw!r} from '{self.query}'"
            ) from e

    def run(self, ctx: ProvisionContext) -> None:
        version = self.current_version(ctx)
        if version is None:
            click.echo(f"[DRY-RUN] Could not run '{self.query}'; would run one of:")
            for line in self.describe(ctx.platform):
                click.echo(f"[DRY-RUN]   {line}")
            return
        _logging.debug(f"{self.query} -> {version} (threshold {self.threshold})")
        if version < Version(self.threshold):
            steps = self.below
        else:
            if self.notice:
                console.warning(self.notice)
            steps = self.at_or_above
        for step in steps:
            step.run(ctx)

    def describe(self, platform: Platform) -> list[str]:
        lines = [f"if [ $({self.query}) -lt {self.threshold} ]:"]
        lines += [f"  {line}" for step in self.below for line in step.describe(platform)]
        lines.append("else:")
        lines += [f"  {line}" for step in self.at_or_above for line in step.describe(platform)]
        return lines


@dataclass(frozen=True)
class ReleaseDownload(Step):
    """Download a release tarball and place its binary in ~/.local/bin.

    ``url_template`` is formatted with ``arch`` (the machine name).
    """
    binary: str
    url_template: str
    architectures: tuple[str, ...] = ("x86_64", "aarch64")

    def url(self, arch: str) -> str:
        return self.url_template.format(arch=arch)

    def run(self, ctx: ProvisionContext) -> None:
        if ctx.machine not in self.architectures:
            raise ProvisionError(
                f"No {self.binary} release for architecture '{ctx.machine}'. "
                f"Supported: {', '.join(self.architectures)}"
            )

        with tempfile.TemporaryDirectory() as tmp:
            command = (
                f"curl -fsSL {shlex.quote(self.url(ctx.machine))} "
                f"| tar xz -C {shlex.quote(tmp)}"
            )
            ctx.runner.run(command)
            if ctx.dry_run:
                return

            extracted = Path(tmp) / self.binary
            if not extracted.is_file():
                raise ProvisionError(
                    f"Release archive did not contain '{self.binary}': {self.url(ctx.machine)}"
                )
            ctx.local_bin.mkdir(parents=True, exist_ok=True)
            destination = ctx.local_bin / self.binary
            shutil.move(str(extracted), destination)
            destination.chmod(0o755)

        console.info(f"{self.binary} installed to ~/.local/bin/{self.binary}")

    def describe(self, platform: Platform) -> list[str]:
        return [
            f"curl -fsSL {self.url('$(uname -m)')} | tar xz",
            f"mv {self.binary} ~/.local/bin/{self.binary}",
        ]


@dataclass(frozen=True)
class CompatSymlink(Step):
    """Expose ``target`` under ``link_name`` in ~/.local/bin.

    Used when a distribution ships a tool under a different binary name
    (Fedora's fd-find installs ``fdfind``). An existing link is left alone.
    """
    link_name: str
    target: str

    def run(self, ctx: ProvisionContext) -> None:
        link = ctx.local_bin / self.link_name
        if link.exists() or link.is_symlink():
            _logging.debug(f"{link} already exists, not relinking")
            return

        resolved = ctx.which(self.target)
        if ctx.dry_run:
            click.echo(f"[DRY-RUN] Would link: {link} -> {resolved or self.target}")
            return
        if resolved is None:
            raise ProvisionError(
                f"'{self.target}' is not on PATH after install; cannot create {link}"
            )

        ctx.local_bin.mkdir(parents=True, exist_ok=True)
        link.symlink_to(resolved)
        console.info(f"Linked {link} -> {resolved}")

    def describe(self, platform: Platform) -> list[str]:
        return [f"ln -s $(which {self.target}) ~/.local/bin/{self.link_name}"]


@dataclass(frozen=True)
class AurBuild(Step):
    """Clone a PKGBUILD repository and build/install it with makepkg."""
    repo: str

    def run(self, ctx: ProvisionContext) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            checkout = Path(tmp) / Path(self.repo).stem
            ctx.runner.run(["git", "clone", self.repo, str(checkout)])
            ctx.runner.run(["makepkg", "-si", "--noconfirm"], cwd=checkout)

    def describe(self, platform: Platform) -> list[str]:
        return [f"git clone {self.repo}", "makepkg -si --noconfirm"]


@dataclass(frozen=True)
class AurInstall(Step):
    """Install packages through the AUR helper (paru, falling back to yay)."""
    packages: tuple[str, ...]

    def missing_prerequisite(self, ctx: ProvisionContext) -> str | None:
        if ctx.dry_run or find_aur_helper(ctx):
            return None
        return "No AUR helper found. Install paru or yay first (devstrap ensure paru)"

    def run(self, ctx: ProvisionContext) -> None:
        helper = find_aur_helper(ctx)
        if helper is None:
            reason = self.missing_prerequisite(ctx)
            if reason:
                raise ProvisionError(reason)
            helper = AUR_HELPERS[0]

        console.info(f"Installing {' '.join(self.packages)} from AUR using {helper}...")
        ctx.runner.run([helper, "-S", "--noconfirm", *self.packages])

    def describe(self, platform: Platform) -> list[str]:
        return [f"paru -S --noconfirm {' '.join(self.packages)}"]


def install(*packages: str) -> Install:
    return Install(tuple(packages))


def cask(*packages: str) -> Install:
    return Install(tuple(packages), cask=True)


def run(*argv: str, stdin: str | None = None) -> Run:
    return Run(tuple(argv), stdin=stdin)


def script(command: str) -> Script:
    return Script(command)


def aur(*packages: str) -> AurInstall:
    return AurInstall(tuple(packages))


__all__ = [
    "PACKAGE_MANAGERS",
    "AUR_HELPERS",
    "find_aur_helper",
    "infer_risk_level",
    "Step",
    "Install",
    "Run",
    "Script",
    "EnsureDir",
    "VersionGate",
    "ReleaseDownload",
    "CompatSymlink",
    "AurBuild",
    "AurInstall",
    "install",
    "cask",
    "run",
    "script",
    "aur",
]
