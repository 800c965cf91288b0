"""Dotfiles checkout and stow-based symlinking."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping

import click

from devstrap import console
from devstrap.config import DotfilesSettings
from devstrap.context import ProvisionContext
from devstrap.platform import Platform

_logging = logging.getLogger(__name__)


class LinkOutcome(Enum):
    RESTOWED = "restowed"
    ADOPTED = "adopted"
    FAILED = "failed"


@dataclass(frozen=True)
class PackageGroup:
    """Dotfile packages to link: shared ones plus per-platform extras."""
    common: tuple[str, ...]
    platform_extras: Mapping[Platform, tuple[str, ...]] = field(default_factory=dict)

    def resolve(self, platform: Platform) -> list[str]:
        names = list(self.common)
        for name in self.platform_extras.get(platform, ()):
            if name not in names:
                names.append(name)
        return names

    @classmethod
    def from_settings(cls, settings: DotfilesSettings) -> "PackageGroup":
        return cls(
            common=tuple(settings.packages),
            platform_extras={
                platform: tuple(names)
                for platform, names in settings.extras_by_platform().items()
            },
        )


class DotfileLinker:
    """Keeps a local dotfiles checkout and stows its packages into $HOME.

    Conflicts are resolved in two phases: ``stow --restow`` first, then a
    single ``stow --adopt`` that pulls pre-existing files into the checkout.
    A package that fails both is reported and skipped; it never stops the
    remaining packages.
    """

    def __init__(
        self,
        ctx: ProvisionContext,
        repo: str,
        directory: Path,
        packages: PackageGroup,
    ):
        self.ctx = ctx
        self.repo = repo
        self.directory = directory
        self.packages = packages

    @classmethod
    def from_settings(cls, ctx: ProvisionContext) -> "DotfileLinker":
        dotfiles = ctx.settings.dotfiles
        return cls(
            ctx,
            repo=dotfiles.repo,
            directory=ctx.expand(dotfiles.directory),
            packages=PackageGroup.from_settings(dotfiles),
        )

    def sync_source(self, pull: bool | None = None) -> None:
        """Clone the dotfiles repository, or offer to update an existing one.

        Args:
            pull: True/False to decide without asking; None prompts unless
                the context assumes yes
        """
        if not self.directory.exists():
            console.info("Cloning dotfiles repository...")
            self.ctx.runner.run(["git", "clone", self.repo, str(self.directory)])
            return

        console.warning(f"Dotfiles directory already exists at {self.directory}")
        if pull is None:
            pull = self.ctx.assume_yes or click.confirm(
                console.question("Do you want to update it?"), default=False
            )
        if pull:
            console.info("Updating dotfiles repository...")
            self.ctx.runner.run(["git", "-C", str(self.directory), "pull"])

    def _stow(self, mode: str, package: str) -> bool:
        result = self.ctx.runner.run(
            ["stow", mode, f"--target={self.ctx.home}", package],
            cwd=self.directory,
            check=False,
            capture=True,
        )
        if not result.ok:
            _logging.debug(f"stow {mode} {package} failed: {result.stderr.strip()}")
        return result.ok

    def link(self, package: str) -> LinkOutcome:
        console.info(f"Stowing {package}...")
        if self._stow("--restow", package):
            outcome = LinkOutcome.RESTOWED
        else:
            console.warning(f"Conflicts detected for {package}. Attempting to resolve...")
            if self._stow("--adopt", package):
                console.info(f"{package} stowed (existing files adopted)")
                outcome = LinkOutcome.ADOPTED
            else:
                message = f"Could not stow {package} - manual intervention may be needed"
                console.warning(message)
                self.ctx.summary.warn(message)
                outcome = LinkOutcome.FAILED

        self.ctx.summary.link_results[package] = outcome
        return outcome

    def link_all(self) -> dict[str, LinkOutcome]:
        console.info("Creating symlinks with stow...")
        results = {}
        for package in self.packages.resolve(self.ctx.platform):
            if not (self.directory / package).is_dir() and not self.ctx.dry_run:
                _logging.debug(f"No '{package}' package in {self.directory}, skipping")
                continue
            results[package] = self.link(package)
        return results

    def run(self, pull: bool | None = None) -> dict[str, LinkOutcome]:
        console.info("Setting up dotfiles...")
        self.sync_source(pull=pull)
        results = self.link_all()
        console.info("Dotfiles setup complete!")
        return results


__all__ = ["LinkOutcome", "PackageGroup", "DotfileLinker"]
