"""Pytest fixtures and utilities for devstrap tests."""

import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generator

import pytest

from devstrap.config import Settings
from devstrap.context import ProvisionContext
from devstrap.errors import CommandError
from devstrap.execution import CommandResult, CommandRunner, display_command
from devstrap.platform import Platform


@dataclass
class Call:
    command: str
    cwd: Path | None = None
    input: str | None = None
    read_only: bool = False


@dataclass
class Response:
    prefix: str
    returncode: int = 0
    stdout: str = ""
    stderr: str = ""
    effect: Callable[[str], None] | None = None


class FakeRunner(CommandRunner):
    """CommandRunner double that records commands instead of running them.

    Responses are matched by command prefix, most recently registered first.
    An ``effect`` callback receives the command and simulates what the real
    command would do (e.g. create the binary a package manager installs).
    """

    def __init__(self, dry_run: bool = False):
        super().__init__(dry_run=dry_run)
        self.calls: list[Call] = []
        self._responses: list[Response] = []

    def on(
        self,
        prefix: str,
        returncode: int = 0,
        stdout: str = "",
        stderr: str = "",
        effect: Callable[[str], None] | None = None,
    ) -> "FakeRunner":
        self._responses.insert(0, Response(prefix, returncode, stdout, stderr, effect))
        return self

    @property
    def commands(self) -> list[str]:
        return [c.command for c in self.calls]

    def count(self, prefix: str) -> int:
        return sum(1 for c in self.commands if c.startswith(prefix))

    def run(self, command, *, check=True, capture=False, cwd=None, input=None, read_only=False):
        display = display_command(command)
        self.calls.append(Call(display, cwd, input, read_only))

        if self.dry_run and not read_only:
            return CommandResult(display, 0)

        response = next((r for r in self._responses if display.startswith(r.prefix)), None)
        if response is None:
            result = CommandResult(display, 0)
        else:
            if response.effect is not None:
                response.effect(display)
            result = CommandResult(display, response.returncode, response.stdout, response.stderr)

        if check and not result.ok:
            raise CommandError(result)
        return result


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def home(temp_dir: Path) -> Path:
    path = temp_dir / "home"
    path.mkdir()
    return path


@pytest.fixture
def bin_dir(temp_dir: Path) -> Path:
    """A directory standing in for /usr/bin on the probe search path."""
    path = temp_dir / "bin"
    path.mkdir()
    return path


@pytest.fixture
def make_executable(bin_dir: Path) -> Callable[..., Path]:
    """Factory creating an executable file (default: in bin_dir)."""

    def _create(name: str, directory: Path | None = None) -> Path:
        directory = directory or bin_dir
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("#!/bin/sh\nexit 0\n")
        path.chmod(0o755)
        return path

    return _create


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_context(
    temp_dir: Path, home: Path, bin_dir: Path, runner: FakeRunner
) -> Callable[..., ProvisionContext]:
    """Factory for a ProvisionContext isolated in a temp directory."""

    def _create(platform: Platform = Platform.FEDORA, **overrides) -> ProvisionContext:
        values = dict(
            platform=platform,
            runner=runner,
            home=home,
            search_path=[str(bin_dir)],
            environ={"USER": "tester", "SHELL": "/bin/bash"},
            settings=Settings(),
            machine="x86_64",
            shells_file=temp_dir / "shells",
        )
        values.update(overrides)
        return ProvisionContext(**values)

    return _create


@pytest.fixture
def ctx(make_context) -> ProvisionContext:
    return make_context()
