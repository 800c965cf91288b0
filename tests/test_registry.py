"""Tests for the tool registry's probe-then-install behavior."""

import shlex
from pathlib import Path

import pytest

from devstrap.errors import CommandError, ProvisionError, UnknownToolError
from devstrap.installer import EnsureResult, Stage, Tool, ToolRegistry
from devstrap.installer.steps import install
from devstrap.platform import Platform
from devstrap.probe import executable


def _widget(**kwargs):
    values = dict(
        name="widget",
        probe=executable("widget"),
        stage=Stage.CORE,
        procedures={Platform.FEDORA: (install("widget"),)},
        description="Test tool",
    )
    values.update(kwargs)
    return Tool(**values)


@pytest.fixture
def fedora_registry(ctx):
    return ToolRegistry(ctx)


class TestEnsure:
    def test_installs_missing_tool_once(self, ctx, runner, make_executable):
        runner.on("sudo dnf install -y widget", effect=lambda _: make_executable("widget"))
        registry = ToolRegistry(ctx, tools=[_widget()])

        assert registry.ensure("widget") == EnsureResult.INSTALLED
        assert registry.ensure("widget") == EnsureResult.ALREADY_PRESENT
        assert runner.count("sudo dnf install -y widget") == 1

    def test_present_tool_runs_nothing(self, ctx, runner, make_executable, capsys):
        make_executable("widget")
        registry = ToolRegistry(ctx, tools=[_widget()])

        assert registry.ensure("widget") == EnsureResult.ALREADY_PRESENT
        assert runner.calls == []
        assert "widget is already installed, skipping..." in capsys.readouterr().out

    def test_unsupported_platform(self, make_context, runner, capsys):
        ctx = make_context(platform=Platform.MACOS)
        registry = ToolRegistry(ctx, tools=[_widget()])

        assert registry.ensure("widget") == EnsureResult.UNSUPPORTED
        assert runner.calls == []
        assert "widget is not supported on macOS, skipping..." in capsys.readouterr().out
        assert ctx.summary.warnings == ["widget was not installed: unsupported on macOS"]

    def test_unsupported_does_not_stop_batch(self, make_context, runner):
        ctx = make_context(platform=Platform.ARCH)
        tools = [
            _widget(),
            _widget(name="gadget", probe=executable("gadget"),
                    procedures={Platform.ARCH: (install("gadget"),)}),
        ]
        results = ToolRegistry(ctx, tools=tools).ensure_all(tools)

        assert results == {
            "widget": EnsureResult.UNSUPPORTED,
            "gadget": EnsureResult.INSTALLED,
        }
        assert runner.commands == ["sudo pacman -S --noconfirm gadget"]

    def test_failed_install_propagates(self, ctx, runner):
        runner.on("sudo dnf install -y widget", returncode=1, stderr="No match for argument")
        registry = ToolRegistry(ctx, tools=[_widget()])

        with pytest.raises(CommandError) as exc_info:
            registry.ensure("widget")

        assert exc_info.value.result.returncode == 1
        assert "widget" not in ctx.summary.tool_results

    def test_notes_recorded_on_install(self, ctx, runner):
        tool = _widget(notes={Platform.FEDORA: ("Restart your session",)})
        ToolRegistry(ctx, tools=[tool]).ensure(tool)
        assert ctx.summary.warnings == ["Restart your session"]

    def test_unknown_tool(self, fedora_registry):
        with pytest.raises(UnknownToolError, match="unknown tool 'nope'"):
            fedora_registry.ensure("nope")


class TestCatalogTools:
    def test_fd_on_fedora_links_fdfind(self, ctx, runner, make_executable, home):
        runner.on("sudo dnf install -y fd-find", effect=lambda _: make_executable("fdfind"))
        registry = ToolRegistry(ctx)

        assert registry.ensure("fd") == EnsureResult.INSTALLED
        link = home / ".local" / "bin" / "fd"
        assert link.is_symlink()
        assert "On Fedora, 'fd' is a symlink to fdfind at ~/.local/bin/fd" in ctx.summary.warnings

        assert registry.ensure("fd") == EnsureResult.ALREADY_PRESENT
        assert runner.count("sudo dnf install -y fd-find") == 1

    def test_existing_fdfind_counts_as_present(self, ctx, runner, make_executable):
        make_executable("fdfind")
        assert ToolRegistry(ctx).ensure("fd") == EnsureResult.ALREADY_PRESENT
        assert runner.calls == []

    def test_eza_from_repository_before_fedora_42(self, ctx, runner):
        runner.on("rpm -E %fedora", stdout="41\n")
        assert ToolRegistry(ctx).ensure("eza") == EnsureResult.INSTALLED
        assert runner.commands == ["rpm -E %fedora", "sudo dnf install -y eza"]

    def test_eza_from_release_on_fedora_42(self, ctx, runner, home):
        def extract(command):
            (Path(shlex.split(command)[-1]) / "eza").write_text("#!/bin/sh\n")

        runner.on("rpm -E %fedora", stdout="42\n")
        runner.on("curl -fsSL", effect=extract)

        assert ToolRegistry(ctx).ensure("eza") == EnsureResult.INSTALLED
        assert (home / ".local" / "bin" / "eza").is_file()
        assert runner.count("sudo dnf install") == 0

    def test_aur_tool_without_helper(self, make_context, runner, capsys):
        ctx = make_context(platform=Platform.ARCH)
        results = ToolRegistry(ctx).ensure_all(["1password", "1password-cli", "starship"])

        assert results == {
            "1password": EnsureResult.UNSUPPORTED,
            "1password-cli": EnsureResult.UNSUPPORTED,
            "starship": EnsureResult.INSTALLED,
        }
        assert runner.commands == ["sudo pacman -S --noconfirm starship"]
        assert ctx.summary.warnings[0].startswith("1password was not installed: No AUR helper found")
        assert "No AUR helper found" in capsys.readouterr().err

    def test_yay_satisfies_paru(self, make_context, runner, make_executable):
        make_executable("yay")
        ctx = make_context(platform=Platform.ARCH)
        assert ToolRegistry(ctx).ensure("paru") == EnsureResult.ALREADY_PRESENT
        assert runner.calls == []

    def test_docker_group_uses_current_user(self, ctx, runner):
        ToolRegistry(ctx).ensure("docker")
        assert runner.commands[-1] == "sudo usermod -aG docker tester"


class TestQueries:
    def test_duplicate_names_rejected(self, ctx):
        with pytest.raises(ValueError, match="Duplicate tool names: widget"):
            ToolRegistry(ctx, tools=[_widget(), _widget()])

    def test_filter_tools(self, fedora_registry):
        core = fedora_registry.tools(stage=Stage.CORE, skip=["bat"])
        assert [t.name for t in core] == [
            "git", "neovim", "eza", "fd", "fzf", "thefuck", "stow",
        ]

        names = [t.name for t in fedora_registry.tools(include_optional=False)]
        assert "1password" not in names
        assert "starship" in names

    def test_scan(self, ctx, make_executable):
        make_executable("git")
        statuses = {s.name: s for s in ToolRegistry(ctx).scan()}

        assert statuses["git"].present
        assert statuses["git"].path.endswith("git")
        assert not statuses["homebrew"].supported
        assert statuses["homebrew"].status_icon == "⚪"
        assert statuses["bat"].status_icon == "❌"
