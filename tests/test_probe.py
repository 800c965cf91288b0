"""Tests for capability probes."""

import pytest

from devstrap.probe import Probe, directory, executable


def test_executable_on_search_path(ctx, make_executable):
    path = make_executable("git")
    probe = executable("git")

    assert probe.is_present(ctx)
    assert probe.locate(ctx) == str(path)


def test_missing_executable(ctx):
    assert not executable("git").is_present(ctx)


def test_non_executable_file_is_ignored(ctx, bin_dir):
    (bin_dir / "git").write_text("not executable")
    assert not executable("git").is_present(ctx)


def test_alternate_names(ctx, make_executable):
    path = make_executable("fdfind")
    probe = executable("fd", "fdfind")

    assert probe.locate(ctx) == str(path)


def test_first_alternate_preferred(ctx, make_executable):
    paru = make_executable("paru")
    make_executable("yay")

    assert executable("paru", "yay").locate(ctx) == str(paru)


def test_directory_marker_expands_home(ctx, home):
    (home / ".oh-my-zsh").mkdir()
    probe = directory("~/.oh-my-zsh")

    assert probe.locate(ctx) == str(home / ".oh-my-zsh")


def test_mixed_probe_falls_back_to_directory(ctx, home):
    (home / ".nvm").mkdir()
    assert Probe(executables=("nvm",), directories=("~/.nvm",)).is_present(ctx)


def test_search_path_grows(ctx, make_executable, temp_dir):
    extra = temp_dir / "extra"
    make_executable("eza", directory=extra)
    assert not executable("eza").is_present(ctx)

    ctx.prepend_search_path(extra)
    assert executable("eza").is_present(ctx)


def test_empty_probe_rejected():
    with pytest.raises(ValueError):
        Probe()


def test_describe():
    assert Probe(executables=("nvm",), directories=("~/.nvm",)).describe() == "which nvm || dir ~/.nvm"
