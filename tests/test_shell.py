"""Tests for default shell provisioning."""

import pytest

from devstrap.errors import CommandError, ProvisionError
from devstrap.installer import ToolRegistry
from devstrap.shell import LOCAL_BIN_EXPORT, ShellProvisioner


def _provisioner(ctx):
    return ShellProvisioner(ctx, ToolRegistry(ctx))


class TestChangeDefaultShell:
    def test_already_default(self, make_context, runner, make_executable, capsys):
        zsh = make_executable("zsh")
        ctx = make_context(environ={"USER": "tester", "SHELL": str(zsh)})

        assert _provisioner(ctx).change_default_shell() is False
        assert runner.calls == []
        out = capsys.readouterr().out
        assert out.count("Default shell is already zsh, skipping...") == 1

    def test_already_default_through_symlink(self, make_context, runner, make_executable, temp_dir):
        zsh = make_executable("zsh")
        (temp_dir / "usr-bin").mkdir()
        link = temp_dir / "usr-bin" / "zsh"
        link.symlink_to(zsh)
        ctx = make_context(environ={"USER": "tester", "SHELL": str(link)})

        assert _provisioner(ctx).change_default_shell() is False
        assert runner.calls == []

    def test_registers_and_changes(self, ctx, runner, make_executable):
        zsh = str(make_executable("zsh"))
        ctx.shells_file.write_text("/bin/sh\n/bin/bash\n")

        assert _provisioner(ctx).change_default_shell() is True

        tee, chsh = runner.calls
        assert tee.command == f"sudo tee -a {ctx.shells_file}"
        assert tee.input == f"{zsh}\n"
        assert chsh.command == f"chsh -s {zsh}"
        assert any("Default shell changed to zsh" in n for n in ctx.summary.notes)

    def test_shell_missing(self, ctx):
        with pytest.raises(ProvisionError, match="zsh is not on PATH"):
            _provisioner(ctx).change_default_shell()

    def test_dry_run_without_shell(self, ctx, runner):
        runner.dry_run = True
        assert _provisioner(ctx).change_default_shell() is True
        assert runner.commands[-1] == "chsh -s /usr/bin/zsh"


class TestRegisterLoginShell:
    def test_already_listed(self, ctx, runner):
        ctx.shells_file.write_text("/bin/bash\n/usr/bin/zsh\n")
        assert _provisioner(ctx).register_login_shell("/usr/bin/zsh") is False
        assert runner.calls == []

    def test_exact_line_match(self, ctx, runner):
        ctx.shells_file.write_text("/usr/bin/zsh-5.9\n")
        assert _provisioner(ctx).register_login_shell("/usr/bin/zsh") is True
        assert runner.count("sudo tee -a") == 1

    def test_missing_shells_file(self, ctx, runner):
        assert _provisioner(ctx).register_login_shell("/usr/bin/zsh") is True
        assert runner.calls[0].input == "/usr/bin/zsh\n"


class TestSetupLocalBin:
    def test_appends_export_once(self, ctx, make_context, home):
        rc = home / ".zshrc"
        rc.write_text("# existing\n")

        assert _provisioner(ctx).setup_local_bin() is True
        assert (home / ".local" / "bin").is_dir()
        assert str(home / ".local" / "bin") == ctx.search_path[0]

        # A fresh run whose $PATH still lacks the directory
        assert _provisioner(make_context()).setup_local_bin() is False
        assert rc.read_text().count(LOCAL_BIN_EXPORT) == 1

    def test_already_on_path(self, make_context, home, bin_dir, capsys):
        rc = home / ".zshrc"
        rc.write_text("")
        ctx = make_context(search_path=[str(home / ".local" / "bin"), str(bin_dir)])

        assert _provisioner(ctx).setup_local_bin() is False
        assert rc.read_text() == ""
        assert "~/.local/bin is already in PATH, skipping..." in capsys.readouterr().out

    def test_export_with_indent_and_comment(self, ctx, home):
        rc = home / ".zshrc"
        original = f"  {LOCAL_BIN_EXPORT}  # user bins\n"
        rc.write_text(original)

        assert _provisioner(ctx).setup_local_bin() is False
        assert rc.read_text() == original

    def test_missing_rc_file(self, ctx, home):
        assert _provisioner(ctx).setup_local_bin() is False
        assert not (home / ".zshrc").exists()
        assert any(LOCAL_BIN_EXPORT in w for w in ctx.summary.warnings)

    def test_dry_run_leaves_files_alone(self, ctx, runner, home):
        runner.dry_run = True
        (home / ".zshrc").write_text("")

        assert _provisioner(ctx).setup_local_bin() is False
        assert (home / ".zshrc").read_text() == ""
        assert not (home / ".local" / "bin").exists()


def test_provision_order(ctx, runner, make_executable, home):
    runner.on("sudo dnf install -y zsh", effect=lambda _: make_executable("zsh"))
    runner.on("sh -c", effect=lambda _: (home / ".oh-my-zsh").mkdir())
    (home / ".zshrc").write_text("")

    _provisioner(ctx).provision()

    commands = runner.commands
    assert commands[0] == "sudo dnf install -y zsh"
    assert commands[1].startswith("sudo tee -a")
    assert commands[2].startswith("chsh -s")
    assert commands[3].startswith("sh -c")
    assert LOCAL_BIN_EXPORT in (home / ".zshrc").read_text()


@pytest.mark.parametrize("failing", ["sudo tee -a", "chsh"])
def test_privileged_failure_stops_provisioning(ctx, runner, make_executable, home, failing):
    make_executable("zsh")
    (home / ".zshrc").write_text("")
    runner.on(failing, returncode=1, stderr="authentication failure")

    with pytest.raises(CommandError):
        _provisioner(ctx).provision()

    assert runner.count(failing) == 1
    assert runner.count("sh -c") == 0
    assert LOCAL_BIN_EXPORT not in (home / ".zshrc").read_text()
    assert not (home / ".local" / "bin").exists()
    assert str(home / ".local" / "bin") not in ctx.search_path


def test_provision_is_idempotent(make_context, runner, make_executable, home):
    zsh = make_executable("zsh")
    (home / ".oh-my-zsh").mkdir()
    ctx = make_context(environ={"USER": "tester", "SHELL": str(zsh)})

    _provisioner(ctx).provision()
    assert runner.calls == []


def test_shell_outside_catalog_must_be_on_path(make_context, runner, make_executable):
    bash = make_executable("bash")
    ctx = make_context(environ={"USER": "tester", "SHELL": str(bash)})

    ShellProvisioner(ctx, ToolRegistry(ctx), shell="bash", framework=None).provision()

    assert runner.calls == []
    assert "bash" not in ctx.summary.tool_results
