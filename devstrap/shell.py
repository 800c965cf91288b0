"""Default login shell provisioning."""

import logging
import os

import click

from devstrap import console
from devstrap.context import ProvisionContext
from devstrap.errors import ProvisionError
from devstrap.installer import ToolRegistry

_logging = logging.getLogger(__name__)

LOCAL_BIN_COMMENT = "# Add ~/.local/bin to PATH"
LOCAL_BIN_EXPORT = 'export PATH="$HOME/.local/bin:$PATH"'

# Startup file that receives the PATH export, per shell
RC_FILES = {
    "zsh": ".zshrc",
    "bash": ".bashrc",
}


class ShellProvisioner:
    """Installs a shell, makes it the login shell and prepares ~/.local/bin.

    Both the /etc/shells append and chsh need elevated privilege; if either
    command fails the CommandError propagates and the run stops.
    """

    def __init__(
        self,
        ctx: ProvisionContext,
        registry: ToolRegistry,
        shell: str = "zsh",
        framework: str | None = "oh-my-zsh",
    ):
        self.ctx = ctx
        self.registry = registry
        self.shell = shell
        self.framework = framework

    @property
    def rc_file(self):
        return self.ctx.home / RC_FILES.get(self.shell, f".{self.shell}rc")

    def provision(self) -> None:
        if self.shell in self.registry:
            self.registry.ensure(self.shell)
        else:
            _logging.debug(f"{self.shell} is not in the tool catalog; expecting it on PATH")
        self.change_default_shell()
        if self.framework:
            self.registry.ensure(self.framework)
        self.setup_local_bin()

    def shell_path(self) -> str:
        path = self.ctx.which(self.shell)
        if path is None:
            if self.ctx.dry_run:
                return f"/usr/bin/{self.shell}"
            raise ProvisionError(f"{self.shell} is not on PATH; cannot make it the default shell")
        return path

    def is_default(self, target: str) -> bool:
        """True if $SHELL resolves to the same file as ``target`` (/bin/zsh may link to /usr/bin/zsh)."""
        current = self.ctx.environ.get("SHELL")
        if not current:
            return False
        return os.path.realpath(current) == os.path.realpath(target)

    def change_default_shell(self) -> bool:
        """Make the shell the user's login shell.

        Returns:
            True if chsh was run, False if the shell was already the default
        """
        target = self.shell_path()
        if self.is_default(target):
            console.info(f"Default shell is already {self.shell}, skipping...")
            return False

        console.info(f"Changing default shell to {self.shell}...")
        self.register_login_shell(target)
        self.ctx.runner.run(["chsh", "-s", target])
        self.ctx.summary.note(
            f"Default shell changed to {self.shell}. Log out and back in "
            "(or restart your terminal) for this to take effect"
        )
        return True

    def registered_shells(self) -> list[str]:
        try:
            text = self.ctx.shells_file.read_text()
        except FileNotFoundError:
            return []
        return [line.strip() for line in text.splitlines() if line.strip()]

    def register_login_shell(self, path: str) -> bool:
        """Append ``path`` to the system shells list unless already listed."""
        if path in self.registered_shells():
            _logging.debug(f"{path} already listed in {self.ctx.shells_file}")
            return False

        console.info(f"Adding {self.shell} to {self.ctx.shells_file}...")
        self.ctx.runner.run(
            ["sudo", "tee", "-a", str(self.ctx.shells_file)],
            input=f"{path}\n",
        )
        return True

    def setup_local_bin(self) -> bool:
        """Create ~/.local/bin and put it on the shell's PATH exactly once.

        Returns:
            True if the export line was appended to the rc file
        """
        local_bin = self.ctx.local_bin
        on_path = self.ctx.on_search_path(local_bin)
        appended = False

        if self.ctx.dry_run:
            click.echo(f"[DRY-RUN] Would create directory: {local_bin}")
        else:
            local_bin.mkdir(parents=True, exist_ok=True)

        if on_path:
            console.info("~/.local/bin is already in PATH, skipping...")
        elif not self.rc_file.exists():
            self.ctx.summary.warn(
                f"{self.rc_file} not found; add '{LOCAL_BIN_EXPORT}' to your shell "
                "startup file manually"
            )
        elif LOCAL_BIN_EXPORT in self.rc_file.read_text():
            _logging.debug(f"PATH export already present in {self.rc_file}")
        else:
            console.info(f"Adding ~/.local/bin to PATH in ~/{self.rc_file.name}...")
            if self.ctx.dry_run:
                click.echo(f"[DRY-RUN] Would append PATH export to {self.rc_file}")
            else:
                with self.rc_file.open("a") as f:
                    f.write(f"\n{LOCAL_BIN_COMMENT}\n{LOCAL_BIN_EXPORT}\n")
                appended = True
                self.ctx.summary.note(f"~/.local/bin has been added to your PATH in ~/{self.rc_file.name}")

        self.ctx.prepend_search_path(local_bin)
        return appended


__all__ = ["ShellProvisioner", "LOCAL_BIN_EXPORT", "LOCAL_BIN_COMMENT"]
