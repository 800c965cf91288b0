"""Built-in tool catalog.

One declarative table covers every supported platform. Order matters:
tools are installed in catalog order, and later procedures rely on the
shell, ~/.local/bin and the AUR helper from earlier stages.
"""

from devstrap.platform import Platform
from devstrap.probe import directory, executable, Probe

from .models import Stage, Tool
from .steps import (
    AurBuild,
    CompatSymlink,
    EnsureDir,
    ReleaseDownload,
    VersionGate,
    aur,
    cask,
    install,
    run,
    script,
)

MACOS = Platform.MACOS
FEDORA = Platform.FEDORA
ARCH = Platform.ARCH

# Fedora dropped eza from its official repositories in this release
EZA_REPO_DROPPED_RELEASE = "42"
EZA_RELEASE_URL = (
    "https://github.com/eza-community/eza/releases/latest/download/"
    "eza_{arch}-unknown-linux-gnu.tar.gz"
)
PARU_AUR_REPO = "https://aur.archlinux.org/paru-bin.git"
OH_MY_ZSH_INSTALL = (
    'sh -c "$(curl -fsSL https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/'
    'master/tools/install.sh)" "" --unattended'
)
HOMEBREW_INSTALL = (
    '/bin/bash -c "$(curl -fsSL '
    'https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh)"'
)
NVM_INSTALL = (
    "curl -o- https://raw.githubusercontent.com/nvm-sh/nvm/v0.39.7/install.sh | bash"
)
ONEPASSWORD_KEY = "https://downloads.1password.com/linux/keys/1password.asc"
ONEPASSWORD_REPO = f"""[1password]
name=1Password Stable Channel
baseurl=https://downloads.1password.com/linux/rpm/stable/$basearch
enabled=1
gpgcheck=1
repo_gpgcheck=1
gpgkey="{ONEPASSWORD_KEY}"
"""

DOCKER_GROUP_NOTE = (
    "If you installed Docker, log out and back in for docker group membership "
    "to take effect"
)

# Commands that refresh the system before anything is installed
SYSTEM_UPDATE = {
    FEDORA: (run("sudo", "dnf", "update", "-y"),),
    ARCH: (run("sudo", "pacman", "-Syu", "--noconfirm"),),
}


def _everywhere(*packages: str) -> dict:
    """Same package names from every platform's package manager."""
    step = install(*packages)
    return {MACOS: (step,), FEDORA: (step,), ARCH: (step,)}


def _simple(name: str, stage: Stage, description: str, binary: str | None = None) -> Tool:
    return Tool(
        name=name,
        probe=executable(binary or name),
        stage=stage,
        procedures=_everywhere(name),
        description=description,
    )


def _copr(repo: str, package: str) -> tuple:
    return (
        install("dnf-command(copr)"),
        run("sudo", "dnf", "copr", "enable", "-y", repo),
        install(package),
    )


def _docker_linux(*packages: str) -> tuple:
    return (
        install(*packages),
        run("sudo", "systemctl", "enable", "docker"),
        run("sudo", "systemctl", "start", "docker"),
        run("sudo", "usermod", "-aG", "docker", "{user}"),
    )


CATALOG: tuple[Tool, ...] = (
    # Package-manager bootstrap
    Tool(
        name="homebrew",
        probe=executable("brew"),
        stage=Stage.BOOTSTRAP,
        procedures={MACOS: (script(HOMEBREW_INSTALL),)},
        description="macOS package manager",
    ),
    Tool(
        name="paru",
        probe=executable("paru", "yay"),
        stage=Stage.BOOTSTRAP,
        procedures={
            ARCH: (
                run("sudo", "pacman", "-S", "--needed", "--noconfirm", "base-devel", "git"),
                AurBuild(PARU_AUR_REPO),
            )
        },
        description="AUR helper (skipped when yay is present)",
    ),
    # Shell
    _simple("zsh", Stage.SHELL, "Z shell"),
    Tool(
        name="oh-my-zsh",
        probe=directory("~/.oh-my-zsh"),
        stage=Stage.SHELL,
        procedures={p: (script(OH_MY_ZSH_INSTALL),) for p in (MACOS, FEDORA, ARCH)},
        description="zsh configuration framework",
    ),
    # Core utilities
    _simple("git", Stage.CORE, "Version control"),
    _simple("neovim", Stage.CORE, "Editor", binary="nvim"),
    Tool(
        name="eza",
        probe=executable("eza"),
        stage=Stage.CORE,
        procedures={
            MACOS: (install("eza"),),
            FEDORA: (
                VersionGate(
                    query="rpm -E %fedora",
                    threshold=EZA_REPO_DROPPED_RELEASE,
                    below=(install("eza"),),
                    at_or_above=(ReleaseDownload("eza", EZA_RELEASE_URL),),
                    notice=(
                        f"Fedora {EZA_REPO_DROPPED_RELEASE}+ detected. "
                        "Installing eza from GitHub releases..."
                    ),
                ),
            ),
            ARCH: (install("eza"),),
        },
        description="Modern ls",
    ),
    Tool(
        name="fd",
        probe=executable("fd", "fdfind"),
        stage=Stage.CORE,
        procedures={
            MACOS: (install("fd"),),
            FEDORA: (install("fd-find"), CompatSymlink("fd", "fdfind")),
            ARCH: (install("fd"),),
        },
        description="Modern find",
        notes={FEDORA: ("On Fedora, 'fd' is a symlink to fdfind at ~/.local/bin/fd",)},
    ),
    _simple("bat", Stage.CORE, "cat with syntax highlighting"),
    _simple("fzf", Stage.CORE, "Fuzzy finder"),
    _simple("thefuck", Stage.CORE, "Command corrector"),
    _simple("stow", Stage.CORE, "Symlink farm manager"),
    # Development tools
    Tool(
        name="docker",
        probe=executable("docker"),
        stage=Stage.DEVELOPER,
        procedures={
            MACOS: (cask("docker"),),
            FEDORA: _docker_linux("moby-engine", "docker-compose"),
            ARCH: _docker_linux("docker", "docker-compose"),
        },
        description="Container runtime",
        notes={FEDORA: (DOCKER_GROUP_NOTE,), ARCH: (DOCKER_GROUP_NOTE,)},
    ),
    Tool(
        name="lazygit",
        probe=executable("lazygit"),
        stage=Stage.DEVELOPER,
        procedures={
            MACOS: (install("lazygit"),),
            FEDORA: _copr("dejan/lazygit", "lazygit"),
            ARCH: (install("lazygit"),),
        },
        description="Git TUI",
    ),
    Tool(
        name="lazydocker",
        probe=executable("lazydocker"),
        stage=Stage.DEVELOPER,
        procedures={
            MACOS: (install("lazydocker"),),
            FEDORA: _copr("atim/lazydocker", "lazydocker"),
            ARCH: (install("lazydocker"),),
        },
        description="Docker TUI",
    ),
    # Version managers
    Tool(
        name="nvm",
        probe=Probe(executables=("nvm",), directories=("~/.nvm",)),
        stage=Stage.VERSION_MANAGERS,
        procedures={
            MACOS: (install("nvm"), EnsureDir("~/.nvm")),
            FEDORA: (script(NVM_INSTALL),),
            ARCH: (script(NVM_INSTALL),),
        },
        description="Node version manager",
    ),
    Tool(
        name="rbenv",
        probe=executable("rbenv"),
        stage=Stage.VERSION_MANAGERS,
        procedures={
            MACOS: (install("rbenv", "ruby-build"),),
            FEDORA: (install("rbenv"),),
            ARCH: (install("rbenv"),),
        },
        description="Ruby version manager",
    ),
    Tool(
        name="mise",
        probe=executable("mise"),
        stage=Stage.VERSION_MANAGERS,
        procedures={
            MACOS: (install("mise"),),
            FEDORA: (script("curl https://mise.run | sh"),),
            ARCH: (script("curl https://mise.run | sh"),),
        },
        description="Polyglot tool version manager",
    ),
    # Password management
    Tool(
        name="1password",
        probe=executable("1password"),
        stage=Stage.CREDENTIALS,
        procedures={
            MACOS: (cask("1password"),),
            FEDORA: (
                run("sudo", "rpm", "--import", ONEPASSWORD_KEY),
                run("sudo", "tee", "/etc/yum.repos.d/1password.repo", stdin=ONEPASSWORD_REPO),
                install("1password"),
            ),
            ARCH: (aur("1password"),),
        },
        description="Password manager",
        optional=True,
    ),
    Tool(
        name="1password-cli",
        probe=executable("op"),
        stage=Stage.CREDENTIALS,
        procedures={
            MACOS: (cask("1password-cli"),),
            FEDORA: (install("1password-cli"),),
            ARCH: (aur("1password-cli"),),
        },
        description="Password manager CLI",
        optional=True,
    ),
    # Shell enhancements
    Tool(
        name="starship",
        probe=executable("starship"),
        stage=Stage.SHELL_ENHANCEMENTS,
        procedures={
            MACOS: (install("starship"),),
            FEDORA: (script("curl -sS https://starship.rs/install.sh | sh -s -- -y"),),
            ARCH: (install("starship"),),
        },
        description="Shell prompt",
    ),
    _simple("zoxide", Stage.SHELL_ENHANCEMENTS, "Smarter cd"),
    _simple("fastfetch", Stage.SHELL_ENHANCEMENTS, "System information"),
)


__all__ = ["CATALOG", "SYSTEM_UPDATE", "EZA_REPO_DROPPED_RELEASE"]
