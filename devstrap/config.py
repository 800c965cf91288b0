"""Configuration loading and validation.

User settings live in a YAML file (see devstrap.paths.get_config_path). Every
key is optional; anything left out falls back to the packaged defaults below.
"""

from dataclasses import asdict, dataclass, field
from pathlib import Path

import yaml

from devstrap.errors import DevstrapError
from devstrap.platform import Platform, parse_platform


class ConfigError(DevstrapError):
    """Raised when config loading or parsing fails."""


DEFAULT_SHELL = "zsh"
DEFAULT_DOTFILES_REPO = "https://github.com/guyjin/dotfiles.git"
DEFAULT_DOTFILES_DIR = "~/dotfiles"
DEFAULT_PACKAGES = [
    "btop",
    "ghostty",
    "kitty",
    "nvim",
    "ranger",
    "thefuck",
    "tmux",
    "zellij",
    "zshrc",
]
DEFAULT_PLATFORM_PACKAGES = {
    "macos": ["karabiner"],
    "fedora": ["niri"],
    "arch": ["niri"],
}


@dataclass
class DotfilesSettings:
    repo: str = DEFAULT_DOTFILES_REPO
    directory: str = DEFAULT_DOTFILES_DIR
    packages: list[str] = field(default_factory=lambda: list(DEFAULT_PACKAGES))
    platform_packages: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_PLATFORM_PACKAGES.items()}
    )

    def extras_by_platform(self) -> dict[Platform, list[str]]:
        return {parse_platform(name): names for name, names in self.platform_packages.items()}


@dataclass
class Settings:
    """Root configuration."""
    shell: str = DEFAULT_SHELL
    skip_tools: list[str] = field(default_factory=list)
    include_optional: bool = True
    dotfiles: DotfilesSettings = field(default_factory=DotfilesSettings)

    def to_dict(self) -> dict:
        return asdict(self)


def _require_str(value: object, path: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{path} must be a non-empty string")
    return value


def _require_str_list(value: object, path: str) -> list[str]:
    if not isinstance(value, list):
        raise ConfigError(f"{path} must be a list, got {type(value).__name__}")
    for i, item in enumerate(value):
        _require_str(item, f"{path}[{i}]")
    return list(value)


def _validate_dotfiles(data: object) -> DotfilesSettings:
    if not isinstance(data, dict):
        raise ConfigError(f"dotfiles must be a mapping, got {type(data).__name__}")

    settings = DotfilesSettings()
    if "repo" in data:
        settings.repo = _require_str(data["repo"], "dotfiles.repo")
    if "directory" in data:
        settings.directory = _require_str(data["directory"], "dotfiles.directory")
    if "packages" in data:
        settings.packages = _require_str_list(data["packages"], "dotfiles.packages")
    if "platform_packages" in data:
        raw = data["platform_packages"]
        if not isinstance(raw, dict):
            raise ConfigError(
                f"dotfiles.platform_packages must be a mapping, got {type(raw).__name__}"
            )
        extras = {}
        for name, names in raw.items():
            try:
                parse_platform(str(name))
            except ValueError as e:
                raise ConfigError(f"dotfiles.platform_packages: {e}") from e
            extras[str(name).lower()] = _require_str_list(
                names, f"dotfiles.platform_packages.{name}"
            )
        settings.platform_packages = extras
    return settings


def validate_config(data: object) -> Settings:
    """Validate and convert raw YAML data to Settings.

    Args:
        data: Raw value from yaml.safe_load(); None means an empty file

    Returns:
        Settings with defaults applied for missing keys

    Raises:
        ConfigError: If validation fails, with the offending field path
    """
    if data is None:
        return Settings()
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

    known = {"shell", "skip_tools", "include_optional", "dotfiles"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(map(str, unknown))}")

    settings = Settings()
    if "shell" in data:
        settings.shell = _require_str(data["shell"], "shell")
    if "skip_tools" in data:
        settings.skip_tools = _require_str_list(data["skip_tools"], "skip_tools")
    if "include_optional" in data:
        if not isinstance(data["include_optional"], bool):
            raise ConfigError("include_optional must be a boolean")
        settings.include_optional = data["include_optional"]
    if "dotfiles" in data:
        settings.dotfiles = _validate_dotfiles(data["dotfiles"])
    return settings


def load_config(path: Path | None = None) -> Settings:
    """Load settings from a YAML file.

    A missing file is not an error: packaged defaults are returned.

    Raises:
        ConfigError: If the file cannot be read, parsed or validated
    """
    if path is None:
        from devstrap.paths import get_config_path

        path = get_config_path()

    if not path.exists():
        return Settings()

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error reading config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config syntax error in {path}: {e}") from e

    return validate_config(data)


def dump_config(settings: Settings) -> str:
    return yaml.safe_dump(settings.to_dict(), default_flow_style=False, sort_keys=False)


def save_config(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_config(settings), encoding="utf-8")


__all__ = [
    "ConfigError",
    "DotfilesSettings",
    "Settings",
    "validate_config",
    "load_config",
    "dump_config",
    "save_config",
]
