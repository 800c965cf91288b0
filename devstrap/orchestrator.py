"""End-to-end provisioning run."""

import logging
from dataclasses import dataclass, field

from devstrap import console
from devstrap.context import ProvisionContext, RunSummary
from devstrap.dotfiles import DotfileLinker
from devstrap.errors import PlatformError
from devstrap.installer import SYSTEM_UPDATE, EnsureResult, Stage, ToolRegistry
from devstrap.installer.steps import find_aur_helper
from devstrap.platform import Platform
from devstrap.shell import ShellProvisioner

_logging = logging.getLogger(__name__)

# Stages installed after the shell is in place, in order
TOOL_STAGES = (
    (Stage.CORE, "Installing command-line utilities..."),
    (Stage.DEVELOPER, "Installing development tools..."),
    (Stage.VERSION_MANAGERS, "Installing version managers..."),
    (Stage.CREDENTIALS, "Installing password management tools..."),
    (Stage.SHELL_ENHANCEMENTS, "Installing shell enhancements..."),
)


@dataclass
class ProvisionOptions:
    skip_tools: frozenset[str] = field(default_factory=frozenset)
    include_optional: bool = True
    update_system: bool = True
    setup_shell: bool = True
    link_dotfiles: bool = True
    pull_dotfiles: bool | None = None

    @classmethod
    def from_settings(cls, ctx: ProvisionContext, **overrides) -> "ProvisionOptions":
        settings = ctx.settings
        options = cls(
            skip_tools=frozenset(settings.skip_tools),
            include_optional=settings.include_optional,
        )
        for key, value in overrides.items():
            setattr(options, key, value)
        return options


def update_system(ctx: ProvisionContext) -> None:
    steps = SYSTEM_UPDATE.get(ctx.platform, ())
    if steps:
        console.info("Updating system packages...")
    for step in steps:
        step.run(ctx)


def provision(
    ctx: ProvisionContext,
    registry: ToolRegistry | None = None,
    options: ProvisionOptions | None = None,
) -> RunSummary:
    """Run every provisioning stage in order and print the completion report.

    Fail-fast: a failing external command raises CommandError out of this
    function, leaving earlier changes in place. Unsupported tools and stow
    conflicts are recorded on the summary and do not stop the run.

    Raises:
        PlatformError: If the context platform is UNKNOWN
        CommandError: If any external command fails
        ProvisionError: If a step cannot complete
    """
    if ctx.platform == Platform.UNKNOWN:
        raise PlatformError("Unsupported OS. This tool supports macOS, Fedora and Arch only.")

    registry = registry or ToolRegistry(ctx)
    options = options or ProvisionOptions.from_settings(ctx)

    console.info("Starting installation of utilities...")
    console.blank()

    if options.update_system:
        update_system(ctx)
    registry.ensure_all(registry.tools(stage=Stage.BOOTSTRAP, skip=options.skip_tools))

    framework = "oh-my-zsh" if ctx.settings.shell == "zsh" else None
    shell = ShellProvisioner(ctx, registry, shell=ctx.settings.shell, framework=framework)
    console.blank()
    if options.setup_shell:
        console.info(f"Installing {ctx.settings.shell} and its framework...")
        shell.provision()
    else:
        # Tools installed to ~/.local/bin must stay discoverable
        shell.setup_local_bin()

    for stage, heading in TOOL_STAGES:
        tools = registry.tools(
            stage=stage,
            include_optional=options.include_optional,
            skip=options.skip_tools,
        )
        if not tools:
            continue
        console.blank()
        console.info(heading)
        registry.ensure_all(tools)

    if options.link_dotfiles:
        console.blank()
        console.info("Setting up dotfiles with stow...")
        DotfileLinker.from_settings(ctx).run(pull=options.pull_dotfiles)

    render_summary(ctx)
    return ctx.summary


def render_summary(ctx: ProvisionContext) -> None:
    summary = ctx.summary
    results = list(summary.tool_results.values())

    console.blank()
    console.info("Installation complete!")
    console.info(
        f"Tools: {results.count(EnsureResult.INSTALLED)} installed, "
        f"{results.count(EnsureResult.ALREADY_PRESENT)} already present, "
        f"{results.count(EnsureResult.UNSUPPORTED)} unsupported"
    )
    for note in summary.notes:
        console.info(note)
    console.info(
        f"After logging back in, run 'source ~/.{ctx.settings.shell}rc' to apply all configurations"
    )

    if ctx.platform == Platform.ARCH:
        helper = find_aur_helper(ctx)
        if helper:
            console.info(f"AUR helper installed: {helper}")

    if summary.warnings:
        console.blank()
        for message in summary.warnings:
            console.warning(f"Note: {message}")


__all__ = ["ProvisionOptions", "provision", "render_summary", "update_system"]
