"""Installer registry: tool descriptors, install steps and the catalog."""

from .catalog import CATALOG, SYSTEM_UPDATE
from .models import (
    EnsureResult,
    Procedure,
    RiskLevel,
    Stage,
    Tool,
    ToolStatus,
)
from .planning import plan_commands, render_plan, tool_risk
from .registry import ToolRegistry
from .steps import (
    AurBuild,
    AurInstall,
    CompatSymlink,
    EnsureDir,
    Install,
    ReleaseDownload,
    Run,
    Script,
    Step,
    VersionGate,
    find_aur_helper,
    infer_risk_level,
)

__all__ = [
    "CATALOG",
    "SYSTEM_UPDATE",
    "EnsureResult",
    "Procedure",
    "RiskLevel",
    "Stage",
    "Tool",
    "ToolStatus",
    "ToolRegistry",
    "plan_commands",
    "render_plan",
    "tool_risk",
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
    "find_aur_helper",
    "infer_risk_level",
]
