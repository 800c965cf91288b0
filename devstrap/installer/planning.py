"""Installation plan rendering."""

from devstrap.platform import Platform

from .models import RiskLevel, Tool
from .steps import infer_risk_level

RISK_ICONS = {
    RiskLevel.SAFE: "🟢",
    RiskLevel.PRIVILEGED: "🟡",
    RiskLevel.DANGEROUS: "🔴",
}


def plan_commands(tool: Tool, platform: Platform) -> list[str]:
    procedure = tool.procedure_for(platform)
    if procedure is None:
        return []
    return [line for step in procedure for line in step.describe(platform)]


def tool_risk(tool: Tool, platform: Platform) -> RiskLevel | None:
    """Highest risk level among the tool's commands on ``platform``."""
    commands = plan_commands(tool, platform)
    if not commands:
        return None
    order = list(RiskLevel)
    return max((infer_risk_level(c.strip()) for c in commands), key=order.index)


def render_plan(tools: list[Tool], platform: Platform) -> str:
    lines = [f"Installation Plan: {platform.display_name}", ""]

    dangerous = [t.name for t in tools if tool_risk(t, platform) == RiskLevel.DANGEROUS]
    if dangerous:
        lines.append("⚠️  The following run remote scripts via curl|sh (review carefully):")
        for name in dangerous:
            lines.append(f"   • {name}")
        lines.append("")

    lines.append("Steps:")
    for i, tool in enumerate(tools, 1):
        commands = plan_commands(tool, platform)
        if not commands:
            lines.append(f"  {i}. ⚪ {tool.name} (unsupported)")
            continue
        label = tool.name + (" (optional)" if tool.optional else "")
        lines.append(f"  {i}. {RISK_ICONS[tool_risk(tool, platform)]} {label}")
        for command in commands:
            lines.append(f"     $ {command}")

    return "\n".join(lines)


__all__ = [
    "RISK_ICONS",
    "plan_commands",
    "tool_risk",
    "render_plan",
]
