"""Tool registry: probe-then-install, one tool at a time."""

import logging
from typing import Iterable, Sequence

from devstrap import console
from devstrap.context import ProvisionContext
from devstrap.errors import UnknownToolError

from .catalog import CATALOG
from .models import EnsureResult, Stage, Tool, ToolStatus

_logging = logging.getLogger(__name__)


class ToolRegistry:
    """Maps tool names to their descriptors and installs them on demand.

    ``ensure`` is idempotent: a tool's procedure only runs when its probe
    reports the tool absent, so repeating a run is a no-op for satisfied
    tools.
    """

    def __init__(self, ctx: ProvisionContext, tools: Sequence[Tool] = CATALOG):
        names = [t.name for t in tools]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate tool names: {', '.join(duplicates)}")
        self.ctx = ctx
        self._tools = list(tools)
        self._by_name = {t.name: t for t in tools}

    def __contains__(self, name: str) -> bool:
        return name in self._by_name

    @property
    def names(self) -> list[str]:
        return [t.name for t in self._tools]

    def get(self, name: str) -> Tool:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownToolError(name, self.names) from None

    def tools(
        self,
        stage: Stage | None = None,
        include_optional: bool = True,
        skip: Iterable[str] = (),
    ) -> list[Tool]:
        """Return tools in catalog order, filtered."""
        skipped = set(skip)
        return [
            t
            for t in self._tools
            if (stage is None or t.stage == stage)
            and (include_optional or not t.optional)
            and t.name not in skipped
        ]

    def ensure(self, tool: Tool | str) -> EnsureResult:
        if isinstance(tool, str):
            tool = self.get(tool)
        ctx = self.ctx

        if tool.probe.is_present(ctx):
            console.info(f"{tool.name} is already installed, skipping...")
            result = EnsureResult.ALREADY_PRESENT
        else:
            procedure = tool.procedure_for(ctx.platform)
            if procedure is None:
                message = f"{tool.name} is not supported on {ctx.platform.display_name}, skipping..."
                console.warning(message)
                ctx.summary.warn(f"{tool.name} was not installed: unsupported on {ctx.platform.display_name}")
                result = EnsureResult.UNSUPPORTED
            elif blocker := self._missing_prerequisite(procedure):
                console.error(f"{blocker}. Skipping {tool.name}...")
                ctx.summary.warn(f"{tool.name} was not installed: {blocker}")
                result = EnsureResult.UNSUPPORTED
            else:
                console.info(f"Installing {tool.name}...")
                for step in procedure:
                    _logging.debug(f"{tool.name}: {type(step).__name__}")
                    step.run(ctx)
                for note in tool.notes_for(ctx.platform):
                    ctx.summary.warn(note)
                result = EnsureResult.INSTALLED

        ctx.summary.tool_results[tool.name] = result
        return result

    def _missing_prerequisite(self, procedure) -> str | None:
        for step in procedure:
            reason = step.missing_prerequisite(self.ctx)
            if reason:
                return reason
        return None

    def ensure_all(self, tools: Iterable[Tool | str]) -> dict[str, EnsureResult]:
        results = {}
        for tool in tools:
            name = tool if isinstance(tool, str) else tool.name
            results[name] = self.ensure(tool)
        return results

    def status(self, tool: Tool) -> ToolStatus:
        path = tool.probe.locate(self.ctx)
        return ToolStatus(
            name=tool.name,
            stage=tool.stage,
            present=path is not None,
            supported=tool.supports(self.ctx.platform),
            path=path,
            optional=tool.optional,
        )

    def scan(self, include_optional: bool = True) -> list[ToolStatus]:
        return [self.status(t) for t in self.tools(include_optional=include_optional)]


__all__ = ["ToolRegistry"]
