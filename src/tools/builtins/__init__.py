from __future__ import annotations

from src.tools.builtins import branches, code, pulls, releases, repos, teams, workflows
from src.tools.registry import ToolRegistry

CATALOG_MODULES = (repos, branches, pulls, code, releases, workflows, teams)


def register_builtins(registry: ToolRegistry) -> None:
    """Register every built-in GitHub tool with the registry.

    Registration order follows CATALOG_MODULES so tools/list output is stable.
    """
    for module in CATALOG_MODULES:
        for tool in module.TOOLS:
            registry.register(tool)


def build_registry() -> ToolRegistry:
    registry = ToolRegistry()
    register_builtins(registry)
    return registry
