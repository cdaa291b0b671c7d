"""List-rules use case — every installable rule set, grouped by domain."""

from __future__ import annotations

from prompt_charter.domain.entities import RuleSetDescriptor
from prompt_charter.domain.ports.progress import ProgressReporter, SilentProgress
from prompt_charter.domain.ports.tree_provider import TreeProvider
from prompt_charter.services.discovery import (
    DEFAULT_DOMAINS_ROOT,
    DEFAULT_RULES_FILENAME,
    DiscoveryEngine,
)


class ListRulesUseCase:
    def __init__(
        self,
        provider: TreeProvider,
        *,
        progress: ProgressReporter | None = None,
        domains_root: str = DEFAULT_DOMAINS_ROOT,
        rules_filename: str = DEFAULT_RULES_FILENAME,
    ) -> None:
        self._engine = DiscoveryEngine(provider, domains_root, rules_filename)
        self._progress = progress or SilentProgress()

    async def execute(self) -> list[RuleSetDescriptor]:
        with self._progress.status("Discovering rule sets..."):
            return await self._engine.discover_all()


def group_by_domain(descriptors: list[RuleSetDescriptor]) -> dict[str, list[str]]:
    """Map each domain to the display sub-paths of its rule sets, in order.

    A rule set sitting directly in the domain directory keeps the domain
    name as its sub-path.
    """
    grouped: dict[str, list[str]] = {}
    for descriptor in descriptors:
        subpath = descriptor.path.removeprefix(f"{descriptor.domain}/")
        grouped.setdefault(descriptor.domain, []).append(subpath)
    return grouped
