"""Rule-set discovery over a rules tree.

The engine is backend-agnostic: it only talks to the :class:`TreeProvider`
port, so the remote and local trees give identical answers for identical
contents.

The directory an operation is asked about is listed directly, and a provider
failure there propagates as :class:`FetchError`.  Listings made while
searching *below* it go through :meth:`DiscoveryEngine._list_or_empty`,
which treats a failing provider call as an empty directory, so one
unreachable subdirectory removes only its own branch from the results.
"""

from __future__ import annotations

import logging

from prompt_charter.domain.entities import Entry, FirstLevelOption, RuleSetDescriptor
from prompt_charter.domain.ports.tree_provider import TreeProvider

logger = logging.getLogger(__name__)

DEFAULT_DOMAINS_ROOT = "domains"
DEFAULT_RULES_FILENAME = "RULES.md"

CURRENT_DIRECTORY = "."


class DiscoveryEngine:
    """Answers "where are the rule sets?" questions against a TreeProvider.

    Parameters
    ----------
    provider:
        Backend that lists directories.
    domains_root:
        Directory (relative to the tree root) whose children are the domains.
    rules_filename:
        Name of the terminal file that marks a rule set.
    """

    def __init__(
        self,
        provider: TreeProvider,
        domains_root: str = DEFAULT_DOMAINS_ROOT,
        rules_filename: str = DEFAULT_RULES_FILENAME,
    ) -> None:
        self._provider = provider
        self._root = domains_root.strip("/")
        self._rules_filename = rules_filename

    @property
    def domains_root(self) -> str:
        return self._root

    @property
    def rules_filename(self) -> str:
        return self._rules_filename

    def domain_path(self, domain: str) -> str:
        return f"{self._root}/{domain}"

    def rules_path(self, directory: str) -> str:
        return f"{directory}/{self._rules_filename}"

    # ── Containment ─────────────────────────────────────────────────────

    async def has_direct_file(self, path: str) -> bool:
        """True if *path* itself holds the rules file."""
        return self._contains_rules(await self._provider.list_children(path))

    async def subtree_has_terminal_file(self, path: str) -> bool:
        """True if *path* or any directory below it holds the rules file.

        Never raises: an unreachable directory counts as holding nothing.
        """
        return await self._subtree_has(await self._list_or_empty(path))

    async def list_first_level_options(self, path: str) -> list[FirstLevelOption]:
        """Children of *path* the user can descend into.

        ``[FirstLevelOption(".", True)]`` when *path* already holds the rules
        file; otherwise every child directory with a rules file somewhere
        below it, tagged with whether the child holds one directly.
        """
        entries = await self._provider.list_children(path)
        if self._contains_rules(entries):
            return [FirstLevelOption(name=CURRENT_DIRECTORY, has_direct_file=True)]

        options: list[FirstLevelOption] = []
        for child in (e for e in entries if e.is_dir):
            child_entries = await self._list_or_empty(child.path)
            direct = self._contains_rules(child_entries)
            if direct or await self._subtree_has(child_entries):
                options.append(FirstLevelOption(name=child.name, has_direct_file=direct))
        return options

    async def available_domains(self) -> list[str]:
        """Domain names that lead to at least one rules file."""
        domains: list[str] = []
        for entry in await self._provider.list_children(self._root):
            if entry.is_dir and await self.subtree_has_terminal_file(entry.path):
                domains.append(entry.name)
        logger.debug("Available domains: %s", domains)
        return domains

    # ── Enumeration ─────────────────────────────────────────────────────

    async def enumerate_all(self, domain: str, base_path: str) -> list[RuleSetDescriptor]:
        """Every rule set under *base_path*, one per shallowest holding directory."""
        base_path = base_path.rstrip("/")
        found: list[RuleSetDescriptor] = []
        entries = await self._provider.list_children(base_path)
        await self._traverse(domain, base_path, entries, found)
        return found

    async def discover_all(self) -> list[RuleSetDescriptor]:
        """Enumerate every available domain, in listing order."""
        descriptors: list[RuleSetDescriptor] = []
        for domain in await self.available_domains():
            descriptors.extend(await self.enumerate_all(domain, self.domain_path(domain)))
        logger.info("Discovered %d rule set(s)", len(descriptors))
        return descriptors

    async def _traverse(
        self,
        domain: str,
        path: str,
        entries: list[Entry],
        found: list[RuleSetDescriptor],
    ) -> None:
        if self._contains_rules(entries):
            found.append(
                RuleSetDescriptor(
                    domain=domain,
                    path=self._strip_root(path),
                    full_path=self.rules_path(path),
                )
            )
            return

        for child in entries:
            if child.is_dir:
                child_entries = await self._list_or_empty(child.path)
                await self._traverse(domain, child.path, child_entries, found)

    # ── Helpers ─────────────────────────────────────────────────────────

    async def _subtree_has(self, entries: list[Entry]) -> bool:
        if self._contains_rules(entries):
            return True
        for child in entries:
            if child.is_dir and await self.subtree_has_terminal_file(child.path):
                return True
        return False

    def _contains_rules(self, entries: list[Entry]) -> bool:
        return any(e.is_file and e.name == self._rules_filename for e in entries)

    def _strip_root(self, path: str) -> str:
        prefix = f"{self._root}/"
        return path[len(prefix):] if path.startswith(prefix) else path

    async def _list_or_empty(self, path: str) -> list[Entry]:
        """List *path*, treating any provider failure as an empty directory."""
        try:
            return await self._provider.list_children(path)
        except Exception as exc:
            logger.warning("Could not list %s, treating it as empty: %s", path, exc)
            return []
