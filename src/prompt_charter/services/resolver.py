"""Interactive descent from a domain down to a single rules file.

The user picks a domain, then the resolver walks down one directory per
step until it reaches a directory that holds the rules file.  A single
viable child is entered without asking.  There is no way back up: a
directory with nothing viable below it ends the whole resolution.
"""

from __future__ import annotations

import logging

from prompt_charter.domain.entities import NavigationState
from prompt_charter.domain.exceptions import DeadEndError, NoRuleSetsAvailableError
from prompt_charter.domain.ports.choice_prompt import ChoicePrompt
from prompt_charter.domain.ports.progress import ProgressReporter, SilentProgress
from prompt_charter.services.discovery import DiscoveryEngine

logger = logging.getLogger(__name__)

DOMAIN_PROMPT = "Select a domain:"
OPTION_PROMPT = "Select a stack/option:"


class InteractiveResolver:
    """Drives the user from the domain list to one installable rules file."""

    def __init__(
        self,
        engine: DiscoveryEngine,
        prompt: ChoicePrompt,
        progress: ProgressReporter | None = None,
    ) -> None:
        self._engine = engine
        self._prompt = prompt
        self._progress = progress or SilentProgress()

    async def resolve(self) -> str:
        """Return the tree path of the chosen rules file.

        Raises :class:`NoRuleSetsAvailableError` when no domain has a rules
        file and :class:`DeadEndError` when descent cannot continue.
        """
        state = NavigationState(current_path=self._engine.domain_path(await self._select_domain()))

        while not state.resolved:
            await self._step(state)

        rules_path = self._engine.rules_path(state.current_path)
        logger.info("Resolved rule set %s", rules_path)
        return rules_path

    async def _select_domain(self) -> str:
        with self._progress.status("Discovering available rule sets..."):
            domains = await self._engine.available_domains()

        if not domains:
            raise NoRuleSetsAvailableError()

        return self._prompt.select(DOMAIN_PROMPT, domains)

    async def _step(self, state: NavigationState) -> None:
        """Advance *state* by one directory, or mark it resolved."""
        with self._progress.status("Checking for rule sets..."):
            if await self._engine.has_direct_file(state.current_path):
                state.resolved = True
                return
            options = await self._engine.list_first_level_options(state.current_path)

        if not options:
            raise DeadEndError(state.current_path)

        if len(options) == 1:
            logger.debug("Only one option under %s: %s", state.current_path, options[0].name)
            state.descend(options[0].name)
            return

        state.descend(self._prompt.select(OPTION_PROMPT, [o.name for o in options]))
