"""Port: interactive choice prompt."""

from __future__ import annotations

from typing import Protocol


class ChoicePrompt(Protocol):
    """Ask the user to pick exactly one of several labelled choices."""

    def select(self, message: str, choices: list[str]) -> str:
        """Return the chosen label.

        Raises :class:`~prompt_charter.domain.exceptions.SelectionCancelledError`
        if the user aborts.
        """
        ...
