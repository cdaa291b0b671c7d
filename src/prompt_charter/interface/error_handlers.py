"""Translate domain errors into console messages and exit codes.

Informational outcomes (already installed, nothing to install) exit 0;
everything else exits 1.  Every report names the operation that failed and
the underlying cause.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from prompt_charter.domain.exceptions import (
    DeadEndError,
    FetchError,
    NoRuleSetsAvailableError,
    PromptCharterError,
    RulesAlreadyInstalledError,
    SelectionCancelledError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Outcome:
    style: str
    exit_code: int
    title: str


_EXCEPTION_OUTCOMES: list[tuple[type[PromptCharterError], _Outcome]] = [
    (RulesAlreadyInstalledError, _Outcome("yellow", 0, "Already installed")),
    (NoRuleSetsAvailableError, _Outcome("yellow", 0, "Nothing to install")),
    (SelectionCancelledError, _Outcome("yellow", 1, "Cancelled")),
    (DeadEndError, _Outcome("red", 1, "Dead end")),
    (FetchError, _Outcome("red", 1, "Fetch error")),
]

_NETWORK_TIP = (
    "[dim]Tip: Check your internet connection or try again later.\n"
    "Or use [cyan]--local[/cyan] for local testing.[/dim]"
)


def _outcome_for(exc: BaseException) -> _Outcome | None:
    for exc_type, outcome in _EXCEPTION_OUTCOMES:
        if isinstance(exc, exc_type):
            return outcome
    return None


def report_error(console: Console, operation: str, exc: Exception, *, local: bool = False) -> int:
    """Print a diagnostic for *exc* raised during *operation*; return the exit code."""
    outcome = _outcome_for(exc)

    if outcome is None:
        logger.exception("Unhandled exception during %s", operation)
        console.print(
            Panel(
                f"{escape(operation)} failed unexpectedly: {escape(str(exc))}",
                title="Error",
                border_style="red",
            )
        )
        return 1

    logger.debug("%s during %s: %s", type(exc).__name__, operation, exc)

    if outcome.exit_code == 0:
        console.print(f"[{outcome.style}]⚠️  {escape(str(exc))}[/{outcome.style}]")
        if isinstance(exc, RulesAlreadyInstalledError):
            console.print(
                "[dim]   Use[/dim] [cyan]prompt-charter update[/cyan] [dim]to replace it.[/dim]"
            )
        return 0

    console.print(
        Panel(
            f"{escape(operation)} failed: {escape(str(exc))}",
            title=outcome.title,
            border_style=outcome.style,
        )
    )
    if isinstance(exc, FetchError) and not local:
        console.print(_NETWORK_TIP)
    return outcome.exit_code
