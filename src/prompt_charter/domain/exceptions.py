"""Domain exception hierarchy.

Each exception maps to a console message and exit code at the interface
layer.  Inner layers raise these; the CLI error handler translates them.
"""

from __future__ import annotations

from pathlib import Path


class PromptCharterError(Exception):
    """Base exception for the entire application."""


# ── Tree access ─────────────────────────────────────────────────────────────


class FetchError(PromptCharterError):
    """Reading a file, or an unexpected listing failure, in either backend."""

    def __init__(self, path: str, cause: str) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to fetch '{path}': {cause}")


# ── Resolution ──────────────────────────────────────────────────────────────


class NoRuleSetsAvailableError(PromptCharterError):
    """No domain contains a rules file anywhere below it."""

    def __init__(self, message: str = "No rule sets available yet. Check back soon!") -> None:
        super().__init__(message)


class DeadEndError(PromptCharterError):
    """Interactive descent reached a directory with no way forward."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No rule set found on this path: {path}")


class SelectionCancelledError(PromptCharterError):
    """The user dismissed an interactive choice prompt."""

    def __init__(self, message: str = "Selection cancelled") -> None:
        super().__init__(message)


# ── Installation ────────────────────────────────────────────────────────────


class RulesAlreadyInstalledError(PromptCharterError):
    """The project already has an installed rules file."""

    def __init__(self, target: Path) -> None:
        self.target = target
        super().__init__(f"RULES.md already exists at: {target}")
