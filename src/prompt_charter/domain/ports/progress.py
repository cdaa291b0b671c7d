"""Port: progress reporting for long-running discovery steps."""

from __future__ import annotations

from contextlib import AbstractContextManager, nullcontext
from typing import Any, Protocol


class ProgressReporter(Protocol):
    """Shows a transient status (e.g. a spinner) while a step runs."""

    def status(self, message: str) -> AbstractContextManager[Any]:
        ...


class SilentProgress:
    """A ``ProgressReporter`` that shows nothing."""

    def status(self, message: str) -> AbstractContextManager[Any]:
        return nullcontext()
