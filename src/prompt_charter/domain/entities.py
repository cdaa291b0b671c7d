"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EntryKind(str, Enum):
    """The two node kinds a rules tree is made of."""

    FILE = "file"
    DIRECTORY = "dir"


@dataclass(frozen=True, slots=True)
class Entry:
    """One node of a directory listing, from either backend.

    ``path`` is relative to the tree root and always uses ``/``.
    """

    name: str
    kind: EntryKind
    path: str

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE


@dataclass(frozen=True, slots=True)
class RuleSetDescriptor:
    """A rule set found by full enumeration of a domain."""

    domain: str
    path: str  # containing directory, root prefix stripped
    full_path: str  # the rules file itself


@dataclass(frozen=True, slots=True)
class FirstLevelOption:
    """A child the user may descend into during interactive resolution."""

    name: str
    has_direct_file: bool


@dataclass(slots=True)
class NavigationState:
    """Mutable cursor of the interactive descent."""

    current_path: str
    resolved: bool = False

    def descend(self, name: str) -> None:
        self.current_path = f"{self.current_path}/{name}"


@dataclass(frozen=True, slots=True)
class InstallResult:
    """Outcome of a successful install or update."""

    target: Path
    source_path: str
    line_count: int
    replaced: bool = False
