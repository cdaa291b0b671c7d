"""Port: rules tree provider — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from prompt_charter.domain.entities import Entry


class TreeProvider(Protocol):
    """Abstract contract shared by the remote and local rules trees."""

    async def list_children(self, path: str) -> list[Entry]:
        """Return the immediate children of *path*.

        A missing or empty directory is an empty list, not an error.
        """
        ...

    async def fetch_file(self, path: str) -> str:
        """Return the text content of the file at *path*.

        Raises :class:`~prompt_charter.domain.exceptions.FetchError` when the
        file is missing or cannot be read.
        """
        ...
