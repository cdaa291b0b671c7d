"""Local filesystem adapter — implements the TreeProvider port over a mirror checkout."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from prompt_charter.domain.entities import Entry, EntryKind
from prompt_charter.domain.exceptions import FetchError

logger = logging.getLogger(__name__)


class LocalTreeProvider:
    """Concrete TreeProvider reading a directory tree rooted at *root*.

    Paths are interpreted relative to *root*; anything that normalises to a
    location outside it is treated as absent.  Entry kinds are decided
    without following symlinks, so a symlinked directory shows up as a file
    and can never create a traversal cycle.
    """

    def __init__(self, root: Path) -> None:
        self._root = Path(os.path.abspath(root))

    @property
    def root(self) -> Path:
        return self._root

    async def list_children(self, path: str) -> list[Entry]:
        """Return the name-sorted children of *path*, or ``[]`` if it is not a directory."""
        target = self._resolve(path)
        if target is None or not target.is_dir():
            logger.debug("No local directory at %s, returning empty listing", path)
            return []

        rel = target.relative_to(self._root).as_posix()
        prefix = "" if rel == "." else f"{rel}/"
        try:
            with os.scandir(target) as it:
                dirents = sorted(it, key=lambda d: d.name)
                return [
                    Entry(
                        name=d.name,
                        kind=(
                            EntryKind.DIRECTORY
                            if d.is_dir(follow_symlinks=False)
                            else EntryKind.FILE
                        ),
                        path=f"{prefix}{d.name}",
                    )
                    for d in dirents
                ]
        except OSError as exc:
            raise FetchError(path, exc.strerror or str(exc)) from exc

    async def fetch_file(self, path: str) -> str:
        """Read the file at *path* as UTF-8 text."""
        target = self._resolve(path)
        if target is None:
            raise FetchError(path, f"path is outside the local root {self._root}")
        try:
            return target.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise FetchError(path, f"no such file: {target}") from exc
        except UnicodeDecodeError as exc:
            raise FetchError(path, f"not valid UTF-8 text: {exc}") from exc
        except OSError as exc:
            raise FetchError(path, exc.strerror or str(exc)) from exc

    def _resolve(self, path: str) -> Path | None:
        """Map a root-relative ``/`` path onto the filesystem, or ``None`` if it escapes."""
        rel = path.replace("\\", "/").strip("/")
        candidate = os.path.normpath(os.path.join(self._root, *rel.split("/")))
        if os.path.commonpath([str(self._root), candidate]) != str(self._root):
            logger.debug("Refusing path outside local root: %s", path)
            return None
        return Path(candidate)
