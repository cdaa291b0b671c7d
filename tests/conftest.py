"""Shared fixtures: in-memory rules trees, a fake GitHub, and a scripted prompt."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from prompt_charter.domain.entities import Entry, EntryKind
from prompt_charter.domain.exceptions import FetchError, SelectionCancelledError

OWNER = "acme"
REPO = "charter"
BRANCH = "main"
API_BASE = "https://api.github.test"
RAW_BASE = "https://raw.github.test"


def _children(
    files: dict[str, str], dirs: set[str], path: str
) -> dict[str, EntryKind]:
    """Immediate children of *path* implied by a flat file map plus empty dirs."""
    prefix = f"{path}/" if path else ""
    children: dict[str, EntryKind] = {}
    for file_path in files:
        if file_path.startswith(prefix):
            rest = file_path[len(prefix):]
            name, sep, _ = rest.partition("/")
            children[name] = EntryKind.DIRECTORY if sep else EntryKind.FILE
    for dir_path in dirs:
        if dir_path.startswith(prefix) and dir_path != path:
            name = dir_path[len(prefix):].split("/")[0]
            children.setdefault(name, EntryKind.DIRECTORY)
    return children


def _is_dir(files: dict[str, str], dirs: set[str], path: str) -> bool:
    if path == "" or path in dirs:
        return True
    return any(f.startswith(f"{path}/") for f in files)


class FakeTreeProvider:
    """In-memory TreeProvider; paths in *failing* raise on listing."""

    def __init__(
        self,
        files: dict[str, str],
        dirs: tuple[str, ...] = (),
        failing: tuple[str, ...] = (),
    ) -> None:
        self.files = dict(files)
        self.dirs = set(dirs)
        self.failing = set(failing)
        self.listed: list[str] = []

    async def list_children(self, path: str) -> list[Entry]:
        path = path.strip("/")
        self.listed.append(path)
        if path in self.failing:
            raise FetchError(path, "simulated outage")
        if not _is_dir(self.files, self.dirs, path):
            return []
        prefix = f"{path}/" if path else ""
        return [
            Entry(name=name, kind=kind, path=f"{prefix}{name}")
            for name, kind in sorted(_children(self.files, self.dirs, path).items())
        ]

    async def fetch_file(self, path: str) -> str:
        if path not in self.files:
            raise FetchError(path, "no such file")
        return self.files[path]


class ScriptedPrompt:
    """ChoicePrompt that answers from a script and records what it was asked."""

    def __init__(self, answers: list[str] | None = None) -> None:
        self.answers = list(answers or [])
        self.asked: list[tuple[str, list[str]]] = []

    def select(self, message: str, choices: list[str]) -> str:
        self.asked.append((message, list(choices)))
        if not self.answers:
            raise SelectionCancelledError()
        answer = self.answers.pop(0)
        assert answer in choices, f"{answer!r} not offered in {choices!r}"
        return answer


@pytest.fixture
def fake_tree() -> Callable[..., FakeTreeProvider]:
    return FakeTreeProvider


@pytest.fixture
def scripted_prompt() -> Callable[..., ScriptedPrompt]:
    return ScriptedPrompt


@pytest.fixture
def sample_files() -> dict[str, str]:
    """A small tree exercising flat, nested, multi-choice and empty domains."""
    return {
        "README.md": "# charter\n",
        "domains/web/RULES.md": "# web rules\nline 2\n",
        "domains/api/v1/RULES.md": "# api v1\n",
        "domains/api/v2/RULES.md": "# api v2\n",
        "domains/x/only/RULES.md": "# only\n",
        "domains/mobile/react_native/expo/RULES.md": "# expo\n",
        "domains/mobile/react_native/notes.txt": "not a rules file\n",
        "domains/mobile/flutter/README.md": "no rules here\n",
    }


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[..., Path]:
    """Materialise a file map (plus empty dirs) under ``tmp_path/"mirror"``."""

    def _write(files: dict[str, str], dirs: tuple[str, ...] = ()) -> Path:
        root = tmp_path / "mirror"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        for rel in dirs:
            (root / rel).mkdir(parents=True, exist_ok=True)
        return root

    return _write


@pytest.fixture
def github_transport() -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport that serves a file map like GitHub would."""

    def _build(
        files: dict[str, str],
        dirs: tuple[str, ...] = (),
        overrides: dict[str, httpx.Response] | None = None,
    ) -> httpx.MockTransport:
        dir_set = set(dirs)
        contents_prefix = f"/repos/{OWNER}/{REPO}/contents"
        raw_prefix = f"/{OWNER}/{REPO}/{BRANCH}/"

        def handler(request: httpx.Request) -> httpx.Response:
            url = str(request.url)
            if overrides and url in overrides:
                return overrides[url]

            if request.url.host == httpx.URL(API_BASE).host:
                assert request.url.path.startswith(contents_prefix)
                assert request.headers["Accept"] == "application/vnd.github.v3+json"
                path = request.url.path[len(contents_prefix):].strip("/")
                if path in files:
                    return httpx.Response(
                        200, json={"name": path.rsplit("/", 1)[-1], "type": "file", "path": path}
                    )
                if not _is_dir(files, dir_set, path):
                    return httpx.Response(404, json={"message": "Not Found"})
                prefix = f"{path}/" if path else ""
                return httpx.Response(
                    200,
                    json=[
                        {"name": name, "type": kind.value, "path": f"{prefix}{name}"}
                        for name, kind in sorted(_children(files, dir_set, path).items())
                    ],
                )

            if request.url.host == httpx.URL(RAW_BASE).host:
                path = request.url.path[len(raw_prefix):]
                if path in files:
                    return httpx.Response(200, text=files[path])
                return httpx.Response(404, text="404: Not Found")

            raise AssertionError(f"unexpected request {url}")

        return httpx.MockTransport(handler)

    return _build
