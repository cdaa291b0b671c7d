"""Adapter wiring for the CLI commands."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import httpx
from rich.console import Console

from prompt_charter.domain.ports.choice_prompt import ChoicePrompt
from prompt_charter.domain.ports.tree_provider import TreeProvider
from prompt_charter.infrastructure.config import Settings
from prompt_charter.infrastructure.github_contents_adapter import RemoteTreeProvider
from prompt_charter.infrastructure.local_fs_adapter import LocalTreeProvider
from prompt_charter.infrastructure.terminal_prompt import ArrowKeyPrompt

logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_provider(
    settings: Settings,
    *,
    local: bool,
    root: Path | None = None,
) -> AsyncIterator[TreeProvider]:
    """Yield the tree backend selected by *local*, closing it afterwards."""
    if local:
        local_root = root.resolve() if root else settings.resolved_local_root()
        logger.debug("Using local rules tree at %s", local_root)
        yield LocalTreeProvider(local_root)
        return

    logger.debug(
        "Using GitHub rules tree %s/%s@%s",
        settings.repo_owner,
        settings.repo_name,
        settings.branch,
    )
    async with httpx.AsyncClient(timeout=httpx.Timeout(settings.http_timeout)) as client:
        yield RemoteTreeProvider(
            client,
            owner=settings.repo_owner,
            repo=settings.repo_name,
            branch=settings.branch,
            api_base_url=settings.api_base_url,
            raw_base_url=settings.raw_base_url,
            user_agent=settings.user_agent,
        )


def build_prompt(console: Console) -> ChoicePrompt:
    return ArrowKeyPrompt(console)
