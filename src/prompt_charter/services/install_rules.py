"""Install-rules use case — resolve a rule set and write it into a project.

The target is ``<project>/.prompt-charter/RULES.md``.  ``install`` refuses
to touch an existing target; ``update`` replaces it.  The write goes
through a temporary file in the target directory, so a failed run never
leaves a partial artifact behind.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

from prompt_charter.domain.entities import InstallResult
from prompt_charter.domain.exceptions import RulesAlreadyInstalledError
from prompt_charter.domain.ports.choice_prompt import ChoicePrompt
from prompt_charter.domain.ports.progress import ProgressReporter, SilentProgress
from prompt_charter.domain.ports.tree_provider import TreeProvider
from prompt_charter.services.discovery import (
    DEFAULT_DOMAINS_ROOT,
    DEFAULT_RULES_FILENAME,
    DiscoveryEngine,
)
from prompt_charter.services.resolver import InteractiveResolver

logger = logging.getLogger(__name__)

DEFAULT_INSTALL_DIR = ".prompt-charter"


class InstallRulesUseCase:
    """Orchestrates resolve → fetch → write.

    Parameters
    ----------
    provider:
        Tree backend to discover and fetch from.
    prompt:
        Interactive choice widget used during resolution.
    project_dir:
        Project receiving the rules file.
    progress:
        Optional spinner/status reporter.
    """

    def __init__(
        self,
        provider: TreeProvider,
        prompt: ChoicePrompt,
        project_dir: Path,
        *,
        progress: ProgressReporter | None = None,
        domains_root: str = DEFAULT_DOMAINS_ROOT,
        rules_filename: str = DEFAULT_RULES_FILENAME,
        install_dir_name: str = DEFAULT_INSTALL_DIR,
    ) -> None:
        self._provider = provider
        self._progress = progress or SilentProgress()
        self._engine = DiscoveryEngine(provider, domains_root, rules_filename)
        self._resolver = InteractiveResolver(self._engine, prompt, self._progress)
        self._target = project_dir / install_dir_name / rules_filename

    @property
    def target(self) -> Path:
        return self._target

    async def execute(self, *, replace: bool = False) -> InstallResult:
        """Run the full flow and return where the rules ended up."""
        existed = self._target.exists()
        if existed and not replace:
            raise RulesAlreadyInstalledError(self._target)

        source_path = await self._resolver.resolve()

        with self._progress.status(f"Downloading {self._engine.rules_filename}..."):
            content = await self._provider.fetch_file(source_path)

        _write_atomically(self._target, content)
        logger.info("Wrote %s (%d chars) from %s", self._target, len(content), source_path)

        return InstallResult(
            target=self._target,
            source_path=source_path,
            line_count=len(content.split("\n")),
            replaced=existed,
        )


def _write_atomically(target: Path, content: str) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(target)
    fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _target_mode(target: Path) -> int:
    """Permission bits for the written file: kept on replace, umask-derived otherwise."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        pass
    # mkstemp creates 0600 files; match what a plain open() would produce
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask
