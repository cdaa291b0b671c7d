"""GitHub contents API adapter — implements the TreeProvider port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from prompt_charter.domain.entities import Entry, EntryKind
from prompt_charter.domain.exceptions import FetchError

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_RAW_BASE = "https://raw.githubusercontent.com"

_KINDS: dict[str, EntryKind] = {
    "file": EntryKind.FILE,
    "dir": EntryKind.DIRECTORY,
}


class RemoteTreeProvider:
    """Concrete TreeProvider backed by a GitHub repository at a fixed branch."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        owner: str,
        repo: str,
        branch: str = "main",
        *,
        api_base_url: str = _GITHUB_API,
        raw_base_url: str = _RAW_BASE,
        user_agent: str = "prompt-charter-cli",
    ) -> None:
        self._client = client
        self._owner = owner
        self._repo = repo
        self._branch = branch
        self._api_base = api_base_url.rstrip("/")
        self._raw_base = raw_base_url.rstrip("/")
        self._user_agent = user_agent
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": user_agent,
        }

    async def list_children(self, path: str) -> list[Entry]:
        """GET /repos/{owner}/{repo}/contents/{path}?ref={branch} → [Entry].

        404 means "nothing here" and yields an empty list.  A path naming a
        file comes back as a single JSON object and is treated the same way.
        """
        path = path.strip("/")
        url: str | None = (
            f"{self._api_base}/repos/{self._owner}/{self._repo}/contents/{path}"
        )
        params: dict[str, str] | None = {"ref": self._branch}
        entries: list[Entry] = []

        while url is not None:
            resp = await self._api_get(url, path, params)
            if resp is None:
                return []

            try:
                data: Any = resp.json()
            except ValueError as exc:
                raise FetchError(path, f"invalid JSON from GitHub API: {exc}") from exc

            if not isinstance(data, list):
                logger.debug("%s is not a directory, returning empty listing", path)
                return []

            entries.extend(self._to_entries(data))

            # Link headers carry the query string, so params are dropped.
            url = resp.links.get("next", {}).get("url")
            params = None

        return entries

    async def fetch_file(self, path: str) -> str:
        """Fetch raw file content via raw.githubusercontent.com."""
        path = path.strip("/")
        raw_url = f"{self._raw_base}/{self._owner}/{self._repo}/{self._branch}/{path}"
        try:
            resp = await self._client.get(
                raw_url,
                headers={"User-Agent": self._user_agent},
            )
        except httpx.HTTPError as exc:
            raise FetchError(path, f"network error fetching {raw_url}: {exc}") from exc

        if resp.status_code == 200:
            return resp.text

        if resp.status_code == 404:
            raise FetchError(path, "file not found (HTTP 404)")

        raise FetchError(
            path, f"raw.githubusercontent.com returned HTTP {resp.status_code}"
        )

    # ── Internals ───────────────────────────────────────────────────────

    @staticmethod
    def _to_entries(items: list[dict[str, Any]]) -> list[Entry]:
        entries: list[Entry] = []
        for item in items:
            kind = _KINDS.get(item.get("type", ""))
            if kind is None:
                logger.debug(
                    "Skipping %s (unsupported type %r)", item.get("path"), item.get("type")
                )
                continue
            entries.append(Entry(name=item["name"], kind=kind, path=item["path"]))
        return entries

    async def _api_get(
        self,
        url: str,
        path: str,
        params: dict[str, str] | None,
    ) -> httpx.Response | None:
        """Perform a contents API GET; ``None`` stands for a 404."""
        try:
            resp = await self._client.get(url, headers=self._api_headers, params=params)
        except httpx.HTTPError as exc:
            raise FetchError(path, f"network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 404:
            logger.debug("No such directory on GitHub: %s", path)
            return None

        if resp.status_code == 403 and resp.headers.get("x-ratelimit-remaining") == "0":
            reset_raw = resp.headers.get("x-ratelimit-reset", "")
            try:
                reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                    "%Y-%m-%d %H:%M:%S UTC"
                )
            except (ValueError, OSError):
                reset_str = reset_raw or "unknown"
            raise FetchError(path, f"GitHub API rate limit exceeded. Resets at {reset_str}.")

        raise FetchError(path, f"GitHub API returned HTTP {resp.status_code} for {url}")
