"""Tests for the GitHub contents API TreeProvider, against a mocked GitHub."""

from __future__ import annotations

import httpx
import pytest

from prompt_charter.domain.entities import Entry, EntryKind
from prompt_charter.domain.exceptions import FetchError
from prompt_charter.infrastructure.github_contents_adapter import RemoteTreeProvider

from conftest import API_BASE, BRANCH, OWNER, RAW_BASE, REPO

CONTENTS = f"{API_BASE}/repos/{OWNER}/{REPO}/contents"


def _provider(transport: httpx.MockTransport) -> RemoteTreeProvider:
    client = httpx.AsyncClient(transport=transport)
    return RemoteTreeProvider(
        client,
        owner=OWNER,
        repo=REPO,
        branch=BRANCH,
        api_base_url=API_BASE,
        raw_base_url=RAW_BASE,
    )


@pytest.mark.asyncio
async def test_lists_directory_entries(github_transport, sample_files):
    provider = _provider(github_transport(sample_files))

    entries = await provider.list_children("domains/mobile/react_native")

    assert entries == [
        Entry("expo", EntryKind.DIRECTORY, "domains/mobile/react_native/expo"),
        Entry("notes.txt", EntryKind.FILE, "domains/mobile/react_native/notes.txt"),
    ]


@pytest.mark.asyncio
async def test_sends_branch_ref():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    provider = _provider(httpx.MockTransport(handler))
    await provider.list_children("domains")

    assert seen[0].url.params["ref"] == BRANCH
    assert seen[0].headers["User-Agent"] == "prompt-charter-cli"


@pytest.mark.asyncio
async def test_not_found_lists_empty(github_transport, sample_files):
    provider = _provider(github_transport(sample_files))

    assert await provider.list_children("domains/does-not-exist") == []


@pytest.mark.asyncio
async def test_file_path_lists_empty(github_transport, sample_files):
    provider = _provider(github_transport(sample_files))

    assert await provider.list_children("domains/web/RULES.md") == []


@pytest.mark.asyncio
async def test_unsupported_entry_types_are_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                {"name": "RULES.md", "type": "file", "path": "domains/web/RULES.md"},
                {"name": "shared", "type": "symlink", "path": "domains/web/shared"},
                {"name": "vendor", "type": "submodule", "path": "domains/web/vendor"},
            ],
        )

    provider = _provider(httpx.MockTransport(handler))

    entries = await provider.list_children("domains/web")

    assert [e.name for e in entries] == ["RULES.md"]


@pytest.mark.asyncio
async def test_follows_pagination_links():
    page2 = f"{CONTENTS}/domains?ref={BRANCH}&page=2"

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("page") == "2":
            return httpx.Response(
                200, json=[{"name": "web", "type": "dir", "path": "domains/web"}]
            )
        return httpx.Response(
            200,
            json=[{"name": "api", "type": "dir", "path": "domains/api"}],
            headers={"Link": f'<{page2}>; rel="next"'},
        )

    provider = _provider(httpx.MockTransport(handler))

    entries = await provider.list_children("domains")

    assert [e.name for e in entries] == ["api", "web"]


@pytest.mark.asyncio
async def test_server_error_raises_fetch_error(github_transport, sample_files):
    overrides = {f"{CONTENTS}/domains?ref={BRANCH}": httpx.Response(500, text="boom")}
    provider = _provider(github_transport(sample_files, overrides=overrides))

    with pytest.raises(FetchError) as info:
        await provider.list_children("domains")

    assert info.value.path == "domains"
    assert "HTTP 500" in info.value.cause


@pytest.mark.asyncio
async def test_rate_limit_names_reset_time(github_transport, sample_files):
    overrides = {
        f"{CONTENTS}/domains?ref={BRANCH}": httpx.Response(
            403,
            headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "0"},
        )
    }
    provider = _provider(github_transport(sample_files, overrides=overrides))

    with pytest.raises(FetchError) as info:
        await provider.list_children("domains")

    assert "rate limit" in info.value.cause
    assert "1970-01-01 00:00:00 UTC" in info.value.cause


@pytest.mark.asyncio
async def test_network_error_raises_fetch_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = _provider(httpx.MockTransport(handler))

    with pytest.raises(FetchError) as info:
        await provider.list_children("domains")

    assert "connection refused" in info.value.cause


@pytest.mark.asyncio
async def test_fetch_file_returns_raw_body(github_transport, sample_files):
    provider = _provider(github_transport(sample_files))

    assert await provider.fetch_file("domains/api/v2/RULES.md") == "# api v2\n"


@pytest.mark.asyncio
async def test_fetch_missing_file_raises_fetch_error(github_transport, sample_files):
    provider = _provider(github_transport(sample_files))

    with pytest.raises(FetchError) as info:
        await provider.fetch_file("domains/nope/RULES.md")

    assert info.value.path == "domains/nope/RULES.md"
    assert "404" in info.value.cause
