"""Tests for release version resolution."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from tailwind_runtime.binaries.releases import (
    fetch_latest_release_version,
    read_latest_record,
    resolve_version,
    write_latest_record,
)
from tailwind_runtime.config import TailwindConfig
from tailwind_runtime.errors import DownloadFailedError, VersionNotFoundError
from tailwind_runtime.types import TailwindVersion

LATEST_PATH = "/repos/tailwindlabs/tailwindcss/releases/latest"


@pytest.mark.asyncio
async def test_fetch_latest_release_version(release, config):
    release.latest = "4.1.3"
    assert await fetch_latest_release_version(config) == "4.1.3"


@pytest.mark.asyncio
async def test_fetch_latest_release_not_found(release, config):
    with pytest.raises(VersionNotFoundError):
        await fetch_latest_release_version(config)


@pytest.mark.asyncio
async def test_fetch_latest_release_retries(release, config):
    release.latest = "4.1.3"
    release.fail(LATEST_PATH, 502)

    version = await fetch_latest_release_version(config.with_overrides(max_retries=1))

    assert version == "4.1.3"
    assert release.count(LATEST_PATH) == 2


@pytest.mark.asyncio
async def test_fetch_latest_release_gives_up(release, config):
    release.latest = "4.1.3"
    release.fail(LATEST_PATH, 503, 503)

    with pytest.raises(DownloadFailedError):
        await fetch_latest_release_version(config.with_overrides(max_retries=1))


@pytest.mark.asyncio
async def test_fetch_latest_release_rate_limited(release, config):
    release.latest = "4.1.3"
    release.fail(LATEST_PATH, 403)

    with pytest.raises(DownloadFailedError) as exc_info:
        await fetch_latest_release_version(config.with_overrides(max_retries=3))

    assert exc_info.value.last_error.status == 403
    assert release.count(LATEST_PATH) == 1


def test_latest_record_round_trip(tmp_path):
    write_latest_record(tmp_path, "4.1.3", now=1000.0)

    assert read_latest_record(tmp_path, ttl=60, now=1030.0) == "4.1.3"
    assert read_latest_record(tmp_path, ttl=60, now=1060.0) is None
    assert read_latest_record(tmp_path, ttl=0, now=1000.0) is None
    assert [p.name for p in tmp_path.iterdir()] == ["latest.json"]


@pytest.mark.parametrize(
    "content",
    ["not json", "{}", json.dumps({"version": 4, "resolved_at": 0}), json.dumps([1, 2])],
)
def test_corrupt_latest_record_ignored(tmp_path, content):
    (tmp_path / "latest.json").write_text(content)
    assert read_latest_record(tmp_path, ttl=1e12, now=1.0) is None


@pytest.mark.asyncio
async def test_resolve_pinned_version_offline(tmp_path):
    with patch(
        "tailwind_runtime.binaries.releases.fetch_latest_release_version",
        new_callable=AsyncMock,
    ) as lookup:
        version = await resolve_version(TailwindVersion.fixed("v3.4.17"), tmp_path, TailwindConfig())

    assert version == "3.4.17"
    lookup.assert_not_awaited()


@pytest.mark.asyncio
async def test_resolve_latest_writes_record(tmp_path):
    with patch(
        "tailwind_runtime.binaries.releases.fetch_latest_release_version",
        new_callable=AsyncMock,
        return_value="4.1.3",
    ) as lookup:
        first = await resolve_version(TailwindVersion.latest(), tmp_path, TailwindConfig())
        second = await resolve_version(TailwindVersion.latest(), tmp_path, TailwindConfig())

    assert first == second == "4.1.3"
    assert lookup.await_count == 1
    assert json.loads((tmp_path / "latest.json").read_text())["version"] == "4.1.3"
