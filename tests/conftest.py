import hashlib
import os
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from tailwind_runtime.binaries.platforms import resolve_platform
from tailwind_runtime.config import TailwindConfig
from tailwind_runtime.types import PlatformInfo

LINUX_X64 = resolve_platform("Linux", "x86_64")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("TAILWIND_RUNTIME_NETWORK_TESTS") == "1":
        return
    skip_network = pytest.mark.skip(reason="set TAILWIND_RUNTIME_NETWORK_TESTS=1 to run")
    for item in items:
        if "network" in item.keywords:
            item.add_marker(skip_network)


class FakeRelease:
    """In-memory GitHub release tree served over HTTP"""

    def __init__(self):
        self.assets: Dict[str, bytes] = {}
        self.failures: Dict[str, List[int]] = {}
        self.requests: List[str] = []
        self.latest: Optional[str] = None
        self.base_url = ""

    @property
    def download_base(self) -> str:
        return f"{self.base_url}/download"

    def asset_path(self, version: str, name: str) -> str:
        return f"/download/v{version}/{name}"

    def publish(
        self,
        version: str,
        platform_info: PlatformInfo = LINUX_X64,
        payload: bytes = b"#!/bin/sh\necho tailwind\n",
        manifest: Optional[str] = None,
    ) -> bytes:
        digest = hashlib.sha256(payload).hexdigest()
        if manifest is None:
            manifest = (
                f"{'0' * 64}  ./tailwindcss-macos-arm64\n"
                f"{digest}  ./{platform_info.artifact_name}\n"
            )
        self.assets[self.asset_path(version, platform_info.artifact_name)] = payload
        self.assets[self.asset_path(version, "sha256sums.txt")] = manifest.encode()
        return payload

    def fail(self, path: str, *statuses: int) -> None:
        self.failures.setdefault(path, []).extend(statuses)

    def count(self, path: str) -> int:
        return self.requests.count(path)

    def make_app(self) -> web.Application:
        async def handle_asset(request: web.Request) -> web.Response:
            self.requests.append(request.path)
            pending = self.failures.get(request.path)
            if pending:
                return web.Response(status=pending.pop(0))
            body = self.assets.get(request.path)
            if body is None:
                return web.Response(status=404)
            return web.Response(body=body)

        async def handle_latest(request: web.Request) -> web.Response:
            self.requests.append(request.path)
            pending = self.failures.get(request.path)
            if pending:
                return web.Response(status=pending.pop(0))
            if self.latest is None:
                return web.Response(status=404)
            return web.json_response({"tag_name": f"v{self.latest}"})

        app = web.Application()
        app.router.add_get("/repos/tailwindlabs/tailwindcss/releases/latest", handle_latest)
        app.router.add_get("/download/{tail:.*}", handle_asset)
        return app


@pytest_asyncio.fixture
async def release():
    """A local release server for download tests"""
    fake = FakeRelease()
    server = TestServer(fake.make_app())
    await server.start_server()
    fake.base_url = str(server.make_url("/")).rstrip("/")
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def config(release: FakeRelease, cache_dir: Path) -> TailwindConfig:
    """Config pointing at the local release server"""
    return TailwindConfig(
        cache_dir=cache_dir,
        download_base=release.download_base,
        api_base=release.base_url,
        retry_delay=0,
        timeout=10,
    )
