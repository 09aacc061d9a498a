"""Release version resolution for the Tailwind standalone CLI."""
import json
import os
import tempfile
import time
from pathlib import Path
from typing import Optional

from tailwind_runtime.binaries.constants import (
    GITHUB_REPOS_PATH,
    LATEST_PATH,
    LATEST_RECORD,
    RELEASES_PATH,
    TAILWIND_OWNER,
    TAILWIND_REPO,
    VERSION_PREFIX,
)
from tailwind_runtime.config import TailwindConfig
from tailwind_runtime.errors import VersionNotFoundError
from tailwind_runtime.logging import get_logger
from tailwind_runtime.types import TailwindVersion
from tailwind_runtime.utils.fetching import (
    NotFoundError,
    create_session,
    fetch_json,
    retry_transient,
)

logger = get_logger(__name__)


def latest_release_url(config: TailwindConfig) -> str:
    return (
        f"{config.api_base}/{GITHUB_REPOS_PATH}/{TAILWIND_OWNER}/{TAILWIND_REPO}"
        f"/{RELEASES_PATH}/{LATEST_PATH}"
    )


async def fetch_latest_release_version(config: TailwindConfig) -> str:
    """Ask the GitHub API for the tag of the latest Tailwind release."""
    url = latest_release_url(config)

    async def lookup() -> str:
        async with create_session(config.timeout) as session:
            try:
                data = await fetch_json(session, url)
            except NotFoundError as e:
                raise VersionNotFoundError("latest", url) from e
        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not tag:
            raise VersionNotFoundError("latest", url)
        return tag.removeprefix(VERSION_PREFIX)

    version = await retry_transient(
        lookup,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay,
        description=url,
    )
    logger.info("latest_release_resolved", version=version)
    return version


def read_latest_record(cache_dir: Path, ttl: float, now: Optional[float] = None) -> Optional[str]:
    """Return the recorded latest version if it is younger than `ttl` seconds."""
    if ttl <= 0:
        return None

    record_path = cache_dir / LATEST_RECORD
    try:
        record = json.loads(record_path.read_text(encoding="utf-8"))
        version = record["version"]
        resolved_at = float(record["resolved_at"])
    except FileNotFoundError:
        return None
    except (OSError, ValueError, KeyError, TypeError) as e:
        logger.warning("latest_record_ignored", path=str(record_path), error=str(e))
        return None

    now = time.time() if now is None else now
    if not isinstance(version, str) or not version or now - resolved_at >= ttl:
        return None
    return version


def write_latest_record(cache_dir: Path, version: str, now: Optional[float] = None) -> None:
    """Atomically record the version "latest" resolved to."""
    cache_dir.mkdir(parents=True, exist_ok=True)
    payload = json.dumps({"version": version, "resolved_at": time.time() if now is None else now})

    fd, tmp_name = tempfile.mkstemp(dir=cache_dir, prefix=".latest-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, cache_dir / LATEST_RECORD)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


async def resolve_version(version: TailwindVersion, cache_dir: Path, config: TailwindConfig) -> str:
    """Turn a requested version into a concrete version string.

    Pinned versions are returned without any network access. "latest" reuses
    the last resolution for `config.latest_ttl` seconds.
    """
    if not version.is_latest:
        return version.value

    recorded = read_latest_record(cache_dir, config.latest_ttl)
    if recorded:
        logger.debug("latest_release_from_record", version=recorded)
        return recorded

    resolved = await fetch_latest_release_version(config)
    write_latest_record(cache_dir, resolved)
    return resolved
