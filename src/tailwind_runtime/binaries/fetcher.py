"""Download, verify and cache the Tailwind executable."""
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from tailwind_runtime.binaries.checksum import compare_checksum, compute_file_hash
from tailwind_runtime.binaries.constants import CHECKSUM_MANIFEST, VERSION_PREFIX
from tailwind_runtime.binaries.platforms import get_platform_info
from tailwind_runtime.binaries.releases import resolve_version
from tailwind_runtime.config import TailwindConfig
from tailwind_runtime.errors import ChecksumMismatchError, VersionNotFoundError
from tailwind_runtime.logging import get_logger
from tailwind_runtime.types import PlatformInfo, TailwindVersion
from tailwind_runtime.utils.fetching import (
    NotFoundError,
    create_session,
    download_url,
    retry_transient,
)

logger = get_logger(__name__)

STAGING_PREFIX = ".download-"


def release_url(config: TailwindConfig, version: str, asset: str) -> str:
    return f"{config.download_base}/{VERSION_PREFIX}{version}/{asset}"


def get_binary_path(cache_dir: Path, version: str, platform_info: PlatformInfo) -> Path:
    """Deterministic cache location for a (version, platform) pair."""
    return Path(cache_dir) / version / platform_info.artifact_name


def make_executable(path: Path) -> None:
    if os.name != "nt":
        path.chmod(path.stat().st_mode | 0o755)


async def fetch_verified_binary(
    version: str,
    platform_info: PlatformInfo,
    binary_path: Path,
    config: TailwindConfig,
) -> Path:
    """Run one download-verify-place cycle for a release asset.

    Both files are staged in a private directory next to `binary_path` and
    the verified binary is moved into place with a single os.replace, so the
    cache path either holds a complete verified file or nothing new.
    """
    artifact = platform_info.artifact_name
    artifact_url = release_url(config, version, artifact)
    manifest_url = release_url(config, version, CHECKSUM_MANIFEST)

    binary_path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory(dir=binary_path.parent, prefix=STAGING_PREFIX) as tmpdir:
        staged_binary = Path(tmpdir) / artifact
        staged_manifest = Path(tmpdir) / CHECKSUM_MANIFEST

        logger.info("downloading_binary", version=version, artifact=artifact, url=artifact_url)

        async with create_session(config.timeout) as session:
            try:
                await download_url(session, artifact_url, staged_binary)
                await download_url(session, manifest_url, staged_manifest)
            except NotFoundError as e:
                logger.error("release_asset_not_found", version=version, url=e.url)
                raise VersionNotFoundError(version, e.url) from e

        digest = compute_file_hash(staged_binary)
        if not compare_checksum(staged_manifest, digest):
            logger.error(
                "checksum_verification_failed",
                version=version,
                artifact=artifact,
                computed=digest,
            )
            raise ChecksumMismatchError(artifact, version, digest)

        make_executable(staged_binary)
        os.replace(staged_binary, binary_path)

    logger.info("binary_cached", version=version, path=str(binary_path), hash=digest)
    return binary_path


async def ensure_binary(
    version: Union[TailwindVersion, str] = TailwindVersion.latest(),
    destination: Optional[Path] = None,
    max_retries: Optional[int] = None,
    *,
    config: Optional[TailwindConfig] = None,
    platform_info: Optional[PlatformInfo] = None,
) -> Path:
    """Ensure the Tailwind executable for `version` is in the cache.

    Args:
        version: Release to fetch, pinned or latest
        destination: Cache root; defaults to config.cache_dir
        max_retries: Extra attempts on transient failures; defaults to config.max_retries
        config: Network and retry settings
        platform_info: Target platform; defaults to the running host

    Returns:
        Path to the verified executable

    Raises:
        UnsupportedPlatformError: No artifact exists for the platform
        VersionNotFoundError: The release or its assets are missing
        ChecksumMismatchError: The artifact is not listed in the manifest
        DownloadFailedError: Transient failures outlasted the retries
    """
    config = (config or TailwindConfig()).with_overrides(max_retries=max_retries)
    if isinstance(version, str):
        version = TailwindVersion(version)
    cache_dir = Path(destination) if destination is not None else config.cache_dir

    platform_info = platform_info or get_platform_info()
    resolved = await resolve_version(version, cache_dir, config)
    binary_path = get_binary_path(cache_dir, resolved, platform_info)

    if binary_path.is_file():
        logger.info("using_cached_binary", version=resolved, path=str(binary_path))
        return binary_path

    return await retry_transient(
        lambda: fetch_verified_binary(resolved, platform_info, binary_path, config),
        max_retries=config.max_retries,
        retry_delay=config.retry_delay,
        description=release_url(config, resolved, platform_info.artifact_name),
    )
