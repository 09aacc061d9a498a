import asyncio
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import aiohttp

from tailwind_runtime.binaries.constants import CHUNK_SIZE, USER_AGENT
from tailwind_runtime.errors import ChecksumReadError, DownloadFailedError
from tailwind_runtime.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

RETRYABLE_STATUSES = {408, 429}


class NotFoundError(Exception):
    """The server answered 404 for a URL."""

    def __init__(self, url: str):
        super().__init__(f"Not found: {url}")
        self.url = url


def create_session(timeout: float) -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout),
        headers={"User-Agent": USER_AGENT},
    )


def _check_status(response: aiohttp.ClientResponse, url: str) -> None:
    if response.status == 404:
        raise NotFoundError(url)
    response.raise_for_status()


async def download_url(session: aiohttp.ClientSession, url: str, dest: Path) -> int:
    """Stream a URL to a file and return the number of bytes written."""
    logger.debug("download_started", url=url, destination=str(dest))

    downloaded = 0
    async with session.get(url) as response:
        _check_status(response, url)
        with open(dest, "wb") as f:
            async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                f.write(chunk)
                downloaded += len(chunk)

    logger.debug("download_complete", url=url, size=downloaded)
    return downloaded


async def fetch_json(session: aiohttp.ClientSession, url: str) -> Any:
    async with session.get(url, headers={"Accept": "application/vnd.github+json"}) as response:
        _check_status(response, url)
        return await response.json(content_type=None)


def is_transient(error: BaseException) -> bool:
    """Whether an error may go away if the operation is repeated."""
    if isinstance(error, aiohttp.ClientResponseError):
        return error.status >= 500 or error.status in RETRYABLE_STATUSES
    return isinstance(
        error,
        (
            aiohttp.ClientConnectionError,
            aiohttp.ClientPayloadError,
            asyncio.TimeoutError,
            ChecksumReadError,
            OSError,
        ),
    )


async def retry_transient(
    operation: Callable[[], Awaitable[T]],
    *,
    max_retries: int,
    retry_delay: float,
    description: str,
    sleep: Optional[Callable[[float], Awaitable[Any]]] = None,
) -> T:
    """Run `operation`, repeating it up to `max_retries` times on transient errors.

    Non-transient errors propagate unchanged from the attempt that raised them,
    except rejected HTTP responses (403 and the like), which are raised at once
    as DownloadFailedError. When retries run out, DownloadFailedError carries
    the last error.
    """
    sleep = sleep or asyncio.sleep
    last_error: Optional[BaseException] = None

    for attempt in range(max_retries + 1):
        if attempt > 0:
            delay = retry_delay * (2 ** (attempt - 1))
            logger.info("retrying", target=description, attempt=attempt, delay=delay)
            await sleep(delay)

        try:
            return await operation()
        except Exception as e:
            if isinstance(e, aiohttp.ClientResponseError) and not is_transient(e):
                logger.error("request_rejected", target=description, status=e.status, attempt=attempt + 1)
                raise DownloadFailedError(description, attempt + 1, e) from e
            if not is_transient(e):
                raise
            last_error = e
            logger.warning(
                "attempt_failed",
                target=description,
                attempt=attempt + 1,
                error=f"{e.__class__.__name__}: {e}",
            )

    assert last_error is not None
    raise DownloadFailedError(description, max_retries + 1, last_error) from last_error
