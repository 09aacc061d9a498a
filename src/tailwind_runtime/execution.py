"""Process execution for downloaded executables."""

import asyncio
from typing import AsyncIterator, Optional

from tailwind_runtime.errors import ExecutionFailedError, SpawnError
from tailwind_runtime.logging import get_logger
from tailwind_runtime.types import ExecutionRequest

logger = get_logger(__name__)


async def spawn(
    request: ExecutionRequest,
    stdout: Optional[int] = None,
    stderr: Optional[int] = None,
) -> asyncio.subprocess.Process:
    """Start the executable with its argument vector, without a shell."""
    logger.debug(
        "process_spawn",
        executable=str(request.executable),
        cwd=str(request.working_directory),
        args=list(request.arguments),
    )
    try:
        return await asyncio.create_subprocess_exec(
            *request.argv,
            cwd=request.working_directory,
            stdout=stdout,
            stderr=stderr,
        )
    except OSError as e:
        logger.error("process_spawn_failed", executable=str(request.executable), error=str(e))
        raise SpawnError(request.executable, e.strerror or str(e)) from e


async def terminate(process: asyncio.subprocess.Process) -> None:
    """Kill a still-running child and reap it."""
    if process.returncode is not None:
        return
    try:
        process.kill()
    except ProcessLookupError:
        pass
    await process.wait()
    logger.warning("process_killed", pid=process.pid)


def check_returncode(request: ExecutionRequest, returncode: int) -> None:
    logger.debug("process_exited", executable=str(request.executable), returncode=returncode)
    if returncode != 0:
        raise ExecutionFailedError(request.executable, returncode)


async def run_executable(request: ExecutionRequest) -> None:
    """Run the executable with inherited output streams and wait for it.

    Raises:
        SpawnError: If the executable cannot be launched
        ExecutionFailedError: If it exits with a non-zero status
    """
    process = await spawn(request)
    try:
        returncode = await process.wait()
    finally:
        await terminate(process)
    check_returncode(request, returncode)


async def stream_executable(request: ExecutionRequest) -> AsyncIterator[str]:
    """Run the executable and yield its combined stdout/stderr line by line.

    The exit status is checked once output ends, so ExecutionFailedError is
    raised from the iteration after the last line. Closing the generator early
    kills the child.
    """
    process = await spawn(
        request,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    try:
        if process.stdout is None:
            raise SpawnError(request.executable, "output pipe was not opened")
        async for line in process.stdout:
            yield line.decode(errors="replace").rstrip("\r\n")
        returncode = await process.wait()
    finally:
        await terminate(process)
    check_returncode(request, returncode)
