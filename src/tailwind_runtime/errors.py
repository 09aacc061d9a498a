"""Error types for fetching, verifying and running Tailwind."""
from typing import Any, Dict, Optional

from mcp.types import (
    ErrorData,
    INVALID_PARAMS,
    INVALID_REQUEST,
    INTERNAL_ERROR,
)

from tailwind_runtime.logging import get_logger


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    logger: Optional[Any] = None,
) -> None:
    """Log an error with context."""
    logger = logger or get_logger(__name__)

    error_info: Dict[str, Any] = {
        "error_type": error.__class__.__name__,
        "error_message": str(error),
    }
    if context:
        error_info["context"] = context
    if isinstance(error, TailwindError):
        error_info["code"] = error.code
        error_info["details"] = error.details

    logger.error("tailwind_error", **error_info)


class TailwindError(Exception):
    """Base error class for tailwind-runtime."""

    def __init__(
        self,
        message: str,
        code: int = INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def to_error_data(self) -> ErrorData:
        """Convert to ErrorData format."""
        return ErrorData(code=self.code, message=str(self), data=self.details)


class ConfigError(TailwindError):
    """Invalid configuration value."""

    def __init__(self, name: str, value: Any, reason: str):
        super().__init__(
            f"Invalid value for {name}: {value!r} ({reason})",
            code=INVALID_PARAMS,
            details={"name": name, "value": value},
        )


class UnsupportedPlatformError(TailwindError):
    """No Tailwind artifact is published for this OS/architecture."""

    def __init__(self, system: str, machine: str):
        super().__init__(
            f"Unsupported platform: {system}/{machine}",
            code=INVALID_REQUEST,
            details={"system": system, "machine": machine},
        )
        self.system = system
        self.machine = machine


class VersionNotFoundError(TailwindError):
    """The requested release or one of its assets does not exist."""

    def __init__(self, version: str, url: Optional[str] = None):
        super().__init__(
            f"Tailwind version {version} not found",
            code=INVALID_PARAMS,
            details={"version": version, "url": url},
        )
        self.version = version
        self.url = url


class ChecksumReadError(TailwindError):
    """A file needed for checksum validation could not be read."""

    def __init__(self, path: Any, reason: str):
        super().__init__(
            f"Could not read {path} for checksum validation: {reason}",
            details={"path": str(path)},
        )
        self.path = path


class ChecksumMismatchError(TailwindError):
    """The artifact digest is not listed in the release manifest."""

    def __init__(self, artifact: str, version: str, digest: str):
        super().__init__(
            f"Checksum mismatch for {artifact} {version}",
            details={"artifact": artifact, "version": version, "digest": digest},
        )
        self.artifact = artifact
        self.version = version
        self.digest = digest


class DownloadFailedError(TailwindError):
    """Download gave up after exhausting retries."""

    def __init__(self, url: str, attempts: int, last_error: BaseException):
        super().__init__(
            f"Failed to download {url} after {attempts} attempt(s): {last_error}",
            details={
                "url": url,
                "attempts": attempts,
                "last_error": f"{last_error.__class__.__name__}: {last_error}",
            },
        )
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class SpawnError(TailwindError):
    """The executable could not be launched."""

    def __init__(self, executable: Any, reason: str):
        super().__init__(
            f"Failed to launch {executable}: {reason}",
            details={"executable": str(executable)},
        )
        self.executable = executable


class ExecutionFailedError(TailwindError):
    """The executable ran and exited with a non-zero status."""

    def __init__(self, executable: Any, exit_code: int):
        super().__init__(
            f"{executable} exited with code {exit_code}",
            details={"executable": str(executable), "exit_code": exit_code},
        )
        self.executable = executable
        self.exit_code = exit_code
