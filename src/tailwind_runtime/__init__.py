"""Download, verify and run the Tailwind CSS standalone CLI."""

__version__ = "0.1.0"

from tailwind_runtime.types import (
    TailwindVersion,
    PlatformInfo,
    ExecutionRequest,
    InitializeOption,
    RunOption,
)
from tailwind_runtime.config import TailwindConfig
from tailwind_runtime.binaries.fetcher import ensure_binary
from tailwind_runtime.binaries.platforms import resolve_platform, get_platform_info
from tailwind_runtime.binaries.checksum import compute_file_hash, compare_checksum
from tailwind_runtime.execution import run_executable, stream_executable
from tailwind_runtime.tailwind import Tailwind
from tailwind_runtime.errors import (
    TailwindError,
    ConfigError,
    UnsupportedPlatformError,
    VersionNotFoundError,
    ChecksumReadError,
    ChecksumMismatchError,
    DownloadFailedError,
    SpawnError,
    ExecutionFailedError,
)

__all__ = [
    # Types
    "TailwindVersion",
    "PlatformInfo",
    "ExecutionRequest",
    "InitializeOption",
    "RunOption",
    "TailwindConfig",

    # Pipeline
    "ensure_binary",
    "resolve_platform",
    "get_platform_info",
    "compute_file_hash",
    "compare_checksum",
    "run_executable",
    "stream_executable",
    "Tailwind",

    # Error types
    "TailwindError",
    "ConfigError",
    "UnsupportedPlatformError",
    "VersionNotFoundError",
    "ChecksumReadError",
    "ChecksumMismatchError",
    "DownloadFailedError",
    "SpawnError",
    "ExecutionFailedError",
]
