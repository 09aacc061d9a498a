"""Runtime configuration."""

import os
import tempfile
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Mapping, Optional, TypeVar

from tailwind_runtime.binaries.constants import GITHUB_API_BASE, TAILWIND_DOWNLOAD_BASE
from tailwind_runtime.errors import ConfigError

T = TypeVar("T")

ENV_PREFIX = "TAILWIND_RUNTIME_"


def default_cache_dir() -> Path:
    """Cache root used when none is configured."""
    return Path(tempfile.gettempdir()) / "tailwind-runtime"


@dataclass(frozen=True)
class TailwindConfig:
    """Settings threaded through download and execution calls."""

    cache_dir: Path = field(default_factory=default_cache_dir)
    max_retries: int = 0
    retry_delay: float = 0.5
    timeout: float = 300.0
    latest_ttl: float = 3600.0
    download_base: str = TAILWIND_DOWNLOAD_BASE
    api_base: str = GITHUB_API_BASE
    log_level: str = "INFO"

    def __post_init__(self):
        object.__setattr__(self, "cache_dir", Path(self.cache_dir))
        object.__setattr__(self, "download_base", self.download_base.rstrip("/"))
        object.__setattr__(self, "api_base", self.api_base.rstrip("/"))
        if self.max_retries < 0:
            raise ConfigError("max_retries", self.max_retries, "must be >= 0")
        if self.retry_delay < 0:
            raise ConfigError("retry_delay", self.retry_delay, "must be >= 0")
        if self.timeout <= 0:
            raise ConfigError("timeout", self.timeout, "must be > 0")
        if self.latest_ttl < 0:
            raise ConfigError("latest_ttl", self.latest_ttl, "must be >= 0")

    def with_overrides(self, **changes) -> "TailwindConfig":
        """Copy of this config with the non-None values in `changes` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "TailwindConfig":
        """Build a config from TAILWIND_RUNTIME_* environment variables."""
        env = os.environ if environ is None else environ
        values = {}
        fields: dict[str, Callable[[str], object]] = {
            "cache_dir": Path,
            "max_retries": int,
            "retry_delay": float,
            "timeout": float,
            "latest_ttl": float,
            "download_base": str,
            "api_base": str,
            "log_level": str,
        }
        for name, parse in fields.items():
            raw = env.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None or raw == "":
                continue
            values[name] = _parse(f"{ENV_PREFIX}{name.upper()}", raw, parse)
        return cls(**values)


def _parse(name: str, raw: str, parse: Callable[[str], T]) -> T:
    try:
        return parse(raw)
    except ValueError as e:
        raise ConfigError(name, raw, str(e)) from e
