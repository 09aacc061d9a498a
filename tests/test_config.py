import tempfile
from pathlib import Path

import pytest

from tailwind_runtime.config import TailwindConfig
from tailwind_runtime.errors import ConfigError


def test_defaults():
    config = TailwindConfig()
    assert config.cache_dir == Path(tempfile.gettempdir()) / "tailwind-runtime"
    assert config.max_retries == 0
    assert config.download_base == "https://github.com/tailwindlabs/tailwindcss/releases/download"
    assert config.api_base == "https://api.github.com"


def test_from_env():
    config = TailwindConfig.from_env({
        "TAILWIND_RUNTIME_CACHE_DIR": "/var/cache/tw",
        "TAILWIND_RUNTIME_MAX_RETRIES": "3",
        "TAILWIND_RUNTIME_RETRY_DELAY": "0.25",
        "TAILWIND_RUNTIME_LATEST_TTL": "0",
        "TAILWIND_RUNTIME_DOWNLOAD_BASE": "https://mirror.example.com/releases/",
        "TAILWIND_RUNTIME_LOG_LEVEL": "DEBUG",
        "UNRELATED": "x",
    })

    assert config.cache_dir == Path("/var/cache/tw")
    assert config.max_retries == 3
    assert config.retry_delay == 0.25
    assert config.latest_ttl == 0
    assert config.download_base == "https://mirror.example.com/releases"
    assert config.log_level == "DEBUG"


def test_from_env_empty_values_ignored():
    assert TailwindConfig.from_env({"TAILWIND_RUNTIME_MAX_RETRIES": ""}) == TailwindConfig()


@pytest.mark.parametrize(
    "environ",
    [
        {"TAILWIND_RUNTIME_MAX_RETRIES": "many"},
        {"TAILWIND_RUNTIME_MAX_RETRIES": "-1"},
        {"TAILWIND_RUNTIME_TIMEOUT": "0"},
        {"TAILWIND_RUNTIME_RETRY_DELAY": "soon"},
    ],
)
def test_from_env_invalid(environ):
    with pytest.raises(ConfigError):
        TailwindConfig.from_env(environ)


def test_with_overrides(tmp_path):
    config = TailwindConfig(cache_dir=tmp_path)
    updated = config.with_overrides(max_retries=2, retry_delay=None)

    assert updated.max_retries == 2
    assert updated.retry_delay == config.retry_delay
    assert updated.cache_dir == tmp_path
    assert config.max_retries == 0
