"""Entry points for downloading and running Tailwind from Python."""

from contextlib import aclosing
from pathlib import Path
from typing import AsyncIterator, Iterable, Optional

from tailwind_runtime.binaries.fetcher import ensure_binary
from tailwind_runtime.config import TailwindConfig
from tailwind_runtime.execution import run_executable, stream_executable
from tailwind_runtime.logging import get_logger
from tailwind_runtime.types import (
    ExecutionRequest,
    InitializeOption,
    PathLike,
    RunFlag,
    RunOption,
    TailwindVersion,
)

logger = get_logger(__name__)

STYLESHEET_NAME = "tailwind.css"

IMPORT_DIRECTIVE = '@import "tailwindcss";\n\n'

FULL_TEMPLATE = """@theme {
  --font-family-display: "Satoshi", "sans-serif";
  --font-family-body: "Inter", "sans-serif";
  --breakpoint-3xl: 1920px;
  --color-primary: #3b82f6;
  --color-secondary: #64748b;
}

@layer base {
  html {
    font-family: theme(--font-family-body);
  }
}

@layer components {
  .btn {
    @apply px-4 py-2 rounded-md font-medium;
  }
}

@layer utilities {
  .text-balance {
    text-wrap: balance;
  }
}
"""


def render_stylesheet(options: Iterable[InitializeOption] = ()) -> str:
    content = IMPORT_DIRECTIVE
    if InitializeOption.FULL in set(options):
        content += FULL_TEMPLATE
    return content


def build_run_arguments(input: PathLike, output: PathLike, options: Iterable[RunOption] = ()) -> list[str]:
    """Translate run options into the Tailwind CLI argument vector."""
    unique: list[RunOption] = []
    for option in options:
        if option not in unique:
            unique.append(option)

    arguments = ["--input", str(input), "--output", str(output)]
    for option in unique:
        arguments.extend(option.to_arguments())
    if not any(option.kind is RunFlag.AUTOPREFIXER for option in unique):
        arguments.append("--no-autoprefixer")
    return arguments


class Tailwind:
    """Lazily downloads the standalone Tailwind executable and runs it.

    Args:
        version: Release to use, latest by default
        directory: Where executables are cached; defaults to config.cache_dir
        config: Download and retry settings
    """

    def __init__(
        self,
        version: TailwindVersion = TailwindVersion.latest(),
        directory: Optional[PathLike] = None,
        config: Optional[TailwindConfig] = None,
    ):
        self.version = version
        self.config = config or TailwindConfig()
        self.directory = Path(directory) if directory is not None else self.config.cache_dir

    async def download(self) -> Path:
        """Download the executable, or return the cached one."""
        return await ensure_binary(self.version, self.directory, config=self.config)

    async def initialize(self, directory: Optional[PathLike] = None, *options: InitializeOption) -> Path:
        """Write a starter ``tailwind.css`` into `directory` (cwd by default)."""
        target_dir = Path(directory) if directory is not None else Path.cwd()
        css_path = target_dir / STYLESHEET_NAME
        css_path.write_text(render_stylesheet(options), encoding="utf-8")
        logger.info("stylesheet_created", path=str(css_path), options=[o.name for o in options])
        return css_path

    async def _request(
        self,
        input: PathLike,
        output: PathLike,
        directory: Optional[PathLike],
        options: Iterable[RunOption],
    ) -> ExecutionRequest:
        executable = await self.download()
        return ExecutionRequest(
            executable,
            Path(directory) if directory is not None else Path.cwd(),
            build_run_arguments(input, output, options),
        )

    async def run(
        self,
        input: PathLike,
        output: PathLike,
        directory: Optional[PathLike] = None,
        *options: RunOption,
    ) -> None:
        """Compile `input` into `output`, running from `directory` (cwd by default)."""
        request = await self._request(input, output, directory, options)
        await run_executable(request)

    async def stream(
        self,
        input: PathLike,
        output: PathLike,
        directory: Optional[PathLike] = None,
        *options: RunOption,
    ) -> AsyncIterator[str]:
        """Like `run`, yielding the executable's output lines as they appear.

        Wrap the iteration in `contextlib.aclosing` when breaking out early so
        the child is killed right away.
        """
        request = await self._request(input, output, directory, options)
        async with aclosing(stream_executable(request)) as lines:
            async for line in lines:
                yield line
