"""Core type definitions"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

from tailwind_runtime.binaries.constants import VERSION_PREFIX

PathLike = Union[str, Path]

LATEST = "latest"


@dataclass(frozen=True)
class TailwindVersion:
    """A pinned Tailwind release or the latest one"""
    value: str = LATEST

    def __post_init__(self):
        value = self.value.strip()
        if not value:
            raise ValueError("Version must not be empty")
        if value != LATEST:
            value = value.removeprefix(VERSION_PREFIX)
        object.__setattr__(self, "value", value)

    @classmethod
    def latest(cls) -> "TailwindVersion":
        return cls(LATEST)

    @classmethod
    def fixed(cls, version: str) -> "TailwindVersion":
        if version.strip() == LATEST:
            raise ValueError("Use TailwindVersion.latest() for the latest release")
        return cls(version)

    @property
    def is_latest(self) -> bool:
        return self.value == LATEST

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PlatformInfo:
    """Host platform and the artifact published for it"""
    system: str
    machine: str
    artifact_name: str

    @property
    def is_windows(self) -> bool:
        return self.system == "windows"


@dataclass(frozen=True)
class ExecutionRequest:
    """A single invocation of a downloaded executable"""
    executable: Path
    working_directory: Path
    arguments: tuple[str, ...] = ()

    def __init__(self, executable: PathLike, working_directory: PathLike, arguments: Sequence[str] = ()):
        object.__setattr__(self, "executable", Path(executable))
        object.__setattr__(self, "working_directory", Path(working_directory))
        object.__setattr__(self, "arguments", tuple(str(a) for a in arguments))

    @property
    def argv(self) -> list[str]:
        return [str(self.executable), *self.arguments]


class InitializeOption(Enum):
    """Options for generating the starter stylesheet"""
    TS = "--ts"
    FULL = "--full"

    @property
    def flag(self) -> str:
        return self.value


class RunFlag(Enum):
    WATCH = "--watch"
    POLL = "--poll"
    AUTOPREFIXER = ""
    MINIFY = "--minify"
    CONFIG = "--config"
    POSTCSS = "--postcss"
    CONTENT = "--content"


@dataclass(frozen=True)
class RunOption:
    """One option passed to the Tailwind executable.

    Build instances with the constructors below, e.g. ``RunOption.minify()``
    or ``RunOption.content("./src/**/*.html")``.
    """
    kind: RunFlag
    value: Optional[str] = None

    @classmethod
    def watch(cls) -> "RunOption":
        return cls(RunFlag.WATCH)

    @classmethod
    def poll(cls) -> "RunOption":
        return cls(RunFlag.POLL)

    @classmethod
    def autoprefixer(cls) -> "RunOption":
        """Keep autoprefixer on; suppresses ``--no-autoprefixer``."""
        return cls(RunFlag.AUTOPREFIXER)

    @classmethod
    def minify(cls) -> "RunOption":
        return cls(RunFlag.MINIFY)

    @classmethod
    def config(cls, path: PathLike) -> "RunOption":
        return cls(RunFlag.CONFIG, str(path))

    @classmethod
    def postcss(cls, path: PathLike) -> "RunOption":
        return cls(RunFlag.POSTCSS, str(path))

    @classmethod
    def content(cls, pattern: str) -> "RunOption":
        return cls(RunFlag.CONTENT, pattern)

    def to_arguments(self) -> list[str]:
        match self.kind:
            case RunFlag.AUTOPREFIXER:
                return []
            case RunFlag.CONFIG | RunFlag.POSTCSS | RunFlag.CONTENT:
                if self.value is None:
                    raise ValueError(f"{self.kind.value} requires a value")
                return [self.kind.value, self.value]
            case _:
                return [self.kind.value]
