"""Platform detection and artifact name mapping."""
import platform
from typing import Optional

from tailwind_runtime.binaries.constants import ARTIFACT_PREFIX
from tailwind_runtime.errors import UnsupportedPlatformError
from tailwind_runtime.types import PlatformInfo

# Normalized machine names
ARCH_ALIASES = {
    "x86_64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armv7",
    "armv7": "armv7",
}

# Publisher OS names
SYSTEM_NAMES = {
    "linux": "linux",
    "darwin": "macos",
    "windows": "windows",
}

# Architectures released per OS
SUPPORTED_ARCHES = {
    "linux": ("x64", "arm64", "armv7"),
    "macos": ("x64", "arm64"),
    "windows": ("x64", "arm64"),
}

MUSL_ARCHES = ("x64", "arm64")


def resolve_platform(system: str, machine: str, musl: bool = False) -> PlatformInfo:
    """Map an OS name and CPU architecture to the published artifact name."""
    os_name = SYSTEM_NAMES.get(system.strip().lower())
    arch = ARCH_ALIASES.get(machine.strip().lower())

    if os_name is None or arch is None or arch not in SUPPORTED_ARCHES[os_name]:
        raise UnsupportedPlatformError(system, machine)

    artifact = f"{ARTIFACT_PREFIX}-{os_name}-{arch}"
    if os_name == "linux" and musl and arch in MUSL_ARCHES:
        artifact += "-musl"
    if os_name == "windows":
        artifact += ".exe"

    return PlatformInfo(system=system.strip().lower(), machine=arch, artifact_name=artifact)


def is_musl() -> bool:
    """Whether the running interpreter is linked against musl libc."""
    libc, _ = platform.libc_ver()
    return libc == "musl"


def get_platform_info(system: Optional[str] = None, machine: Optional[str] = None) -> PlatformInfo:
    """Get platform information for the running host."""
    system = system or platform.system()
    machine = machine or platform.machine()
    musl = system.lower() == "linux" and is_musl()
    return resolve_platform(system, machine, musl=musl)


def is_platform_supported() -> bool:
    """Check if current platform is supported."""
    try:
        get_platform_info()
        return True
    except UnsupportedPlatformError:
        return False
