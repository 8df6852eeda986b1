"""
Platform detection and architecture resolution for pyembedkit.

The embeddable Python distribution is published for Windows only, in three
architecture flavours. This module turns the host description into the
naming tokens used by the download source and the tool cache.

Usage:
    from pyembedkit.core.platform import detect_platform_spec, resolve_arch

    spec = detect_platform_spec()
    if spec.os_supported:
        arch = resolve_arch(spec.arch)  # 'amd64', 'arm64', 'win32' or None
"""

import functools
import platform
from dataclasses import dataclass
from typing import Dict, Optional


# Raw host architecture token -> artifact architecture token
ARCH_MAP: Dict[str, str] = {
    "x64": "amd64",
    "arm64": "arm64",
    "x86": "win32",
}

SUPPORTED_OS = "windows"


@dataclass(frozen=True)
class PlatformSpec:
    """
    Host platform description, read once per run.

    Attributes:
        os_supported: Whether the host OS is the single supported one (Windows)
        arch: Raw host architecture token ('x64', 'arm64', 'x86', ...)
    """

    os_supported: bool
    arch: str

    def __str__(self) -> str:
        os_label = SUPPORTED_OS if self.os_supported else "unsupported-os"
        return f"{os_label}-{self.arch}"


def resolve_arch(arch: str) -> Optional[str]:
    """
    Map a raw host architecture token to its artifact architecture token.

    The caller is expected to have checked that the OS is supported.

    Args:
        arch: Raw host token (e.g. 'x64')

    Returns:
        'amd64', 'arm64' or 'win32', or None when the token has no mapping

    Example:
        >>> resolve_arch("x64")
        'amd64'
        >>> resolve_arch("riscv64") is None
        True
    """
    return ARCH_MAP.get(arch)


@functools.lru_cache(maxsize=1)
def detect_platform_spec() -> PlatformSpec:
    """
    Detect the host PlatformSpec.

    This function is cached - it only runs detection once per process.

    Returns:
        PlatformSpec for the running interpreter's host
    """
    return PlatformSpec(
        os_supported=_detect_os() == SUPPORTED_OS,
        arch=_detect_architecture(),
    )


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name: 'windows', 'linux', 'macos' or the raw system name
    """
    system = platform.system().lower()

    if system == "windows":
        return "windows"
    elif system == "darwin":
        return "macos"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', or the original
        machine name (lower-cased) for anything else
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    else:
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    This forces the next call to detect_platform_spec() to re-detect.
    """
    detect_platform_spec.cache_clear()


__all__ = [
    "ARCH_MAP",
    "PlatformSpec",
    "resolve_arch",
    "detect_platform_spec",
    "clear_platform_cache",
]
