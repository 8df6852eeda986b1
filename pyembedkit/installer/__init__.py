"""
Installer module for pyembedkit.

This module provides:
- Cache lookup and install pipeline
- Stale version eviction
- Run orchestration from platform checks to path publication
"""

from pyembedkit.installer.pipeline import (
    CacheKey,
    InstallPipeline,
    build_download_url,
)
from pyembedkit.installer.eviction import (
    EvictionReport,
    evict_stale,
)
from pyembedkit.installer.orchestrator import (
    UNSUPPORTED_OS_MESSAGE,
    Installer,
    RunOutcome,
    RunStatus,
    build_installer,
)

__all__ = [
    # Pipeline
    "CacheKey",
    "InstallPipeline",
    "build_download_url",
    # Eviction
    "EvictionReport",
    "evict_stale",
    # Orchestrator
    "UNSUPPORTED_OS_MESSAGE",
    "Installer",
    "RunOutcome",
    "RunStatus",
    "build_installer",
]
