"""
Stale version eviction.

After a successful lookup or install, every other cached version of the tool
for the same architecture is removed. Removal failures are reported as
warnings and never stop the pass or the run. An entry is invalidated before
its files are removed, and an emptied version directory is pruned after.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from pyembedkit.config.settings import DEFAULT_DISPLAY_NAME
from pyembedkit.core.interfaces import ArtifactCache, Remover, RunReporter

logger = logging.getLogger(__name__)


@dataclass
class EvictionReport:
    """Result of an eviction pass."""

    removed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def describe_error(error: BaseException) -> str:
    """Message of an error, or its repr when it carries none."""
    return str(error) or repr(error)


def evict_stale(
    cache: ArtifactCache,
    remover: Remover,
    reporter: RunReporter,
    tool_name: str,
    arch: str,
    keep_version: str,
    display_name: str = DEFAULT_DISPLAY_NAME,
) -> EvictionReport:
    """
    Remove every cached version of tool_name/arch except keep_version.

    Versions are compared as plain strings, so '3.14.0' and '3.14.0+build'
    are different versions.

    Args:
        cache: Cache to enumerate
        remover: Recursive remover for entry locations
        reporter: Sink for progress and warnings
        tool_name: Tool identifier
        arch: Resolved architecture; other architectures are never touched
        keep_version: Version that must survive
        display_name: Human readable tool name for messages

    Returns:
        EvictionReport listing removed and failed versions
    """
    report = EvictionReport()

    try:
        versions = cache.find_all_versions(tool_name, arch)
    except Exception as e:
        detail = describe_error(e)
        reporter.warning(
            f"Failed to list cached {display_name} versions for {arch}: {detail}"
        )
        report.errors.append(detail)
        return report

    for version in versions:
        if version == keep_version:
            continue

        reporter.info(f"Cleaning cached {display_name} version: {version}")
        try:
            # Invalidate first so a partial removal is never a cache hit
            cache.invalidate(tool_name, version, arch)
            remover.remove(cache.entry_path(tool_name, version, arch))
            cache.prune(tool_name, version)
        except Exception as e:
            detail = describe_error(e)
            reporter.warning(
                f"Failed to remove {display_name} version at {version}: {detail}"
            )
            report.failed.append(version)
            report.errors.append(f"{version}: {detail}")
        else:
            report.removed.append(version)

    logger.debug(
        f"Eviction for {tool_name}/{arch}: removed {len(report.removed)}, "
        f"failed {len(report.failed)}"
    )
    return report


__all__ = ["EvictionReport", "describe_error", "evict_stale"]
