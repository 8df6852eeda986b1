"""
Filesystem tool cache.

Stores extracted artifacts under ``<root>/<tool>/<version>/<arch>`` and marks
each finished entry with a sibling ``<arch>.complete`` file. An entry without
its marker (an interrupted store) or a marker without its directory (a
removed entry) is treated as absent.

Writes for the same (tool, version, arch) key, storing and invalidating,
are serialized across processes with a file lock; reads take no lock.
Invalidating an entry removes its marker first, so an entry whose files
are only partly deleted is never reported as a hit.
"""

import logging
import shutil
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from filelock import FileLock, Timeout

from pyembedkit.core.directory import get_tool_cache_dir
from pyembedkit.core.exceptions import CacheStoreError, RemoveError
from pyembedkit.core.filesystem import safe_rmtree
from pyembedkit.core.interfaces import ArtifactCache

logger = logging.getLogger(__name__)

MARKER_SUFFIX = ".complete"


class ToolCache(ArtifactCache):
    """
    Tool cache rooted at a directory.

    Example:
        >>> cache = ToolCache(Path("/opt/hostedtoolcache"))
        >>> cache.find("python-embedded", "3.14.0", "amd64")
        PosixPath('/opt/hostedtoolcache/python-embedded/3.14.0/amd64')
        >>> cache.find_all_versions("python-embedded", "amd64")
        ['3.13.0', '3.14.0']
    """

    def __init__(self, root: Optional[Path] = None, lock_timeout: int = 30):
        """
        Initialize tool cache.

        Args:
            root: Cache root directory (default: resolved from environment)
            lock_timeout: Timeout in seconds for acquiring a store lock
        """
        self.root = Path(root) if root else get_tool_cache_dir()
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.root}")

    def entry_path(self, tool_name: str, version: str, arch: str) -> Path:
        _check_key(tool_name, version, arch)
        return self.root / tool_name / version / arch

    def _marker_path(self, tool_name: str, version: str, arch: str) -> Path:
        return self.root / tool_name / version / f"{arch}{MARKER_SUFFIX}"

    def _is_complete(self, tool_name: str, version: str, arch: str) -> bool:
        return (
            self.entry_path(tool_name, version, arch).is_dir()
            and self._marker_path(tool_name, version, arch).is_file()
        )

    def find(self, tool_name: str, version: str, arch: str) -> Optional[Path]:
        if self._is_complete(tool_name, version, arch):
            path = self.entry_path(tool_name, version, arch)
            logger.debug(f"Found in cache: {path}")
            return path

        logger.debug(f"Not found in cache: {tool_name} {version} {arch}")
        return None

    def find_all_versions(self, tool_name: str, arch: str) -> List[str]:
        _check_key(tool_name, "*", arch)
        tool_dir = self.root / tool_name
        if not tool_dir.is_dir():
            return []

        versions = [
            child.name
            for child in tool_dir.iterdir()
            if child.is_dir()
            and not child.name.startswith(".")
            and self._is_complete(tool_name, child.name, arch)
        ]
        return sorted(versions)

    @contextmanager
    def _lock(self, tool_name: str, version: str, arch: str):
        """
        Acquire the store lock for one cache key.

        Raises:
            CacheStoreError: If the lock cannot be acquired within timeout
        """
        lock_path = self.root / tool_name / ".lock" / f"{version}-{arch}.lock"
        lock_path.parent.mkdir(parents=True, exist_ok=True)

        lock = FileLock(lock_path, timeout=self.lock_timeout)
        try:
            with lock:
                logger.debug(f"Acquired cache lock: {lock_path.name}")
                yield
        except Timeout as e:
            raise CacheStoreError(
                f"Could not acquire cache lock for {tool_name} {version} {arch} "
                f"within {self.lock_timeout} seconds"
            ) from e

    def cache_dir(
        self, source_dir: Path, tool_name: str, version: str, arch: str
    ) -> Path:
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise CacheStoreError(f"Source is not a directory: {source_dir}")

        destination = self.entry_path(tool_name, version, arch)
        marker = self._marker_path(tool_name, version, arch)

        with self._lock(tool_name, version, arch):
            try:
                # Invalidate any previous entry before replacing its contents
                marker.unlink(missing_ok=True)
                safe_rmtree(destination, require_prefix=self.root)

                shutil.copytree(source_dir, destination)
                marker.write_text(datetime.now().isoformat(), encoding="utf-8")
            except (OSError, shutil.Error) as e:
                raise CacheStoreError(
                    f"Failed to cache {tool_name} {version} {arch}: {e}"
                ) from e

        logger.debug(f"Cached {source_dir} as {destination}")
        return destination

    def invalidate(self, tool_name: str, version: str, arch: str) -> None:
        """
        Remove an entry's completion marker.

        Raises:
            RemoveError: If the marker cannot be deleted
            CacheStoreError: If the store lock cannot be acquired
        """
        _check_key(tool_name, version, arch)
        marker = self._marker_path(tool_name, version, arch)
        with self._lock(tool_name, version, arch):
            try:
                marker.unlink(missing_ok=True)
            except OSError as e:
                raise RemoveError(
                    f"Failed to invalidate {tool_name} {version} {arch}: {e}"
                ) from e

        logger.debug(f"Invalidated cache entry: {tool_name} {version} {arch}")

    def prune(self, tool_name: str, version: str) -> None:
        _check_key(tool_name, version, "*")
        version_dir = self.root / tool_name / version
        if not version_dir.is_dir() or any(version_dir.iterdir()):
            return

        try:
            version_dir.rmdir()
        except OSError as e:
            # A concurrent store may have repopulated it
            logger.debug(f"Kept {version_dir}: {e}")
            return
        logger.debug(f"Pruned empty version directory: {version_dir}")


def _check_key(tool_name: str, version: str, arch: str):
    for label, value in (("tool name", tool_name), ("version", version), ("arch", arch)):
        if not value:
            raise ValueError(f"Cache key {label} cannot be empty")
        if "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"Invalid cache key {label}: {value!r}")


__all__ = ["ToolCache", "MARKER_SUFFIX"]
