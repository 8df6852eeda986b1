"""
File system utilities for pyembedkit.

This module provides:
- Zip archive extraction with path traversal protection
- Safe recursive deletion with prefix safeguards
- Collaborator wrappers (ZipExtractor, TreeRemover) for the installer core
"""

import logging
import os
import shutil
import stat
import uuid
import zipfile
from pathlib import Path
from typing import Optional, Union

from pyembedkit.core.directory import get_temp_dir
from pyembedkit.core.exceptions import ExtractError, InsecureArchiveError, RemoveError
from pyembedkit.core.interfaces import ArchiveExtractor, Remover

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/cache/python-embedded/3.14.0"), Path("/cache"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(member: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If member attempts directory traversal
    """
    member_path = (destination / member).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{member}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_zip(archive_path: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Extract a zip archive to a destination directory.

    All member paths are validated before anything is written.

    Args:
        archive_path: Path to the .zip file
        destination: Directory to extract to (created if missing)

    Returns:
        The destination directory

    Raises:
        ExtractError: If the archive is missing, corrupt, or cannot be written
        InsecureArchiveError: If the archive contains traversal paths

    Example:
        >>> extract_zip('python-3.14.0-embed-amd64.zip', '/tmp/python')
        PosixPath('/tmp/python')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ExtractError(f"Archive not found: {archive_path}")

    try:
        destination.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.namelist()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member, destination)

            zf.extractall(destination)
    except InsecureArchiveError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Extracted {len(members)} entries to {destination}")
    return destination


class ZipExtractor(ArchiveExtractor):
    """Extracts archives into fresh directories under the scratch directory."""

    def __init__(self, temp_dir: Optional[Path] = None):
        self.temp_dir = Path(temp_dir) if temp_dir else get_temp_dir()

    def extract(self, archive_path: Path) -> Path:
        return extract_zip(archive_path, self.temp_dir / str(uuid.uuid4()))


# ============================================================================
# Safe Deletion
# ============================================================================


def _handle_remove_readonly(func, path, exc_info):
    """Error handler for Windows read-only files."""
    if not os.access(path, os.W_OK):
        os.chmod(path, stat.S_IWRITE)
        func(path)
    else:
        raise exc_info[1]


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Remove a file or directory tree with safeguards.

    A missing path is not an error.

    Args:
        path: File or directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        OSError: If deletion fails

    Example:
        >>> safe_rmtree('/cache/python-embedded/3.12.0/amd64', require_prefix='/cache')
        >>> safe_rmtree('/usr/bin', require_prefix='/cache')  # ValueError
    """
    path = Path(path).absolute()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).absolute()
        if path == require_prefix or not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.is_dir():
        if IS_WINDOWS:
            shutil.rmtree(path, onerror=_handle_remove_readonly)
        else:
            shutil.rmtree(path)


class TreeRemover(Remover):
    """
    Recursive remover restricted to one root directory.

    Example:
        >>> remover = TreeRemover(root=Path("/opt/hostedtoolcache"))
        >>> remover.remove(Path("/opt/hostedtoolcache/python-embedded/3.12.0/amd64"))
    """

    def __init__(self, root: Optional[Path] = None):
        """
        Args:
            root: If given, only paths under this directory may be removed
        """
        self.root = Path(root) if root else None

    def remove(self, path: Path) -> None:
        try:
            safe_rmtree(path, require_prefix=self.root)
        except (ValueError, OSError) as e:
            raise RemoveError(str(e)) from e
        logger.debug(f"Removed {path}")


__all__ = [
    "is_relative_to",
    "extract_zip",
    "ZipExtractor",
    "safe_rmtree",
    "TreeRemover",
]
