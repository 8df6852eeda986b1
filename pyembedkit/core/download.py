"""
HTTP download of distribution archives.

Downloads stream to a uniquely named file in the scratch directory, so two
runs never write the same file. There is no retry or resume: a failed
request fails the install immediately and the partial file is removed.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from pyembedkit.core.directory import get_temp_dir
from pyembedkit.core.exceptions import DownloadError
from pyembedkit.core.interfaces import Downloader

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

MB = 1024 * 1024
PROGRESS_INTERVAL = 0.5  # seconds between progress callbacks


@dataclass
class DownloadProgress:
    """Snapshot of a running download."""

    bytes_downloaded: int
    total_bytes: int  # 0 when the server sent no content-length
    speed_bps: float

    @property
    def percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.bytes_downloaded / self.total_bytes * 100

    def __str__(self) -> str:
        return format_progress(self)


def download_file(
    url: str,
    destination: Path,
    timeout: int = 30,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
) -> Path:
    """
    Stream a URL into a local file.

    Args:
        url: URL to fetch
        destination: File to write (parent directories are created)
        timeout: Socket timeout per request in seconds
        progress_callback: Called with a DownloadProgress at most every
            PROGRESS_INTERVAL seconds and once the last byte has arrived

    Returns:
        destination

    Raises:
        DownloadError: If the request fails, returns an error status, or
            the file cannot be written
        ValueError: If url is empty

    Example:
        >>> download_file(
        ...     "https://www.python.org/ftp/python/3.14.0/python-3.14.0-embed-amd64.zip",
        ...     Path("/tmp/python.zip"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DownloadError(f"Failed to create {destination.parent}: {e}") from e
    logger.debug(f"Downloading {url} to {destination}")

    received = 0
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            expected = _content_length(response, url)

            started = last_report = time.monotonic()
            with open(destination, "wb") as out:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    out.write(chunk)
                    received += len(chunk)

                    if progress_callback is None:
                        continue
                    now = time.monotonic()
                    if now - last_report >= PROGRESS_INTERVAL or received == expected:
                        elapsed = now - started
                        progress_callback(
                            DownloadProgress(
                                bytes_downloaded=received,
                                total_bytes=expected,
                                speed_bps=received / elapsed if elapsed > 0 else 0.0,
                            )
                        )
                        last_report = now
    except RequestException as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {e}") from e
    except OSError as e:
        destination.unlink(missing_ok=True)
        raise DownloadError(f"Failed to write {destination}: {e}") from e

    logger.debug(f"Downloaded {received} bytes to {destination}")
    return destination


def _content_length(response: requests.Response, url: str) -> int:
    """Declared body size, or 0 when the server sent none."""
    value = response.headers.get("content-length")
    if not value:
        return 0
    try:
        size = int(value)
    except ValueError as e:
        raise DownloadError(f"Invalid content-length {value!r} from {url}") from e
    if size < 0:
        raise DownloadError(f"Invalid content-length {value!r} from {url}")
    return size


def format_progress(progress: DownloadProgress) -> str:
    """
    Render a DownloadProgress as a single line.

    Example:
        >>> print(format_progress(DownloadProgress(5242880, 10485760, 1048576)))
        5.0/10.0 MB (50.0%) at 1.0 MB/s
    """
    done = progress.bytes_downloaded / MB
    speed = progress.speed_bps / MB

    if progress.total_bytes <= 0:
        return f"{done:.1f} MB at {speed:.1f} MB/s"
    total = progress.total_bytes / MB
    return f"{done:.1f}/{total:.1f} MB ({progress.percentage:.1f}%) at {speed:.1f} MB/s"


class HttpDownloader(Downloader):
    """
    Downloader that fetches archives into the scratch directory.

    Example:
        >>> downloader = HttpDownloader(temp_dir=Path("/tmp/pyembedkit"))
        >>> archive = downloader.download("https://example.com/python.zip")
    """

    def __init__(self, temp_dir: Optional[Path] = None, timeout: int = 30):
        """
        Initialize downloader.

        Args:
            temp_dir: Scratch directory (default: resolved from environment)
            timeout: Socket timeout per request in seconds
        """
        self.temp_dir = Path(temp_dir) if temp_dir else get_temp_dir()
        self.timeout = timeout

    def download(self, url: str) -> Path:
        destination = self.temp_dir / str(uuid.uuid4())
        return download_file(
            url,
            destination,
            timeout=self.timeout,
            progress_callback=self._log_progress,
        )

    @staticmethod
    def _log_progress(progress: DownloadProgress):
        logger.debug(f"Downloaded {progress}")


__all__ = [
    "DownloadProgress",
    "download_file",
    "format_progress",
    "HttpDownloader",
]
