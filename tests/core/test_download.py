"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import pytest
import requests
import responses
from unittest.mock import Mock, patch

from pyembedkit.core.download import (
    DownloadProgress,
    HttpDownloader,
    _content_length,
    download_file,
    format_progress,
)
from pyembedkit.core.exceptions import DownloadError

URL = "https://www.python.org/ftp/python/3.14.0/python-3.14.0-embed-amd64.zip"


class TestDownloadProgress:
    def test_percentage(self):
        progress = DownloadProgress(bytes_downloaded=50, total_bytes=200, speed_bps=1)
        assert progress.percentage == 25.0

    def test_percentage_unknown_total(self):
        progress = DownloadProgress(bytes_downloaded=50, total_bytes=0, speed_bps=1)
        assert progress.percentage == 0.0

    def test_progress_to_string(self):
        progress = DownloadProgress(
            bytes_downloaded=5242880,  # 5 MB
            total_bytes=10485760,  # 10 MB
            speed_bps=1048576,  # 1 MB/s
        )

        assert str(progress) == "5.0/10.0 MB (50.0%) at 1.0 MB/s"


class TestFormatProgress:
    def test_unknown_total(self):
        progress = DownloadProgress(
            bytes_downloaded=2097152, total_bytes=0, speed_bps=524288
        )
        assert format_progress(progress) == "2.0 MB at 0.5 MB/s"


class TestDownloadFile:
    @responses.activate
    def test_successful_download(self, tmp_path):
        content = b"PK\x03\x04 archive bytes"
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        destination = tmp_path / "python.zip"
        result = download_file(URL, destination)

        assert result == destination
        assert destination.read_bytes() == content

    @responses.activate
    def test_creates_parent_directory(self, tmp_path):
        responses.add(responses.GET, URL, body=b"data", status=200)

        destination = tmp_path / "nested" / "dir" / "python.zip"
        download_file(URL, destination)

        assert destination.exists()

    @responses.activate
    def test_http_404(self, tmp_path):
        responses.add(responses.GET, URL, status=404)

        destination = tmp_path / "python.zip"
        with pytest.raises(DownloadError, match="404"):
            download_file(URL, destination)

        assert not destination.exists()

    @responses.activate
    def test_connection_error(self, tmp_path):
        responses.add(
            responses.GET, URL, body=requests.exceptions.ConnectionError("refused")
        )

        with pytest.raises(DownloadError, match="refused"):
            download_file(URL, tmp_path / "python.zip")

    @responses.activate
    def test_write_failure_removes_partial_file(self, tmp_path):
        responses.add(responses.GET, URL, body=b"data", status=200)
        destination = tmp_path / "python.zip"

        with patch(
            "pyembedkit.core.download.open",
            side_effect=OSError("disk full"),
            create=True,
        ):
            with pytest.raises(DownloadError, match="disk full"):
                download_file(URL, destination)

        assert not destination.exists()

    def test_unwritable_parent(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(DownloadError, match="Failed to create"):
            download_file(URL, blocker / "python.zip")

    @pytest.mark.parametrize("length", ["abc", "-1"])
    @responses.activate
    def test_malformed_content_length(self, tmp_path, length):
        responses.add(
            responses.GET,
            URL,
            body=b"data",
            status=200,
            headers={"content-length": length},
        )

        with pytest.raises(DownloadError):
            download_file(URL, tmp_path / "python.zip")

    def test_empty_url(self, tmp_path):
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "python.zip")

    @responses.activate
    def test_progress_callback(self, tmp_path):
        content = b"x" * 20000
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )
        callback = Mock()

        download_file(URL, tmp_path / "python.zip", progress_callback=callback)

        # The final chunk always reports
        assert callback.called
        last = callback.call_args[0][0]
        assert last.bytes_downloaded == len(content)
        assert last.total_bytes == len(content)


class TestHttpDownloader:
    @responses.activate
    def test_downloads_into_temp_dir(self, tmp_path):
        responses.add(responses.GET, URL, body=b"zip", status=200)

        downloader = HttpDownloader(temp_dir=tmp_path)
        path = downloader.download(URL)

        assert path.parent == tmp_path
        assert path.read_bytes() == b"zip"

    @responses.activate
    def test_each_download_is_unique(self, tmp_path):
        responses.add(responses.GET, URL, body=b"zip", status=200)
        responses.add(responses.GET, URL, body=b"zip", status=200)

        downloader = HttpDownloader(temp_dir=tmp_path)
        assert downloader.download(URL) != downloader.download(URL)

    def test_temp_dir_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.delenv("PYEMBEDKIT_TEMP", raising=False)
        monkeypatch.setenv("RUNNER_TEMP", str(tmp_path))

        assert HttpDownloader().temp_dir == tmp_path

    @responses.activate
    def test_failure_raises_download_error(self, tmp_path):
        responses.add(responses.GET, URL, status=500)

        with pytest.raises(DownloadError):
            HttpDownloader(temp_dir=tmp_path).download(URL)


class TestContentLength:
    def test_missing_header(self):
        response = Mock(headers={})
        assert _content_length(response, URL) == 0

    def test_valid_header(self):
        response = Mock(headers={"content-length": "1024"})
        assert _content_length(response, URL) == 1024

    @pytest.mark.parametrize("value", ["abc", "1.5", "-1"])
    def test_malformed_header(self, value):
        response = Mock(headers={"content-length": value})

        with pytest.raises(DownloadError, match="Invalid content-length"):
            _content_length(response, URL)
