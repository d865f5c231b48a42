"""
Tests for HTTP downloads.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from vmcompat.downloader import Downloader
from vmcompat.errors import FetchFailure, ParseFailure
from vmcompat.logger import get_logger

URL = "https://example.com/compatibility.json"


def _response(content: bytes = b"{}", status: int = 200) -> Mock:
    resp = Mock()
    resp.status_code = status
    resp.content = content
    if status >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(response=resp)
    return resp


class TestDownload:
    """Test Downloader.download."""

    def test_returns_body(self):
        with patch("vmcompat.downloader.requests.get", return_value=_response(b'{"26": []}')) as get:
            assert Downloader(timeout=3).download(URL) == b'{"26": []}'
        get.assert_called_once_with(URL, timeout=3)

    def test_uses_session_when_given(self):
        session = Mock()
        session.get.return_value = _response(b"ok")
        assert Downloader(session=session).download(URL) == b"ok"
        session.get.assert_called_once()

    def test_not_found(self):
        with patch("vmcompat.downloader.requests.get", return_value=_response(status=404)):
            with pytest.raises(FetchFailure) as exc:
                Downloader().download(URL)
        assert exc.value.status == 404
        assert exc.value.url == URL
        assert "404" in str(exc.value)

    def test_server_error(self):
        with patch("vmcompat.downloader.requests.get", return_value=_response(status=503)):
            with pytest.raises(FetchFailure) as exc:
                Downloader().download(URL)
        assert exc.value.status == 503

    def test_timeout_not_retried(self):
        """A timeout fails immediately."""
        with patch(
            "vmcompat.downloader.requests.get",
            side_effect=requests.exceptions.Timeout("read timed out"),
        ) as get:
            with pytest.raises(FetchFailure) as exc:
                Downloader().download(URL)
        assert get.call_count == 1
        assert isinstance(exc.value.__cause__, requests.exceptions.Timeout)

    def test_connection_error(self):
        with patch(
            "vmcompat.downloader.requests.get",
            side_effect=requests.exceptions.ConnectionError("refused"),
        ):
            with pytest.raises(FetchFailure):
                Downloader().download(URL)

    def test_metrics(self):
        """Attempts, successes and failures are counted."""
        with patch("vmcompat.downloader.requests.get", return_value=_response()):
            Downloader().download(URL)
        with patch("vmcompat.downloader.requests.get", return_value=_response(status=500)):
            with pytest.raises(FetchFailure):
                Downloader().download(URL)

        metrics = get_logger().get_metrics()
        assert metrics["downloads_attempted"] == 2
        assert metrics["downloads_successful"] == 1
        assert metrics["downloads_failed"] == 1
        assert metrics["errors_by_type"]["HTTPError_500"] == 1


class TestLatestReleaseVersion:
    """Test reading the latest release tag."""

    def test_tag_name(self):
        body = b'{"tag_name": "v1.10.3", "name": "Release"}'
        with patch("vmcompat.downloader.requests.get", return_value=_response(body)):
            assert Downloader().get_latest_release_version(URL) == "v1.10.3"

    def test_missing_tag(self):
        with patch("vmcompat.downloader.requests.get", return_value=_response(b'{"name": "x"}')):
            with pytest.raises(ParseFailure) as exc:
                Downloader().get_latest_release_version(URL)
        assert exc.value.errors == ["Missing required field: tag_name"]

    def test_not_json(self):
        with patch("vmcompat.downloader.requests.get", return_value=_response(b"<html>")):
            with pytest.raises(ParseFailure):
                Downloader().get_latest_release_version(URL)
