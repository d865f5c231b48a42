"""HTTP access for compatibility manifests and release metadata."""

import json
from typing import Optional

import requests

from .config import DEFAULT_HTTP_TIMEOUT
from .errors import FetchFailure, ParseFailure
from .logger import get_logger


class Downloader:
    """
    Fetches raw bytes over HTTP.

    Failures are logged, counted and raised as FetchFailure. Nothing is
    retried: a transport error ends the resolution that needed the bytes.
    """

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session

    def _get(self, url: str, **kwargs):
        getter = self.session.get if self.session is not None else requests.get
        return getter(url, timeout=self.timeout, **kwargs)

    def download(self, url: str) -> bytes:
        """Fetch URL and return the response body.

        Args:
            url: The URL to fetch

        Returns:
            Response body bytes on success

        Raises:
            FetchFailure: On any HTTP error, timeout, or request failure
        """
        logger = get_logger()
        logger.record_download_attempt()
        logger.debug("Downloading", url=url)
        try:
            resp = self._get(url)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.record_download_failure(f"HTTPError_{status}")
            if status == 404:
                logger.warning("Document not found", url=url, status=404)
                raise FetchFailure(f"Document not found (404): {url}", url=url, status=404) from e
            logger.error("Request failed", url=url, status=status)
            raise FetchFailure(f"Request failed ({status}): {url}", url=url, status=status) from e
        except requests.exceptions.Timeout as e:
            logger.record_download_failure("Timeout")
            logger.warning("Request timed out", url=url)
            raise FetchFailure(f"Request timed out: {url}", url=url) from e
        except requests.exceptions.RequestException as e:
            logger.record_download_failure("RequestException")
            logger.error("Request error", url=url, error=str(e))
            raise FetchFailure(f"Request error for {url}: {e}", url=url) from e

        logger.record_download_success()
        return resp.content

    def get_latest_release_version(self, url: str) -> str:
        """
        Return the tag of the latest published release.

        Args:
            url: A GitHub "latest release" API URL

        Raises:
            FetchFailure: If the document cannot be downloaded
            ParseFailure: If it has no usable tag_name
        """
        raw = self.download(url)
        try:
            data = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as e:
            raise ParseFailure(f"Release document is not valid JSON: {e}", url=url) from e
        tag = data.get("tag_name") if isinstance(data, dict) else None
        if not isinstance(tag, str) or not tag.strip():
            raise ParseFailure(
                "Release document has no tag_name",
                errors=["Missing required field: tag_name"],
                url=url,
            )
        return tag.strip()
