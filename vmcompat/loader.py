"""
Manifest loading.

Fetches both compatibility manifests, parses them, and hands them to the
resolver together with a host lookup. Sources may be http(s) URLs or local
file paths; a local file stands in for a download in offline runs.
"""

from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlparse

from .config import Settings
from .downloader import Downloader
from .errors import FetchFailure
from .hosts import HostReleaseLookup
from .logger import get_logger
from .resolver import ScenarioMap, resolve
from .schema import parse_host_manifest, parse_plugin_manifest


def _is_remote(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


class ManifestLoader:
    """Loads manifests for one resolution and runs the resolver."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        downloader: Optional[Downloader] = None,
        plugin_source: Optional[str] = None,
        host_source: Optional[str] = None,
        release_source: Optional[str] = None,
        check_release: bool = True,
    ):
        """
        Args:
            settings: Defaults for sources and timeouts (default: from env)
            downloader: HTTP fetcher (default: one built from settings)
            plugin_source: URL or path of the plugin manifest
            host_source: URL or path of the host manifest
            release_source: URL of the latest host release document
            check_release: Skip newer-than-released hosts when True
        """
        self.settings = settings or Settings.from_env()
        self.downloader = downloader or Downloader(timeout=self.settings.http_timeout)
        self.plugin_source = plugin_source or self.settings.plugin_compat_url
        self.host_source = host_source or self.settings.host_compat_url
        self.release_source = release_source or self.settings.host_release_url
        if not check_release:
            self.release_source = None

    def fetch(self, source: str) -> bytes:
        """Return the raw bytes of a URL or local file."""
        if _is_remote(source):
            return self.downloader.download(source)
        path = Path(source)
        try:
            return path.read_bytes()
        except OSError as e:
            get_logger().error("Manifest file unreadable", path=str(path), error=str(e))
            raise FetchFailure(f"Cannot read {path}: {e}", url=source) from e

    def load_plugin_manifest(self) -> Dict[str, int]:
        return parse_plugin_manifest(self.fetch(self.plugin_source), url=self.plugin_source)

    def load_host_manifest(self) -> Dict[str, List[str]]:
        return parse_host_manifest(self.fetch(self.host_source), url=self.host_source)

    def host_lookup(self, host_manifest: Dict[str, List[str]]) -> HostReleaseLookup:
        """Build the host lookup; the release document is fetched on first use."""
        if self.release_source is None:
            return HostReleaseLookup(host_manifest)
        release_source = self.release_source
        return HostReleaseLookup(
            host_manifest,
            latest_release=lambda: self.downloader.get_latest_release_version(release_source),
        )

    def resolve(self) -> ScenarioMap:
        """Fetch both manifests, plugin first, and resolve scenario versions."""
        logger = get_logger()
        logger.info("Resolving scenario versions", plugin=self.plugin_source, host=self.host_source)
        plugin_manifest = self.load_plugin_manifest()
        host_manifest = self.load_host_manifest()
        return resolve(plugin_manifest, host_manifest, self.host_lookup(host_manifest))
