"""
Host release lookup by protocol version.

A host manifest can list releases that are announced but not yet published.
When the latest published release is known, newer entries are skipped so the
chosen host can actually be downloaded.
"""

from typing import Callable, Dict, List, Optional, Union

from .errors import NoHostVersionFound
from .logger import get_logger
from .versions import compare_versions, index_protocols, sort_versions_desc

LatestRelease = Union[str, Callable[[], str], None]


class HostReleaseLookup:
    """Implements latest_host_for_protocol over a parsed host manifest."""

    def __init__(self, host_manifest: Dict[str, List[str]], latest_release: LatestRelease = None):
        """
        Args:
            host_manifest: protocol version key -> host versions
            latest_release: latest published host version, or a zero-arg
                callable returning it (called at most once, on first lookup)

        Raises:
            MalformedProtocolVersion: If host_manifest has a bad protocol key
        """
        self.host_manifest = host_manifest
        self._hosts_by_protocol = index_protocols(host_manifest)
        self._latest_release = latest_release
        self._latest_resolved = not callable(latest_release)

    def latest_release(self) -> Optional[str]:
        if not self._latest_resolved:
            self._latest_release = self._latest_release()
            self._latest_resolved = True
        return self._latest_release

    def latest_host_for_protocol(self, protocol: int) -> str:
        """
        Return the newest usable host release speaking the given protocol.

        Raises:
            NoHostVersionFound: If the protocol has no listed hosts, or all of
                them are newer than the latest published release
        """
        eligible = self._hosts_by_protocol.get(protocol) or []
        if not eligible:
            raise NoHostVersionFound(protocol, "protocol not listed in host manifest")

        candidates = sort_versions_desc(eligible)
        latest = self.latest_release()
        if latest is None:
            return candidates[0]

        for candidate in candidates:
            if compare_versions(candidate, latest) <= 0:
                return candidate

        get_logger().warning(
            "All host versions for protocol are unreleased",
            protocol=protocol,
            latest_release=latest,
            candidates=candidates,
        )
        raise NoHostVersionFound(protocol, f"all listed versions are newer than {latest}")

    __call__ = latest_host_for_protocol
