"""
Scenario version resolution.

Responsibilities:
- Order plugin releases and protocol versions.
- Pick the host pair, solo pair and upgrade pair used by end-to-end scenarios.

Non-Responsibilities:
- No downloading or JSON parsing.
- No caching.

Invariant:
The result is a pure function of the two manifests and the host lookup.
"""

from types import MappingProxyType
from typing import Callable, Dict, List, Mapping

from .errors import InsufficientVersions, NoSoloPairFound
from .logger import get_logger
from .versions import index_protocols, sort_versions_desc

SOLO_PLUGIN_A_KEY = "SoloPluginA"
SOLO_PLUGIN_B_KEY = "SoloPluginB"
SOLO_HOST_KEY = "SoloHost"
MULTI_HOST_1_KEY = "MultiHost1"
MULTI_HOST_2_KEY = "MultiHost2"
MULTI_HOST_PLUGIN_KEY = "MultiHostPlugin"
ONLY_HOST_KEY = "OnlyHost"
LATEST_PLUGIN_TO_HOST_KEY = "LatestPluginToHost"
LATEST_HOST_TO_PLUGIN_KEY = "LatestHostToPlugin"

SCENARIO_KEYS = (
    SOLO_PLUGIN_A_KEY,
    SOLO_PLUGIN_B_KEY,
    SOLO_HOST_KEY,
    MULTI_HOST_1_KEY,
    MULTI_HOST_2_KEY,
    MULTI_HOST_PLUGIN_KEY,
    ONLY_HOST_KEY,
    LATEST_PLUGIN_TO_HOST_KEY,
    LATEST_HOST_TO_PLUGIN_KEY,
)

# host-only scenarios always run against the newest host
LATEST = "latest"

ScenarioMap = Mapping[str, str]
HostLookup = Callable[[int], str]


def released_plugin_versions(plugin_manifest: Mapping[str, int]) -> List[str]:
    """
    Plugin versions newest first, without the newest manifest entry.

    The plugin manifest announces its upcoming release before that release
    is downloadable, so the top entry is never selectable.

    Raises:
        InsufficientVersions: If fewer than two versions remain
    """
    versions = sort_versions_desc(plugin_manifest)[1:]
    if len(versions) < 2:
        raise InsufficientVersions(len(versions))
    return versions


def _assign_multi_host(
    mapping: Dict[str, str],
    versions: List[str],
    plugin_manifest: Mapping[str, int],
    host_manifest: Mapping[str, List[str]],
) -> None:
    hosts_by_protocol = index_protocols(host_manifest)
    for protocol in sorted(hosts_by_protocol, reverse=True):
        hosts = hosts_by_protocol[protocol]
        if len(hosts) > 1:
            hosts = sort_versions_desc(hosts)
            mapping[MULTI_HOST_1_KEY] = hosts[0]
            mapping[MULTI_HOST_2_KEY] = hosts[1]
            for version in versions:
                if plugin_manifest[version] == protocol:
                    mapping[MULTI_HOST_PLUGIN_KEY] = version
                    break
            return


def _assign_solo_pair(
    mapping: Dict[str, str],
    versions: List[str],
    plugin_manifest: Mapping[str, int],
    latest_host_for_protocol: HostLookup,
) -> None:
    for first, second in zip(versions, versions[1:]):
        protocol = plugin_manifest[first]
        host = latest_host_for_protocol(protocol)
        if protocol == plugin_manifest[second]:
            mapping[SOLO_PLUGIN_A_KEY] = first
            mapping[SOLO_PLUGIN_B_KEY] = second
            mapping[SOLO_HOST_KEY] = host
            return
        if not mapping[LATEST_PLUGIN_TO_HOST_KEY]:
            mapping[LATEST_PLUGIN_TO_HOST_KEY] = first
            mapping[LATEST_HOST_TO_PLUGIN_KEY] = host

    raise NoSoloPairFound(
        "No consecutive plugin versions share a protocol version: "
        + ", ".join(f"{v}={plugin_manifest[v]}" for v in versions)
    )


def resolve(
    plugin_manifest: Mapping[str, int],
    host_manifest: Mapping[str, List[str]],
    latest_host_for_protocol: HostLookup,
) -> ScenarioMap:
    """
    Build the scenario -> version mapping for end-to-end tests.

    Args:
        plugin_manifest: plugin version -> protocol version
        host_manifest: protocol version key -> host versions
        latest_host_for_protocol: returns the host release to pair with a
            plugin speaking the given protocol; its errors propagate

    Returns:
        Read-only mapping holding every key in SCENARIO_KEYS; scenarios that
        could not be filled map to ""

    Raises:
        InsufficientVersions, MalformedProtocolVersion, NoSoloPairFound, or
        whatever latest_host_for_protocol raises
    """
    versions = released_plugin_versions(plugin_manifest)

    mapping = dict.fromkeys(SCENARIO_KEYS, "")
    _assign_multi_host(mapping, versions, plugin_manifest, host_manifest)
    mapping[ONLY_HOST_KEY] = LATEST
    _assign_solo_pair(mapping, versions, plugin_manifest, latest_host_for_protocol)

    logger = get_logger()
    logger.record_resolution()
    for key in SCENARIO_KEYS:
        logger.info(f"{key}: {mapping[key]}")

    return MappingProxyType(mapping)
