"""
Version ordering helpers.

Plugin and host releases are tagged like ``v0.5.2``; protocol versions are
integers stored as JSON object keys. Only ordering is needed here, so these
helpers wrap the ``semver`` package rather than modelling versions further.
"""

import re
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from semver import Version

from .errors import MalformedProtocolVersion

# optional sign then ASCII digits, no surrounding whitespace
_PROTOCOL_RE = re.compile(r"[+-]?[0-9]+")


def parse_version(text: str) -> Optional[Version]:
    """
    Parse a release string into a semver Version.

    A single leading "v" is ignored and missing minor/patch parts default
    to zero. Returns None when the string is not a version.
    """
    candidate = text.strip()
    if candidate[:1] in ("v", "V"):
        candidate = candidate[1:]
    try:
        return Version.parse(candidate, optional_minor_and_patch=True)
    except (ValueError, TypeError):
        return None


def version_sort_key(text: str) -> Tuple:
    """Total-order key: invalid strings below all versions, ties broken by text."""
    parsed = parse_version(text)
    if parsed is None:
        return (0, None, text)
    return (1, parsed, text)


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 comparing two release strings by semver precedence."""
    left = version_sort_key(a)
    right = version_sort_key(b)
    if left[0] != right[0]:
        return -1 if left[0] < right[0] else 1
    if left[1] is None:
        # both invalid: fall back to plain string order
        return (left[2] > right[2]) - (left[2] < right[2])
    return left[1].compare(right[1])


def sort_versions_desc(versions: Iterable[str]) -> List[str]:
    """Sort release strings newest first."""
    return sorted(versions, key=version_sort_key, reverse=True)


def parse_protocol(key: str) -> int:
    """Convert a protocol version key to an int.

    Raises MalformedProtocolVersion for anything but an optionally signed
    run of ASCII digits.
    """
    if not isinstance(key, str) or not _PROTOCOL_RE.fullmatch(key):
        raise MalformedProtocolVersion(key)
    return int(key)


def sort_protocols_desc(keys: Iterable[str]) -> List[int]:
    """Convert protocol version keys to ints and sort highest first."""
    return sorted((parse_protocol(key) for key in keys), reverse=True)


def index_protocols(host_manifest: Mapping[str, List[str]]) -> Dict[int, List[str]]:
    """
    Key host groups by integer protocol version.

    Raises:
        MalformedProtocolVersion: If a key is not an integer, or two keys
            such as "26" and "026" name the same protocol
    """
    index: Dict[int, List[str]] = {}
    seen: Dict[int, str] = {}
    for key, hosts in host_manifest.items():
        protocol = parse_protocol(key)
        if protocol in seen:
            raise MalformedProtocolVersion(
                key, f"duplicates protocol key {seen[protocol]!r}"
            )
        seen[protocol] = key
        index[protocol] = hosts
    return index
