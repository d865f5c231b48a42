"""
Validation and parsing for the two compatibility manifests.

Plugin manifest: plugin version -> RPC protocol version (int). The published
file wraps this mapping in a "rpcChainVMProtocolVersion" object; the bare
mapping is accepted too.

Host manifest: protocol version (as a string key) -> list of host versions.
"""

import json
from typing import Any, Dict, List, Optional

from .errors import ParseFailure

PLUGIN_WRAPPER_KEY = "rpcChainVMProtocolVersion"


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _unwrap_plugin_manifest(data: Any) -> Any:
    if isinstance(data, dict) and PLUGIN_WRAPPER_KEY in data:
        return data[PLUGIN_WRAPPER_KEY]
    return data


def validate_plugin_manifest(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []
    mapping = _unwrap_plugin_manifest(data)
    if not isinstance(mapping, dict):
        return ["Plugin manifest must be a JSON object"]

    for version, protocol in mapping.items():
        if not _is_non_empty_str(version):
            errors.append("Plugin version keys must be non-empty strings")
        # bool is an int subclass; true/false are not protocol versions
        if isinstance(protocol, bool) or not isinstance(protocol, int):
            errors.append(f"Protocol version for '{version}' must be an integer")
    return errors


def validate_host_manifest(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []
    if not isinstance(data, dict):
        return ["Host manifest must be a JSON object"]

    for protocol, hosts in data.items():
        if not isinstance(hosts, list):
            errors.append(f"Host versions for protocol '{protocol}' must be a list")
            continue
        for host in hosts:
            if not _is_non_empty_str(host):
                errors.append(f"Host versions for protocol '{protocol}' must be non-empty strings")
                break
    return errors


def _decode(raw: bytes, what: str, url: Optional[str]) -> Any:
    try:
        return json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise ParseFailure(f"{what} is not valid JSON: {e}", url=url) from e


def parse_plugin_manifest(raw: bytes, url: Optional[str] = None) -> Dict[str, int]:
    """Decode a plugin compatibility document.

    Raises ParseFailure with the collected validation errors.
    """
    data = _decode(raw, "Plugin manifest", url)
    errors = validate_plugin_manifest(data)
    if errors:
        raise ParseFailure(f"Invalid plugin manifest: {errors[0]}", errors=errors, url=url)
    return dict(_unwrap_plugin_manifest(data))


def parse_host_manifest(raw: bytes, url: Optional[str] = None) -> Dict[str, List[str]]:
    """Decode a host compatibility document.

    Protocol keys are not checked for integrality here; the resolver reports
    those as MalformedProtocolVersion.
    """
    data = _decode(raw, "Host manifest", url)
    errors = validate_host_manifest(data)
    if errors:
        raise ParseFailure(f"Invalid host manifest: {errors[0]}", errors=errors, url=url)
    return {protocol: list(hosts) for protocol, hosts in data.items()}
