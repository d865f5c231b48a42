"""
Pytest configuration and shared fixtures.
"""

import json
from pathlib import Path
from typing import Dict, List

import pytest

from vmcompat.cache import reset_version_mapping
from vmcompat.logger import get_logger, reset_logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Install a console-less global logger for every test."""
    reset_logger()
    get_logger(enable_console=False)
    yield
    reset_logger()


@pytest.fixture(autouse=True)
def fresh_version_mapping():
    reset_version_mapping()
    yield
    reset_version_mapping()


@pytest.fixture
def plugin_manifest() -> Dict[str, int]:
    """Plugin manifest whose newest entry is announced but unreleased."""
    return {
        "v0.5.3": 27,
        "v0.5.2": 26,
        "v0.5.1": 26,
        "v0.5.0": 25,
        "v0.4.12": 24,
    }


@pytest.fixture
def host_manifest() -> Dict[str, List[str]]:
    """Host manifest with protocol 26 served by two host releases."""
    return {
        "27": ["v1.10.3"],
        "26": ["v1.10.1", "v1.10.2", "v1.10.0"],
        "25": ["v1.9.16"],
        "24": ["v1.9.14", "v1.9.15"],
    }


class RecordingLookup:
    """Host lookup that records the protocols it was asked for."""

    def __init__(self):
        self.calls = []

    def __call__(self, protocol: int) -> str:
        self.calls.append(protocol)
        return f"host-for-{protocol}"


@pytest.fixture
def recording_lookup() -> RecordingLookup:
    return RecordingLookup()


@pytest.fixture
def manifest_files(tmp_path, plugin_manifest, host_manifest) -> Dict[str, Path]:
    """Write both manifests to disk, plugin one in its published wrapper form."""
    plugin_file = tmp_path / "subnet-evm-compatibility.json"
    plugin_file.write_text(json.dumps({"rpcChainVMProtocolVersion": plugin_manifest}))
    host_file = tmp_path / "avalanchego-compatibility.json"
    host_file.write_text(json.dumps(host_manifest))
    return {"plugin": plugin_file, "host": host_file}
