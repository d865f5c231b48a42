"""Plugin/host version pairing for end-to-end test scenarios."""

__version__ = "0.1.0"

from .cache import VersionMappingCache, get_version_mapping, reset_version_mapping
from .errors import (
    FetchFailure,
    InsufficientVersions,
    MalformedProtocolVersion,
    NoHostVersionFound,
    NoSoloPairFound,
    ParseFailure,
    VersionMappingError,
)
from .hosts import HostReleaseLookup
from .loader import ManifestLoader
from .resolver import SCENARIO_KEYS, resolve
