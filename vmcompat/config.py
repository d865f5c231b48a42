"""
Runtime settings for vmcompat.

Values come from the process environment, optionally seeded from a .env file
in the working directory. Variables already set in the environment win over
.env entries.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_PLUGIN_COMPAT_URL = (
    "https://raw.githubusercontent.com/ava-labs/subnet-evm/master/compatibility.json"
)
DEFAULT_HOST_COMPAT_URL = (
    "https://raw.githubusercontent.com/ava-labs/avalanchego/master/version/compatibility.json"
)
DEFAULT_HOST_RELEASE_URL = (
    "https://api.github.com/repos/ava-labs/avalanchego/releases/latest"
)
DEFAULT_HTTP_TIMEOUT = 15.0
DEFAULT_LOG_LEVEL = "INFO"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def load_env(env_path: Optional[Path] = None) -> bool:
    """Load .env from the working directory if present.

    Returns True when a file was loaded.
    """
    if env_path is None:
        env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return False
    load_dotenv(dotenv_path=env_path, override=False)
    return True


@dataclass(frozen=True)
class Settings:
    plugin_compat_url: str = DEFAULT_PLUGIN_COMPAT_URL
    host_compat_url: str = DEFAULT_HOST_COMPAT_URL
    # None disables the latest-release check in the host lookup
    host_release_url: Optional[str] = DEFAULT_HOST_RELEASE_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ValueError: If a numeric or enumerated variable has an invalid value
        """
        env = os.environ if environ is None else environ

        timeout_raw = env.get("VMCOMPAT_HTTP_TIMEOUT", "").strip()
        timeout = DEFAULT_HTTP_TIMEOUT
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                raise ValueError(
                    f"VMCOMPAT_HTTP_TIMEOUT must be a number of seconds, got {timeout_raw!r}"
                ) from None
            if timeout <= 0:
                raise ValueError("VMCOMPAT_HTTP_TIMEOUT must be positive")

        level = env.get("VMCOMPAT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
        if level not in _LOG_LEVELS:
            raise ValueError(
                f"VMCOMPAT_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {level!r}"
            )

        release_url = env.get("VMCOMPAT_HOST_RELEASE_URL", DEFAULT_HOST_RELEASE_URL).strip()
        log_dir = env.get("VMCOMPAT_LOG_DIR", "").strip()

        return cls(
            plugin_compat_url=env.get("VMCOMPAT_PLUGIN_COMPAT_URL", "").strip() or DEFAULT_PLUGIN_COMPAT_URL,
            host_compat_url=env.get("VMCOMPAT_HOST_COMPAT_URL", "").strip() or DEFAULT_HOST_COMPAT_URL,
            host_release_url=release_url or None,
            http_timeout=timeout,
            log_level=level,
            log_dir=Path(log_dir) if log_dir else None,
        )
