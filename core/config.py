# =============================================================================
# core/config.py  —  Kubecost Connection Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the Kubecost connection settings (base URL + credentials) from the
#   environment ONCE and freezes them into a KubecostConfig.  Everything
#   downstream (client, server) receives this object; nothing else in the
#   project reads os.environ.
#
# ENVIRONMENT VARIABLES:
#   KUBECOST_BASE_URL   → defaults to http://localhost:9090
#   KUBECOST_API_TOKEN  → bearer token (wins if present)
#   KUBECOST_USERNAME   → basic auth user  } both required for basic auth
#   KUBECOST_PASSWORD   → basic auth pass  }
#
#   Blank values count as unset.
# =============================================================================

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:9090"


class ConfigError(ValueError):
    """Raised when the Kubecost connection settings are incomplete."""


@dataclass(frozen=True)
class KubecostConfig:
    """Immutable connection settings for the Kubecost API.

    Exactly one auth mode is used at request time: the bearer token if set,
    otherwise basic auth.  Construction fails unless at least one of them is
    complete.
    """

    base_url: str
    api_token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise ConfigError("KUBECOST_BASE_URL environment variable is required")
        if not self.api_token and not self.has_basic_auth:
            raise ConfigError(
                "Either KUBECOST_API_TOKEN or both KUBECOST_USERNAME and "
                "KUBECOST_PASSWORD are required"
            )

    @property
    def has_basic_auth(self) -> bool:
        return bool(self.username and self.password)

    @property
    def auth_mode(self) -> str:
        """'bearer' or 'basic', whichever the client will actually send."""
        return "bearer" if self.api_token else "basic"

    def __repr__(self) -> str:
        # Credentials stay out of logs and tracebacks.
        return (
            f"KubecostConfig(base_url={self.base_url!r}, "
            f"auth_mode={self.auth_mode!r})"
        )


def _read(environ: Mapping[str, str], key: str) -> Optional[str]:
    value = environ.get(key, "").strip()
    return value or None


def load_config(environ: Optional[Mapping[str, str]] = None) -> KubecostConfig:
    """Build a KubecostConfig from environment variables.

    Args:
        environ: Mapping to read from.  Defaults to os.environ; tests pass a
                 plain dict.

    Raises:
        ConfigError: If no complete credential set is present.
    """
    if environ is None:
        environ = os.environ

    return KubecostConfig(
        base_url=_read(environ, "KUBECOST_BASE_URL") or DEFAULT_BASE_URL,
        api_token=_read(environ, "KUBECOST_API_TOKEN"),
        username=_read(environ, "KUBECOST_USERNAME"),
        password=_read(environ, "KUBECOST_PASSWORD"),
    )
