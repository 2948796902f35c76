"""
Configuration for kubectl-switch.

A single immutable SwitchConfig is built once (usually from the
environment) and handed to every component that needs it. Tests build
their own instances instead of patching module globals.

Environment Variables:
    KUBECTL_SWITCH_URL_TEMPLATE: kubectl download URL template
    KUBECTL_SWITCH_DEFAULT_VERSION: kubectl version used when the server
        version cannot be resolved in time
    KUBECTL_SWITCH_TIMEOUT: seconds to wait for the server version
    KUBECTL_SWITCH_UPDATE_TTL: seconds a cached release check stays valid
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, Mapping, Optional

# kubectl version used when the API server cannot be asked in time
DEFAULT_KUBECTL_VERSION = "1.13.0"

# GitHub repository publishing kubectl-switch builds
GITHUB_OWNER = "tjamet"
GITHUB_REPO = "kubectl-switch"

KUBECTL_URL_TEMPLATE = "https://dl.k8s.io/release/v{version}/bin/{os}/{arch}/kubectl"


def default_home_dir() -> str:
    """
    Resolve the user's home directory.
    
    $HOME wins when set, then %USERPROFILE% (Windows), then the
    platform default.
    """
    home = os.environ.get("HOME")
    if home:
        return home
    profile = os.environ.get("USERPROFILE")
    if profile:
        return profile
    return str(Path.home())


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from e


@dataclass(frozen=True)
class SwitchConfig:
    """
    Settings shared by the kubectl cache and the self-updater.
    
    Attributes:
        url_template: kubectl download URL with {version}, {os}, {arch}
        default_version: kubectl version used when resolution fails
        version_timeout: Max seconds to wait for the server version
        download_timeout: Socket timeout for downloads, in seconds
        github_owner: Owner of the repository publishing wrapper builds
        github_repo: Repository publishing wrapper builds
        update_check_ttl: Seconds a cached latest-release lookup is reused
        home_dir: Callable returning the home directory (.kube lives there)
        os_name: Override for the detected OS (None = detect)
        arch: Override for the detected architecture (None = detect)
    """
    url_template: str = KUBECTL_URL_TEMPLATE
    default_version: str = DEFAULT_KUBECTL_VERSION
    version_timeout: float = 1.0
    download_timeout: float = 60.0
    github_owner: str = GITHUB_OWNER
    github_repo: str = GITHUB_REPO
    update_check_ttl: float = 24 * 60 * 60
    home_dir: Callable[[], str] = field(default=default_home_dir, compare=False)
    os_name: Optional[str] = None
    arch: Optional[str] = None
    
    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SwitchConfig":
        """
        Build a config from environment variables, falling back to defaults.
        
        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        env = os.environ if env is None else env
        defaults = cls()
        return cls(
            url_template=env.get("KUBECTL_SWITCH_URL_TEMPLATE") or defaults.url_template,
            default_version=env.get("KUBECTL_SWITCH_DEFAULT_VERSION") or defaults.default_version,
            version_timeout=_float_env(env, "KUBECTL_SWITCH_TIMEOUT", defaults.version_timeout),
            update_check_ttl=_float_env(env, "KUBECTL_SWITCH_UPDATE_TTL", defaults.update_check_ttl),
        )
    
    def with_home(self, home: str) -> "SwitchConfig":
        """Return a copy rooted at a fixed home directory."""
        return replace(self, home_dir=lambda: home)
