"""
Core kubectl management for kubectl-switch.

This module handles:
- Version normalization and comparison
- kubectl download, caching and execution
- Server version resolution with a timeout
"""

from kubectl_switch._core.version import (
    SWITCH_VERSION,
    normalize_version,
    parse_version,
    is_newer_version,
)
from kubectl_switch._core.lifecycle import (
    Kubectl,
    ensure_kubectl,
    get_platform_info,
    resolve_platform,
)
from kubectl_switch._core.resolve import (
    HTTPVersionSource,
    VersionSource,
    resolve_version,
)

__all__ = [
    # Version
    "SWITCH_VERSION",
    "normalize_version",
    "parse_version",
    "is_newer_version",
    # Lifecycle
    "Kubectl",
    "ensure_kubectl",
    "get_platform_info",
    "resolve_platform",
    # Resolution
    "HTTPVersionSource",
    "VersionSource",
    "resolve_version",
]
