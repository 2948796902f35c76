"""
kubectl-switch: run the kubectl that matches your cluster.

This package provides:
- A version-keyed kubectl cache under ~/.kube/bin, filled on demand
- Transparent execution of the cached kubectl (exit status forwarded)
- Server version resolution bounded by a timeout
- Best-effort, operator-confirmed self-update from GitHub releases

Installation:
    pip install kubectl-switch

Quickstart:
    from kubectl_switch import Kubectl, SwitchConfig

    kubectl = Kubectl(SwitchConfig.from_env())
    if not kubectl.installed("v1.27.3"):
        kubectl.download("v1.27.3")
    status = kubectl.exec("v1.27.3", ["get", "pods"])
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
    resolve_version,
)
from kubectl_switch.config import SwitchConfig, DEFAULT_KUBECTL_VERSION
from kubectl_switch.errors import (
    KubectlSwitchError,
    NotAVersionError,
    DownloadFailed,
    FileSystemError,
    LaunchFailed,
    UnsupportedPlatformError,
    ReleaseLookupError,
    UpdateFailed,
)
from kubectl_switch.types import Release, ReleaseAsset, UpdateDecision
from kubectl_switch.update import (
    SelfUpdater,
    HTTPUpdater,
    GitHubReleaseGetter,
    CachedReleaseGetter,
    TTYPrompter,
    select_asset,
)

__version__ = SWITCH_VERSION

__all__ = [
    # Version
    "__version__",
    "SWITCH_VERSION",
    "DEFAULT_KUBECTL_VERSION",
    "normalize_version",
    "parse_version",
    "is_newer_version",
    # kubectl cache
    "Kubectl",
    "ensure_kubectl",
    "get_platform_info",
    "resolve_platform",
    "HTTPVersionSource",
    "resolve_version",
    "SwitchConfig",
    # Errors
    "KubectlSwitchError",
    "NotAVersionError",
    "DownloadFailed",
    "FileSystemError",
    "LaunchFailed",
    "UnsupportedPlatformError",
    "ReleaseLookupError",
    "UpdateFailed",
    # Self-update
    "Release",
    "ReleaseAsset",
    "UpdateDecision",
    "SelfUpdater",
    "HTTPUpdater",
    "GitHubReleaseGetter",
    "CachedReleaseGetter",
    "TTYPrompter",
    "select_asset",
]
