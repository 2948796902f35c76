"""
Exception types for kubectl-switch.

Provides typed exceptions for:
- Version parsing errors
- kubectl provisioning errors (download, filesystem, launch)
- Self-update errors
"""

from __future__ import annotations

from typing import Optional


class KubectlSwitchError(Exception):
    """Base exception for all kubectl-switch errors."""
    pass


# =============================================================================
# Version Errors
# =============================================================================


class NotAVersionError(KubectlSwitchError):
    """
    Raised when a string cannot be parsed as a dotted numeric version.
    
    Attributes:
        version: The full input that failed to parse
        component: The dot-separated part that was rejected
        message: Human-readable explanation
    
    Example:
        try:
            parse_version("dev")
        except NotAVersionError as e:
            logger.debug(f"Ignoring {e.version}: {e.message}")
    """
    
    def __init__(self, version: str, message: str, component: str = ""):
        self.version = version
        self.component = component
        self.message = message
        super().__init__(f"{version} is not a version: {message}")
    
    def __repr__(self) -> str:
        return (
            f"NotAVersionError(version={self.version!r}, "
            f"component={self.component!r}, message={self.message!r})"
        )


# =============================================================================
# Provisioning Errors
# =============================================================================


class DownloadFailed(KubectlSwitchError):
    """
    Raised when a kubectl download fails.
    
    This includes:
    - Network / transport errors
    - Non-200 HTTP responses
    """
    
    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class FileSystemError(KubectlSwitchError):
    """Raised when the cache directory or a cached file cannot be written."""
    
    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class LaunchFailed(KubectlSwitchError):
    """
    Raised when the kubectl executable cannot be started at all.
    
    A kubectl process that starts and exits non-zero is not an error;
    its status is forwarded as the wrapper's own.
    """
    
    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class UnsupportedPlatformError(KubectlSwitchError):
    """Raised when the host OS or architecture has no kubectl build."""
    pass


# =============================================================================
# Self-update Errors
# =============================================================================


class ReleaseLookupError(KubectlSwitchError):
    """Raised when the latest release cannot be fetched or decoded."""
    pass


class UpdateFailed(KubectlSwitchError):
    """
    Raised when installing a new wrapper build fails.
    
    Self-update is best-effort, so this error is logged by the caller
    rather than surfaced to the operator.
    """
    pass
