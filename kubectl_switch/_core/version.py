"""
Version constants and version string handling for kubectl-switch.

Two different notions of "version" live here:
- kubectl versions, reduced to a dotted numeric token used in URLs and
  cache file names (normalize_version)
- wrapper release versions, parsed into integer components and compared
  for self-update (parse_version / is_newer_version)
"""

from __future__ import annotations

import re
from typing import List

from kubectl_switch.errors import NotAVersionError

# kubectl-switch version (compared against GitHub release tags)
SWITCH_VERSION = "0.1.0"

_VERSION_TOKEN = re.compile(r"[0-9.]+")
_COMPONENT = re.compile(r"[0-9]+")


def normalize_version(version: str) -> str:
    """
    Extract the dotted numeric token from a version-like string.
    
    Args:
        version: Raw version like "v1.10.0" or "1.10.0+coreos"
        
    Returns:
        The first run of digits and dots ("1.10.0"), or "" if none
    """
    match = _VERSION_TOKEN.search(version)
    if match is None:
        return ""
    return match.group(0)


def parse_version(version: str) -> List[int]:
    """
    Parse a release version string into its integer components.
    
    Anything from the first "-" on (pre-release / build suffix) is ignored,
    as is a single leading "v".
    
    Args:
        version: Version string like "v1.2.3" or "1.2.3.4-dev"
        
    Returns:
        List of components, e.g. [1, 2, 3]
        
    Raises:
        NotAVersionError: If any component is not a non-negative integer
    """
    core = version.split("-", 1)[0]
    if core.startswith("v"):
        core = core[1:]
    
    components = []
    for part in core.split("."):
        stripped = part.strip(" ")
        if not _COMPONENT.fullmatch(stripped):
            raise NotAVersionError(
                version,
                f"{part!r} is not a non-negative integer",
                component=part,
            )
        components.append(int(stripped))
    return components


def is_newer_version(old: List[int], new: List[int]) -> bool:
    """
    Decide whether ``new`` is a newer release than ``old``.
    
    Components are compared left to right over ``new``. Extra trailing
    components of ``new`` count only when non-zero. A smaller component
    settles the answer only at the last index of ``old``; earlier smaller
    components fall through to the next index.
    
    Args:
        old: Parsed current version
        new: Parsed candidate version
        
    Returns:
        True if ``new`` should be offered as an update
    """
    for i, component in enumerate(new):
        if i >= len(old):
            if component > 0:
                return True
        elif component > old[i]:
            return True
        elif component < old[i] and i == len(old) - 1:
            return False
    return False


def get_download_url(template: str, version: str, os_name: str, arch_name: str) -> str:
    """
    Get the kubectl download URL for a version and platform.
    
    Args:
        template: URL template with {version}, {os} and {arch} placeholders
        version: kubectl version, normalized before substitution
        os_name: OS name (linux, darwin, windows)
        arch_name: Architecture (amd64, arm64, ...)
        
    Returns:
        Download URL
    """
    return template.format(
        version=normalize_version(version),
        os=os_name,
        arch=arch_name,
    )
