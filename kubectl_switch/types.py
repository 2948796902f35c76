"""
Type definitions for kubectl-switch self-update.

Defines the release data returned by a release source and the outcome
of one update check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


@dataclass
class ReleaseAsset:
    """A downloadable file attached to a release, one per platform build."""
    name: str
    download_url: str
    
    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "ReleaseAsset":
        """
        Create a ReleaseAsset from a GitHub API asset object.
        
        Raises:
            KeyError: If a required field is missing
            TypeError: If the object or one of its fields has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"release asset must be an object, got {type(data).__name__}")
        name = data["name"]
        download_url = data["browser_download_url"]
        if not isinstance(name, str) or not isinstance(download_url, str):
            raise TypeError("release asset name and browser_download_url must be strings")
        return cls(name=name, download_url=download_url)
    
    def to_api_response(self) -> Dict[str, Any]:
        return {"name": self.name, "browser_download_url": self.download_url}


@dataclass
class Release:
    """
    A published release of kubectl-switch.
    
    Attributes:
        tag_name: Git tag, used as the candidate version string
        assets: Platform builds attached to the release
    """
    tag_name: str
    assets: List[ReleaseAsset] = field(default_factory=list)
    
    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> "Release":
        """
        Create a Release from a GitHub API release object.
        
        Missing fields default to empty; anything present must have the
        right shape.
        
        Raises:
            KeyError: If an asset lacks a required field
            TypeError: If the object or one of its fields has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"release must be an object, got {type(data).__name__}")
        tag_name = data.get("tag_name") or ""
        assets = data.get("assets") or []
        if not isinstance(tag_name, str):
            raise TypeError("release tag_name must be a string")
        if not isinstance(assets, list):
            raise TypeError("release assets must be a list")
        return cls(
            tag_name=tag_name,
            assets=[ReleaseAsset.from_api_response(a) for a in assets],
        )
    
    def to_api_response(self) -> Dict[str, Any]:
        return {
            "tag_name": self.tag_name,
            "assets": [a.to_api_response() for a in self.assets],
        }


class UpdateDecision(str, Enum):
    """
    Where one self-update check ended.
    
    - CHECK_FAILED: Latest release unavailable or a version unparsable
    - NOT_NEWER: Already running the latest release
    - NOT_INTERACTIVE: Newer release found, but nobody to ask
    - DECLINED: Operator answered anything but yes
    - NO_ASSET: No build for this platform in the release
    - INSTALL_FAILED: Download or validation of the new build failed
    - UPDATED: New build installed
    """
    CHECK_FAILED = "check_failed"
    NOT_NEWER = "not_newer"
    NOT_INTERACTIVE = "not_interactive"
    DECLINED = "declined"
    NO_ASSET = "no_asset"
    INSTALL_FAILED = "install_failed"
    UPDATED = "updated"
