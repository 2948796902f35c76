"""
Self-update for kubectl-switch.

Checks GitHub for a newer kubectl-switch release, asks the operator on
an interactive terminal, and swaps the running binary for the new build
once it has proven it can run.

Self-update is best-effort: every failure ends the check quietly, so it
can never get in the way of the kubectl invocation it accompanies.

Usage:
    updater = SelfUpdater.from_config(SwitchConfig.from_env())
    decision = updater.confirm_and_update(current_executable())
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol, TextIO

import requests
from platformdirs import user_cache_dir

from kubectl_switch._core.lifecycle import CHUNK_SIZE, resolve_platform
from kubectl_switch._core.version import SWITCH_VERSION, is_newer_version, parse_version
from kubectl_switch.config import SwitchConfig
from kubectl_switch.errors import KubectlSwitchError, ReleaseLookupError, UpdateFailed
from kubectl_switch.types import Release, ReleaseAsset, UpdateDecision

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com/repos/{owner}/{repo}/releases/latest"


# =============================================================================
# Collaborators
# =============================================================================


class ReleaseGetter(Protocol):
    def get_latest_release(self, owner: str, repo: str) -> Release:
        ...


class Prompter(Protocol):
    def prompt(self, question: str) -> str:
        ...


class Updater(Protocol):
    def update(self, destination: str, source: str) -> None:
        ...


# =============================================================================
# Release lookup
# =============================================================================


class GitHubReleaseGetter:
    """Fetches the latest release from the GitHub REST API."""
    
    def __init__(self, timeout: float = 10.0, api_url: str = GITHUB_API_URL):
        self.timeout = timeout
        self.api_url = api_url
    
    def get_latest_release(self, owner: str, repo: str) -> Release:
        """
        Get the latest published release of ``owner/repo``.
        
        Raises:
            ReleaseLookupError: On network errors, non-200 responses or an
                unexpected payload
        """
        url = self.api_url.format(owner=owner, repo=repo)
        headers = {"Accept": "application/vnd.github+json"}
        
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise ReleaseLookupError(f"Network error fetching {url}: {e}") from e
        
        if response.status_code != 200:
            raise ReleaseLookupError(
                f"Release lookup for {owner}/{repo} failed with status {response.status_code}"
            )
        
        try:
            return Release.from_api_response(response.json())
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ReleaseLookupError(f"Malformed release data from {url}: {e}") from e


class CachedReleaseGetter:
    """
    Reuses a recent latest-release lookup instead of hitting the API again.
    
    One JSON file per repository is kept in the user cache directory. A
    missing, stale or unreadable entry just triggers a fresh lookup.
    
    Args:
        getter: Release source consulted on a cache miss
        ttl: Seconds an entry stays valid
        cache_dir: Where entries are stored (default: platform user cache)
        clock: Time source, seconds since the epoch
    """
    
    def __init__(
        self,
        getter: ReleaseGetter,
        ttl: float,
        cache_dir: Optional[Path] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.getter = getter
        self.ttl = ttl
        self.cache_dir = cache_dir or Path(user_cache_dir("kubectl-switch", "kubectl-switch"))
        self.clock = clock
    
    def _entry_path(self, owner: str, repo: str) -> Path:
        return self.cache_dir / f"latest-release-{owner}-{repo}.json"
    
    def _load(self, path: Path) -> Optional[Release]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if self.clock() - float(data["fetched_at"]) > self.ttl:
                return None
            return Release.from_api_response(data["release"])
        except FileNotFoundError:
            return None
        except (OSError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.debug(f"Ignoring unreadable release cache {path}: {e}")
            return None
    
    def _store(self, path: Path, release: Release) -> None:
        entry = {"fetched_at": self.clock(), "release": release.to_api_response()}
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(entry), encoding="utf-8")
        except OSError as e:
            logger.debug(f"Could not write release cache {path}: {e}")
    
    def get_latest_release(self, owner: str, repo: str) -> Release:
        path = self._entry_path(owner, repo)
        release = self._load(path)
        if release is not None:
            logger.debug(f"Using cached release {release.tag_name} for {owner}/{repo}")
            return release
        
        release = self.getter.get_latest_release(owner, repo)
        self._store(path, release)
        return release


def select_asset(assets: Iterable[ReleaseAsset], os_name: str, arch: str) -> Optional[ReleaseAsset]:
    """Pick the asset built for ``os_name``/``arch`` (name ends with -{os}-{arch})."""
    suffix = f"-{os_name}-{arch}"
    for asset in assets:
        if asset.name.endswith(suffix):
            return asset
    return None


# =============================================================================
# Installation
# =============================================================================


class HTTPUpdater:
    """
    Installs a new build over an existing executable.
    
    The build is downloaded next to the destination (``{destination}-new``),
    made executable and run with ``--help``. Only when that exits 0 is it
    renamed over the destination, so the old binary is replaced whole or
    not at all.
    """
    
    def __init__(self, timeout: float = 60.0, validate_timeout: float = 30.0):
        self.timeout = timeout
        self.validate_timeout = validate_timeout
    
    def update(self, destination: str, source: str) -> None:
        """
        Replace ``destination`` with the build served at ``source``.
        
        Raises:
            UpdateFailed: If any step fails; ``destination`` is then left
                untouched, though ``{destination}-new`` may remain
        """
        new_path = f"{destination}-new"
        
        try:
            response = requests.get(source, stream=True, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpdateFailed(f"Failed to download {source}: {e}") from e
        
        try:
            if response.status_code != 200:
                raise UpdateFailed(f"Failed to download {source}: HTTP {response.status_code}")
            with open(new_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except (OSError, requests.RequestException) as e:
            raise UpdateFailed(f"Failed to write {new_path}: {e}") from e
        finally:
            response.close()
        
        try:
            mode = os.stat(new_path).st_mode
            os.chmod(new_path, mode | 0o111)
        except OSError as e:
            raise UpdateFailed(f"Failed to make {new_path} executable: {e}") from e
        
        try:
            subprocess.run(
                [new_path, "--help"],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self.validate_timeout,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise UpdateFailed(f"Downloaded build {new_path} is not runnable: {e}") from e
        
        try:
            os.replace(new_path, destination)
        except OSError as e:
            raise UpdateFailed(f"Failed to replace {destination}: {e}") from e


# =============================================================================
# Prompting
# =============================================================================


class TTYPrompter:
    """Asks a question on ``out`` and reads one line of answer from ``in_``."""
    
    def __init__(self, out: Optional[TextIO] = None, in_: Optional[TextIO] = None):
        self.out = out
        self.in_ = in_
    
    def prompt(self, question: str) -> str:
        out = self.out or sys.stdout
        in_ = self.in_ or sys.stdin
        try:
            out.write(question)
            out.flush()
            answer = in_.readline()
        except (OSError, ValueError):
            return ""
        return answer.strip("\r\n")


def is_interactive() -> bool:
    """True when both stdin and stdout are attached to a terminal."""
    try:
        return sys.stdin.isatty() and sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


def current_executable() -> str:
    """Path of the running kubectl-switch binary."""
    if getattr(sys, "frozen", False):
        return sys.executable
    return os.path.realpath(sys.argv[0])


# =============================================================================
# Orchestration
# =============================================================================


class SelfUpdater:
    """
    Offers to replace kubectl-switch with its latest GitHub release.
    
    Attributes:
        version: Version of the running build
        owner / repo: Repository publishing builds
        os_name / arch: Platform suffix of the asset to install
        interactive: Whether an operator can be prompted at all
    """
    
    def __init__(
        self,
        release_getter: ReleaseGetter,
        prompter: Prompter,
        updater: Updater,
        version: str = SWITCH_VERSION,
        owner: str = "",
        repo: str = "",
        os_name: str = "",
        arch: str = "",
        interactive: bool = False,
    ):
        self.release_getter = release_getter
        self.prompter = prompter
        self.updater = updater
        self.version = version
        self.owner = owner
        self.repo = repo
        self.os_name = os_name
        self.arch = arch
        self.interactive = interactive
    
    @classmethod
    def from_config(cls, config: SwitchConfig) -> "SelfUpdater":
        """
        Build the production updater: GitHub releases behind the on-disk
        cache, a terminal prompter and the HTTP installer.
        
        Raises:
            UnsupportedPlatformError: If a platform value is not configured
                and the host cannot be detected
        """
        os_name, arch = resolve_platform(config.os_name, config.arch)

        return cls(
            release_getter=CachedReleaseGetter(GitHubReleaseGetter(), ttl=config.update_check_ttl),
            prompter=TTYPrompter(),
            updater=HTTPUpdater(timeout=config.download_timeout),
            owner=config.github_owner,
            repo=config.github_repo,
            os_name=os_name,
            arch=arch,
            interactive=is_interactive(),
        )
    
    def confirm_and_update(self, path: str) -> UpdateDecision:
        """
        Check for a newer release and, if the operator agrees, install it
        over ``path``.
        
        Never raises for lookup, parse or install failures; the outcome
        is reported through the returned decision only.
        """
        try:
            release = self.release_getter.get_latest_release(self.owner, self.repo)
            old = parse_version(self.version)
            new = parse_version(release.tag_name)
        except KubectlSwitchError as e:
            logger.debug(f"Skipping self-update: {e}")
            return UpdateDecision.CHECK_FAILED
        
        if not is_newer_version(old, new):
            return UpdateDecision.NOT_NEWER
        
        if not self.interactive:
            return UpdateDecision.NOT_INTERACTIVE
        
        answer = self.prompter.prompt(
            f"A new version {release.tag_name} is available, "
            "would you like to download it? (y/N) "
        )
        if answer.strip().lower() not in ("y", "yes"):
            return UpdateDecision.DECLINED
        
        asset = select_asset(release.assets, self.os_name, self.arch)
        if asset is None:
            logger.debug(f"No {self.os_name}/{self.arch} build in release {release.tag_name}")
            return UpdateDecision.NO_ASSET
        
        try:
            self.updater.update(path, asset.download_url)
        except KubectlSwitchError as e:
            logger.debug(f"Self-update to {release.tag_name} failed: {e}")
            return UpdateDecision.INSTALL_FAILED
        
        logger.info(f"Updated kubectl-switch to {release.tag_name}")
        return UpdateDecision.UPDATED
