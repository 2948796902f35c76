"""
kubectl lifecycle management for kubectl-switch.

Handles:
- Platform detection
- Cache path derivation under ~/.kube/bin
- kubectl download from the release bucket
- Running the cached kubectl with the caller's streams
"""

from __future__ import annotations

import asyncio
import logging
import os
import platform
import subprocess
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import requests

from kubectl_switch._core.version import get_download_url, normalize_version
from kubectl_switch.config import SwitchConfig
from kubectl_switch.errors import (
    DownloadFailed,
    FileSystemError,
    LaunchFailed,
    UnsupportedPlatformError,
)

logger = logging.getLogger(__name__)

_OS_NAMES = {
    "darwin": "darwin",
    "linux": "linux",
    "windows": "windows",
}

_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
}

CHUNK_SIZE = 8192


def get_os_name() -> str:
    """
    Detect the OS, using Go's naming.

    Raises:
        UnsupportedPlatformError: If the OS is unsupported
    """
    system = platform.system().lower()
    os_name = _OS_NAMES.get(system)
    if os_name is None:
        raise UnsupportedPlatformError(f"Unsupported operating system: {system}")
    return os_name


def get_arch_name() -> str:
    """
    Detect the architecture, using Go's naming.

    Raises:
        UnsupportedPlatformError: If the architecture is unsupported
    """
    machine = platform.machine().lower()
    arch_name = _ARCH_NAMES.get(machine)
    if arch_name is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")
    return arch_name


def get_platform_info() -> Tuple[str, str]:
    """
    Determine the OS and architecture, using Go's naming.

    Returns:
        Tuple of (os_name, arch_name)

    Raises:
        UnsupportedPlatformError: If platform is unsupported
    """
    return get_os_name(), get_arch_name()


def resolve_platform(os_name: Optional[str] = None, arch: Optional[str] = None) -> Tuple[str, str]:
    """Use the given OS / architecture, detecting only the ones left unset."""
    return os_name or get_os_name(), arch or get_arch_name()


class Kubectl:
    """
    Version-keyed kubectl cache.
    
    Every version-taking method normalizes its argument first, so
    "v1.10.0", "1.10.0" and "1.10.0+coreos" all address the same file:
    ``{home}/.kube/bin/kubectl-{os}-{arch}-1.10.0``.
    
    There is no locking: two processes downloading the same version race
    benignly and the last rename wins.
    """
    
    def __init__(self, config: Optional[SwitchConfig] = None):
        self.config = config or SwitchConfig()
        self.os_name, self.arch = resolve_platform(self.config.os_name, self.config.arch)
    
    @property
    def bin_dir(self) -> Path:
        """Directory holding every cached kubectl."""
        return Path(self.config.home_dir()) / ".kube" / "bin"
    
    def url(self, version: str) -> str:
        """URL the given kubectl version is downloaded from."""
        return get_download_url(self.config.url_template, version, self.os_name, self.arch)
    
    def path(self, version: str) -> Path:
        """Cache path of the given kubectl version on this platform."""
        version = normalize_version(version)
        return self.bin_dir / f"kubectl-{self.os_name}-{self.arch}-{version}"
    
    def installed(self, version: str) -> bool:
        """Whether something already sits at the cache path (content unchecked)."""
        return os.path.lexists(self.path(version))
    
    def download(self, version: str) -> Path:
        """
        Download a kubectl version into the cache.
        
        The body is streamed to a temporary file next to the target and
        renamed into place only once fully written, so a failed download
        never leaves a file at the cache path.
        
        Args:
            version: kubectl version (any form accepted by normalize_version)
            
        Returns:
            Path to the downloaded kubectl
            
        Raises:
            FileSystemError: If the cache directory or file cannot be written
            DownloadFailed: On transport errors or a non-200 response
        """
        version = normalize_version(version)
        url = self.url(version)
        target_path = self.path(version)
        bin_dir = self.bin_dir
        
        try:
            bin_dir.mkdir(mode=0o755, parents=True, exist_ok=True)
        except OSError as e:
            raise FileSystemError(
                f"failed to create bin directory {bin_dir}: {e}", path=str(bin_dir)
            ) from e
        
        logger.info(f"Downloading kubectl from {url}")
        
        try:
            response = requests.get(url, stream=True, timeout=self.config.download_timeout)
        except requests.exceptions.RequestException as e:
            raise DownloadFailed(f"failed to download kubectl from {url}: {e}", url=url) from e
        
        try:
            if response.status_code != 200:
                raise DownloadFailed(
                    f"failed to download kubectl from {url}: HTTP {response.status_code}",
                    url=url,
                    status_code=response.status_code,
                )
            self._write(response, target_path, url)
        finally:
            response.close()
        
        logger.debug(f"Installed kubectl {version} at {target_path}")
        return target_path
    
    def _write(self, response: requests.Response, target_path: Path, url: str) -> None:
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=str(target_path.parent),
                prefix=f".{target_path.name}-",
                suffix=".download",
            )
        except OSError as e:
            raise FileSystemError(
                f"failed to write kubectl to {target_path}: {e}", path=str(target_path)
            ) from e
        
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
            os.chmod(tmp_path, 0o755)
            os.replace(tmp_path, target_path)
        except requests.exceptions.RequestException as e:
            tmp_path.unlink(missing_ok=True)
            raise DownloadFailed(f"failed to download kubectl from {url}: {e}", url=url) from e
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise FileSystemError(
                f"failed to write kubectl to {target_path}: {e}", path=str(target_path)
            ) from e
    
    def command(self, version: str, args: Sequence[str] = ()) -> List[str]:
        """Argument vector running the cached kubectl with ``args``."""
        return [str(self.path(version)), *args]
    
    def run(self, version: str, args: Sequence[str] = ()) -> subprocess.CompletedProcess:
        """
        Run the cached kubectl, wired to this process's stdin/stdout/stderr.
        
        Blocks until kubectl exits.
        
        Raises:
            LaunchFailed: If kubectl could not be started
        """
        cmd = self.command(version, args)
        try:
            return subprocess.run(cmd)
        except OSError as e:
            raise LaunchFailed(f"failed to start {cmd[0]}: {e}", path=cmd[0]) from e
    
    def exec(self, version: str, args: Sequence[str] = ()) -> int:
        """
        Run the cached kubectl and return the status to exit with.
        
        Returns:
            kubectl's exit code; 128 + signal number when it was killed by a
            signal; 1 when it could not be started at all
        """
        try:
            result = self.run(version, args)
        except LaunchFailed as e:
            print(e, file=sys.stderr)
            return 1
        
        if result.returncode < 0:
            return 128 - result.returncode
        return result.returncode


async def ensure_kubectl(kubectl: Kubectl, version: str) -> Path:
    """
    Ensure a kubectl version is cached (async wrapper).
    
    Downloads only when the version is not installed yet.
    
    Args:
        kubectl: Cache to provision
        version: kubectl version
        
    Returns:
        Path to the cached kubectl
    """
    if kubectl.installed(version):
        return kubectl.path(version)
    
    # Run download in thread pool to avoid blocking
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, kubectl.download, version)
