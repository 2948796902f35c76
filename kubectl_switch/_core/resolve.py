"""
Resolution of the kubectl version a cluster expects.

The API server is asked for its version on a background thread while
the caller waits a bounded time. A slow or unreachable server never
delays kubectl by more than the configured timeout.
"""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from typing import Optional, Protocol

import requests

logger = logging.getLogger(__name__)


class VersionSource(Protocol):
    """Anything able to report the version kubectl should match."""
    
    def server_version(self) -> str:
        ...


class HTTPVersionSource:
    """
    Reads ``gitVersion`` from a Kubernetes API server's /version endpoint.
    
    Args:
        server: API server URL, e.g. https://10.0.0.1:6443
        token: Optional bearer token
        verify: TLS verification (False mirrors --insecure-skip-tls-verify)
        timeout: Socket timeout in seconds
    """
    
    def __init__(
        self,
        server: str,
        token: Optional[str] = None,
        verify: bool = True,
        timeout: float = 5.0,
    ):
        self.server = server
        self.token = token
        self.verify = verify
        self.timeout = timeout
    
    def server_version(self) -> str:
        url = f"{self.server.rstrip('/')}/version"
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        
        response = requests.get(url, headers=headers, verify=self.verify, timeout=self.timeout)
        response.raise_for_status()
        return response.json()["gitVersion"]


def _fill(source: VersionSource, future: concurrent.futures.Future, default: str) -> None:
    try:
        version = source.server_version()
    except Exception as e:
        logger.debug(f"Failed to get server version, using {default}: {e}")
        version = default
    future.set_result(version)


def resolve_version(source: Optional[VersionSource], default: str, timeout: float) -> str:
    """
    Ask ``source`` for a version, giving up after ``timeout`` seconds.
    
    The lookup runs on a daemon thread. On timeout the thread is left to
    finish on its own and its late result is dropped; it is never joined,
    so it cannot hold up interpreter exit.
    
    Args:
        source: Version source, or None to use ``default`` right away
        default: Version used on timeout or on any source error
        timeout: Max seconds to wait
        
    Returns:
        The resolved version string
    """
    if source is None:
        return default
    
    future: concurrent.futures.Future = concurrent.futures.Future()
    thread = threading.Thread(
        target=_fill,
        args=(source, future, default),
        name="kubectl-switch-version",
        daemon=True,
    )
    thread.start()
    
    try:
        return future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        logger.debug(f"Server version not known after {timeout}s, using {default}")
        return default
