"""
Pytest configuration for kubectl-switch tests.
"""

import sys
from pathlib import Path
from typing import List, Optional
from unittest.mock import MagicMock

import pytest

from kubectl_switch.config import SwitchConfig


posix_only = pytest.mark.skipif(
    sys.platform == "win32", reason="Runs shell scripts as executables"
)


def make_response(status_code: int = 200, chunks: Optional[List[bytes]] = None) -> MagicMock:
    """Fake streaming requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.iter_content = MagicMock(return_value=chunks or [])
    return response


def script(body: str) -> List[bytes]:
    """Chunks of a shell script served as a download."""
    data = f"#!/bin/sh\n{body}\n".encode()
    return [data[:8], data[8:]]


@pytest.fixture
def home(tmp_path) -> Path:
    """Isolated home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def config(home) -> SwitchConfig:
    """Config rooted at the isolated home, pinned to linux/amd64."""
    return SwitchConfig(os_name="linux", arch="amd64").with_home(str(home))
