"""
Tests for kubectl_switch.errors module.
"""

import pytest
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


class TestKubectlSwitchError:
    """Tests for base KubectlSwitchError."""
    
    def test_is_exception(self):
        assert issubclass(KubectlSwitchError, Exception)
    
    @pytest.mark.parametrize("error_type", [
        NotAVersionError,
        DownloadFailed,
        FileSystemError,
        LaunchFailed,
        UnsupportedPlatformError,
        ReleaseLookupError,
        UpdateFailed,
    ])
    def test_inheritance(self, error_type):
        assert issubclass(error_type, KubectlSwitchError)


class TestNotAVersionError:
    """Tests for NotAVersionError."""
    
    def test_message(self):
        error = NotAVersionError("<version>", "<message>")
        assert str(error) == "<version> is not a version: <message>"
    
    def test_attributes(self):
        error = NotAVersionError("1.x", "'x' is not a non-negative integer", component="x")
        assert error.version == "1.x"
        assert error.component == "x"
        assert "x" in error.message
    
    def test_repr(self):
        error = NotAVersionError("dev", "bad", component="dev")
        assert "NotAVersionError" in repr(error)
        assert "'dev'" in repr(error)


class TestProvisioningErrors:
    """Tests for download / filesystem / launch errors."""
    
    def test_download_failed_attributes(self):
        error = DownloadFailed("HTTP 404", url="https://example/kubectl", status_code=404)
        assert error.url == "https://example/kubectl"
        assert error.status_code == 404
        assert "404" in str(error)
    
    def test_download_failed_defaults(self):
        assert DownloadFailed("boom").status_code is None
    
    def test_filesystem_error_path(self):
        assert FileSystemError("denied", path="/x").path == "/x"
    
    def test_launch_failed_path(self):
        error = LaunchFailed("not found", path="/bin/kubectl")
        assert error.path == "/bin/kubectl"
    
    def test_can_be_caught_as_base(self):
        with pytest.raises(KubectlSwitchError):
            raise LaunchFailed("cannot start")
