"""
Pytest configuration for transmission_py tests.
"""

import pytest
import sys
import os

# Add the parent directory to the path so we can import transmission_py
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from transmission_py.ctypes_wrapper import (
    LibtransmissionNotFoundError, find_libtransmission_library
)

try:
    find_libtransmission_library()
    LIBTRANSMISSION_AVAILABLE = True
except LibtransmissionNotFoundError:
    LIBTRANSMISSION_AVAILABLE = False


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "integration: mark test as needing the real libtransmission"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests when libtransmission is not installed."""
    if not LIBTRANSMISSION_AVAILABLE:
        skip_native = pytest.mark.skip(reason="libtransmission shared library not available")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_native)


@pytest.fixture
def fake_lib():
    """Fixture replacing the native library with the in-process fake."""
    from unittest.mock import patch
    from fakes import FakeLibtransmission

    lib = FakeLibtransmission()
    with patch('transmission_py.ctypes_wrapper._libtransmission', lib):
        yield lib


@pytest.fixture
def session_dirs(tmp_path):
    """Existing config and download directories."""
    config_dir = tmp_path / "config"
    download_dir = tmp_path / "downloads"
    config_dir.mkdir()
    download_dir.mkdir()
    return config_dir, download_dir
