"""
Pytest configuration and shared fixtures for airdrop tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_credential = _common.make_credential
make_address = _common.make_address


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def ed25519_credential():
    """Provide a freshly generated Ed25519 credential."""
    return make_credential("ed25519")


@pytest.fixture
def destination():
    """Provide a valid destination address."""
    return make_address("destination")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep user configuration and environment out of tests."""
    for name in [
        "BUILD_DIR",
        "AIRDROP_BUILD_DIR",
        "AIRDROP_NETWORK",
        "AIRDROP_RPC_HOST",
        "AIRDROP_RPC_PORT",
        "AIRDROP_API_KEY",
        "AIRDROP_BASE_URL",
        "AIRDROP_MANIFEST",
        "AIRDROP_HTTP_TIMEOUT",
        "AIRDROP_BARE",
        "AIRDROP_DEBUG",
        "AIRDROP_HTTP_PROXY",
        "AIRDROP_LOG_LEVEL",
        "AIRDROP_LOG_FILE",
        "AIRDROP_PASSPHRASE",
    ]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
