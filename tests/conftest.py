"""
Pytest configuration and shared fixtures for rdconfig tests.

Every store fixture is bound to its own temporary config directory and a
cipher with a fixed test key, so tests never touch the real user config or
depend on the machine identity.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

# Add the parent directory to the path for imports
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rdconfig.config_store import ConfigStore
from rdconfig.crypto.password_security import FieldCipher, derive_key
from rdconfig.options.resolver import SettingsRegistry


# Hardware address used for id generation in tests
TEST_MAC = bytes.fromhex("0242ac110002")
# 0xac110002 & 0x1FFFFFFF
TEST_MAC_ID = "202440706"


# ===========================================================================
# Temporary Directory Fixtures
# ===========================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    tmpdir = tempfile.mkdtemp(prefix="rdconfig_test_")
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def config_dir(temp_dir: Path) -> Path:
    """Config directory inside the temporary directory (not yet created)."""
    return temp_dir / "config"


# ===========================================================================
# Crypto Fixtures
# ===========================================================================

@pytest.fixture(scope="session")
def test_key() -> bytes:
    """Secret-box key derived once per session."""
    return derive_key(b"rdconfig-test-machine")


@pytest.fixture
def cipher(test_key: bytes) -> FieldCipher:
    return FieldCipher(test_key)


# ===========================================================================
# Store Fixtures
# ===========================================================================

@pytest.fixture
def settings() -> SettingsRegistry:
    return SettingsRegistry()


@pytest.fixture
def fixed_mac():
    """Pin the hardware address used for id generation."""
    with patch("rdconfig.store.identity.primary_mac", return_value=TEST_MAC):
        yield TEST_MAC


@pytest.fixture
def store(config_dir: Path, cipher: FieldCipher, settings: SettingsRegistry, fixed_mac) -> ConfigStore:
    """A desktop (linux) ConfigStore writing into a temporary directory."""
    return ConfigStore(
        app_name="RustDesk",
        config_dir=config_dir,
        platform="linux",
        cipher=cipher,
        settings=settings,
    )


@pytest.fixture
def make_store(config_dir: Path, cipher: FieldCipher, settings: SettingsRegistry, fixed_mac):
    """Factory for a fresh store over the same directory (simulates a restart)."""
    def factory(**kwargs) -> ConfigStore:
        params = dict(
            app_name="RustDesk",
            config_dir=config_dir,
            platform="linux",
            cipher=cipher,
            settings=settings,
        )
        params.update(kwargs)
        return ConfigStore(**params)
    return factory


# ===========================================================================
# Pytest Configuration
# ===========================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "security: Security-specific tests")
    config.addinivalue_line("markers", "slow: Slow tests (>1s)")
