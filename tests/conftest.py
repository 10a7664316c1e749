"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Every test runs against an empty, throwaway config directory so the
developer's ~/.config/diver and DIVER_* environment never leak in.
"""

import json
import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from diver.core.config import get_app_config, get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SECRET_ENV_VARS = (
    "DIVER_UCP_USERNAME",
    "DIVER_UCP_PASSWORD",
    "DIVER_STORE_USERNAME",
    "DIVER_STORE_PASSWORD",
)


# =============================================================================
# Configuration Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point DIVER_CONFIG_DIR at a fresh directory and clear cached config."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("DIVER_CONFIG_DIR", str(config_dir))
    for var in SECRET_ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield config_dir
    get_settings.cache_clear()
    get_app_config.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logger() -> Generator[None, None, None]:
    """Undo handlers installed by setup_logging so they never outlive a test's streams."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def write_settings(isolated_config: Path):
    """
    Write a YAML settings file into the isolated config directory.

    Usage:
        def test_timeout(write_settings):
            write_settings("ucp.yaml", "timeout: 5\\n")
    """
    def _write(filename: str, text: str) -> Path:
        settings_dir = isolated_config / "settings"
        settings_dir.mkdir(parents=True, exist_ok=True)
        path = settings_dir / filename
        path.write_text(text)
        get_app_config.cache_clear()
        return path

    return _write


# =============================================================================
# Wire Fixtures
# =============================================================================


@pytest.fixture
def urchin_payload() -> dict[str, Any]:
    """Service record captured from a UCP control plane (replicated, 40 replicas)."""
    return json.loads((FIXTURES_DIR / "urchin_service.json").read_text())
