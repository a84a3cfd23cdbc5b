"""
Shared pytest fixtures and configuration for transport-spine tests.

This module provides:
- Settings / container cache cleanup for test isolation
- Environment scrubbing so a developer's TRANSPORT_* variables never leak in
- A populated descriptor pool used by the extension tests
"""

import sys
from pathlib import Path

import pytest

# Ensure transport_spine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from transport_spine.core.config import clear_settings_cache, reset_container
from transport_spine.core.logging import reset_logging
from transport_spine.extensions import DescriptorPool, SlotStore


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_global_state(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Reset caches and hide TRANSPORT_* env vars / .env files from each test."""
    import os

    for key in list(os.environ):
        if key.startswith("TRANSPORT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)

    clear_settings_cache()
    reset_container()
    yield
    clear_settings_cache()
    reset_container()
    reset_logging()


# =============================================================================
# Extension Fixtures
# =============================================================================


@pytest.fixture
def pool() -> DescriptorPool:
    return DescriptorPool()


@pytest.fixture
def slots() -> SlotStore:
    return SlotStore()
