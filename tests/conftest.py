"""
Pytest configuration and shared fixtures for liveconfig tests.
"""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

import pytest

from liveconfig.config.settings import get_settings

# Configure test logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def write_config(path: Path, content: Any) -> int:
    """Write ``content`` (dict or raw text) and force a fresh modification stamp."""
    text = content if isinstance(content, str) else json.dumps(content)
    previous = path.stat().st_mtime_ns if path.exists() else 0
    path.write_text(text, encoding="utf-8")
    # Coarse filesystem clocks could otherwise repeat a stamp
    stamp = max(path.stat().st_mtime_ns, previous + 1_000_000_000)
    os.utime(path, ns=(stamp, stamp))
    return stamp


@pytest.fixture(autouse=True)
def clean_argv(monkeypatch):
    """Keep pytest's own command line out of the default override source."""
    monkeypatch.setattr(sys, "argv", ["liveconfig"])


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read LIVECONFIG_* settings for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_config():
    """Sample config document."""
    return {
        "name": "app",
        "debug": False,
        "db": {
            "host": "a",
            "port": 5432,
            "pool": {"size": 5},
        },
        "cache": {
            "redis": {"host": "r1"},
        },
        "tags": ["x", "y"],
    }


@pytest.fixture
def config_file(tmp_path, sample_config):
    """Config file on disk holding ``sample_config``."""
    path = tmp_path / "config.json"
    write_config(path, sample_config)
    return path


@pytest.fixture
def rewrite():
    """Writer that guarantees each rewrite gets a new modification stamp."""
    return write_config


# Pytest configuration
def pytest_collection_modifyitems(config, items):
    """Add default markers to tests based on location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
