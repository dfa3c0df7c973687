"""Pytest configuration and shared fixtures for pubcheck tests."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add the action/ directory to sys.path so we can import pubcheck
ACTION_DIR = Path(__file__).parent.parent / "action"
sys.path.insert(0, str(ACTION_DIR))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def ready_pkg():
    """Package with all documentation files and a long description."""
    return FIXTURES_DIR / "ready-pkg"


@pytest.fixture
def bare_pkg():
    """Package with README.md, LICENSE and a short description."""
    return FIXTURES_DIR / "bare-pkg"


@pytest.fixture
def toolchain_on_path():
    """Make shutil.which resolve every tool to a fake Flutter SDK location."""
    with patch("pubcheck.shutil.which", side_effect=lambda name: f"/opt/flutter/bin/{name}"):
        yield
