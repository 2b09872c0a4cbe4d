"""Shared fixtures for picture organizer tests."""

import os
from datetime import datetime

import pytest

from picture_organizer.config import Config


@pytest.fixture
def input_root(tmp_path):
    """Empty input directory."""
    root = tmp_path / 'input'
    root.mkdir()
    return root


@pytest.fixture
def output_root(tmp_path):
    """Output directory (not created yet)."""
    return tmp_path / 'out'


@pytest.fixture
def create_test_file():
    """Factory fixture: create a file with given content and modification time."""

    def _create(base, relative_path, content=b'test-content', modified=datetime(2023, 3, 16, 12, 0)):
        full_path = base / relative_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(content)
        timestamp = modified.timestamp()
        os.utime(full_path, (timestamp, timestamp))
        return full_path

    return _create


@pytest.fixture
def make_config(output_root):
    """Factory fixture: build a Config from organizer overrides."""

    def _make(**organizer):
        settings = {'output_root': str(output_root)}
        settings.update(organizer)
        return Config.from_dict({'organizer': settings})

    return _make


@pytest.fixture
def sample_config(make_config):
    """Default configuration writing into the temporary output root."""
    return make_config()
