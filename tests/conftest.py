"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

TEST_XOR1 = 0x5A
TEST_XOR2 = 0xA5


@pytest.fixture
def keys_file(tmp_path: Path) -> Path:
    """Create a temporary key file holding TEST_XOR1 / TEST_XOR2."""
    f = tmp_path / "keys.json"
    f.write_text(json.dumps({"XOR1": TEST_XOR1, "XOR2": TEST_XOR2}))
    return f
