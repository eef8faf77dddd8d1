from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests._fixtures.abis import ERC20_ABI, UNDERSCORE_ABI_TEXT


@pytest.fixture
def erc20_abi_path(tmp_path: Path) -> Path:
    """An ERC20-style ABI document with no underscore-prefixed names."""
    path = tmp_path / "abi" / "token.abi.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(ERC20_ABI, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def underscore_abi_path(tmp_path: Path) -> Path:
    """An ABI document whose parameter names start with underscores."""
    path = tmp_path / "abi" / "legacy.abi.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(UNDERSCORE_ABI_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    path = tmp_path / "staging"
    path.mkdir()
    return path
