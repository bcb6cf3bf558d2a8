"""
Shared pytest fixtures for tagmem tests.

Every test gets an isolated TAGMEM_HOME and no storage overrides from the
surrounding environment, so a developer's real config is never read.
"""

from pathlib import Path

import pytest

from tagmem.store import MemoryStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point TAGMEM_HOME at a temp dir and drop storage env overrides."""
    home = tmp_path / "tagmem-home"
    monkeypatch.setenv("TAGMEM_HOME", str(home))
    for name in ("TAGMEM_GLOBAL_STORAGE", "TAGMEM_LOCAL_STORAGE", "TAGMEM_PERSISTENCE"):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def global_root(tmp_path) -> Path:
    root = tmp_path / "global"
    root.mkdir()
    return root


@pytest.fixture
def local_root(tmp_path) -> Path:
    root = tmp_path / "local"
    root.mkdir()
    return root


@pytest.fixture
def store(global_root, local_root) -> MemoryStore:
    """MemoryStore over two real, empty area roots."""
    return MemoryStore(global_root, local_root)
