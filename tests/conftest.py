"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import logging
import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of ntagger modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("ntagger"):
        del sys.modules[module_name]

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_dir() -> Path:
    """Directory holding the canonical sample module."""
    return FIXTURES_DIR / "sample1"


@pytest.fixture
def mixed_dir() -> Path:
    """Directory with exported and private declarations, when blocks and operators."""
    return FIXTURES_DIR / "mixed"


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user config files and NTAGGER__ env vars out of tests."""
    from ntagger.config import loader

    home = tmp_path_factory.mktemp("home")
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", home / "config.yaml")
    for key in list(os.environ):
        if key.startswith("NTAGGER__"):
            monkeypatch.delenv(key)
    yield


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Drop handlers bound to streams that die with the test (capsys, CliRunner)."""
    yield
    import structlog

    root = logging.getLogger()
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    structlog.reset_defaults()
