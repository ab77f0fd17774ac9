"""Global test fixtures for the giftwrap test suite."""

from __future__ import annotations

import logging
import os

import pytest

from giftwrap.core.config import clear_config_cache
from giftwrap.crypto.keys import Keys
from giftwrap.crypto.random import SeededRandomSource
from tests.vectors import ALICE_SECRET_HEX, BOB_SECRET_HEX

# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts from a fresh config singleton."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all GIFTWRAP_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("GIFTWRAP_"):
            monkeypatch.delenv(key, raising=False)


# ============================================================================
# Keys
# ============================================================================


@pytest.fixture
def alice() -> Keys:
    return Keys.parse(ALICE_SECRET_HEX)


@pytest.fixture
def bob() -> Keys:
    return Keys.parse(BOB_SECRET_HEX)


@pytest.fixture
def carol() -> Keys:
    """An unrelated third party."""
    return Keys.generate()


@pytest.fixture
def rng() -> SeededRandomSource:
    return SeededRandomSource(b"giftwrap-tests")


# ============================================================================
# Logging
# ============================================================================


@pytest.fixture
def restore_root_logger():
    """configure_logging() replaces root handlers; put them back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
