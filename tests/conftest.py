"""Shared fixtures for aliasscan tests."""

import logging
import os

import pytest


@pytest.fixture(autouse=True)
def reset_aliasscan_logger():
    """Undo handlers the CLI attaches so later tests log nowhere."""
    yield
    logger = logging.getLogger("aliasscan")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any ALIASSCAN_* variables from the environment."""
    for name in list(os.environ):
        if name.startswith("ALIASSCAN_"):
            monkeypatch.delenv(name, raising=False)
    return monkeypatch
