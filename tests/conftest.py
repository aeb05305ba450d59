"""Shared fixtures for cmd-outcome tests."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest


@pytest.fixture()
def log() -> MagicMock:
    """Return a stand-in logger so classification can be checked without caplog."""
    return MagicMock(spec=logging.Logger)
