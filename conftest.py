"""Project-wide pytest configuration hooks."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _capture_generation_logs(caplog: pytest.LogCaptureFixture) -> None:
    """Capture generator records at DEBUG so tests can assert on them."""

    caplog.set_level(logging.DEBUG, logger="modules.tilemap")
