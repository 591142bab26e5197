"""Test bootstrap: ensure the repository root is on sys.path.

This allows absolute imports like `modules.tilemap.grid_state` and
`core.event_bus` which assume the working directory is the repository root.
"""
import sys, os
PACKAGE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if PACKAGE_ROOT not in sys.path:
    sys.path.insert(0, PACKAGE_ROOT)

import pytest

from modules.tilemap.gen.random import ScriptedRandom


@pytest.fixture
def scripted():
    """Factory for replayable random sources: ``scripted(0.0)`` or ``scripted(0.1, 0.9)``."""

    def _factory(*values: float, cycle: bool = True) -> ScriptedRandom:
        return ScriptedRandom(values, cycle=cycle)

    return _factory
