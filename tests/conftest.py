"""
Test fixtures for interval-sync.

Provides step lists and mock form callbacks so the synchronizer can be
exercised without any UI harness.
"""

import sys
from pathlib import Path
from typing import List
from unittest.mock import MagicMock

import pytest

# Repo root: .../interval-sync
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import interval_sync...`
for p in {ROOT, SRC}:
    p_str = str(p)
    if p_str not in sys.path:
        sys.path.insert(0, p_str)

from interval_sync.models import IntervalControls, IntervalStep
from factories import make_steps


# ---------------------------------------------------------------------------
# Sample Data Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def controls() -> IntervalControls:
    """Controls with both effort and recovery values set."""
    return IntervalControls(
        repetition_count=3,
        effort_duration="01:00",
        recovery_duration="00:30",
    )


@pytest.fixture
def three_rep_steps() -> List[IntervalStep]:
    """warmup + 3 efforts separated by recoveries + cooldown."""
    return make_steps(
        "warmup", "effort", "recovery", "effort", "recovery", "effort", "cooldown"
    )


# ---------------------------------------------------------------------------
# Form callback mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def replace() -> MagicMock:
    return MagicMock()


@pytest.fixture
def on_entry_mode_change() -> MagicMock:
    return MagicMock()
