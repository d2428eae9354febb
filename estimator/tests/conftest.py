"""Pytest configuration and shared fixtures for estimator tests."""

import os
import sys
from datetime import datetime, timezone

import pytest


# ============================================================================
# Ensure local imports work (config/, models/, services/, validators/)
# ============================================================================
#
# The codebase uses absolute imports like `from models...` / `from services...`.
# This guarantees that `estimator/` is importable as the top-level module root.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


# ============================================================================
# Time
# ============================================================================

FIXED_NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    """The instant every payment test treats as "now"."""
    return FIXED_NOW


@pytest.fixture
def fixed_clock():
    """Clock callable returning FIXED_NOW."""
    return lambda: FIXED_NOW


# ============================================================================
# Engine building blocks
# ============================================================================

@pytest.fixture
def diagnostics():
    """Fresh diagnostics collector."""
    from models.diagnostics import Diagnostics

    return Diagnostics()


@pytest.fixture
def resolver():
    from services.unit_resolver import UnitResolver

    return UnitResolver()


@pytest.fixture
def evaluator(resolver):
    from services.cost_evaluator import CostEvaluator

    return CostEvaluator(resolver)


@pytest.fixture
def make_engine(fixed_clock):
    """Factory building a CalculatorEngine with a fixed clock and no timeout."""
    from services.calculator_engine import CalculatorEngine

    def _make(categories=None, settings=None, **kwargs):
        options = {"timeoutMs": 0, **kwargs.pop("options", {})}
        kwargs.setdefault("clock", fixed_clock)
        return CalculatorEngine(
            categories if categories is not None else [],
            settings if settings is not None else {},
            options=options,
            **kwargs
        )

    return _make


@pytest.fixture
def bathroom_engine(make_engine):
    from tests.fixtures.mock_project_data import get_bathroom_categories

    return make_engine(get_bathroom_categories(), {})
