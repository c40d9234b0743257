"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from invest_engine.economics.yield_model import YieldModel
from invest_engine.models.investment import PropertyCategory, YieldRange


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def yield_model() -> YieldModel:
    """Yield model with the built-in categories."""
    return YieldModel()


@pytest.fixture
def commercial() -> PropertyCategory:
    """Category with 10% yield, 8% fees, 2% costs, 10% growth, 15% appreciation."""
    return PropertyCategory(
        category_id="commercial",
        name="Commercial",
        base_rental_yield=Decimal("0.10"),
        yield_range=YieldRange(min=Decimal("0.08"), max=Decimal("0.12")),
        management_fee_rate=Decimal("0.08"),
        other_cost_rate=Decimal("0.02"),
        annual_yield_growth_rate=Decimal("0.10"),
        annual_appreciation_rate=Decimal("0.15"),
    )


@pytest.fixture
def sample_property_id() -> str:
    """Sample property ID."""
    return "prop-test-001"

