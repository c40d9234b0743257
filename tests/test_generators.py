"""Tests for synthetic listing and position generators."""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from invest_engine.exceptions import InvalidInputError, UnknownCategoryError
from invest_engine.generators.investment import PositionGenerator, PropertyListingGenerator
from invest_engine.store import PropertyListing


@pytest.fixture
def listing() -> PropertyListing:
    return PropertyListing(
        property_id="prop-gen-001",
        name="Corniche Medical",
        category_id="medical",
        property_value=10_000_000_00,
    )


class TestPropertyListingGenerator:
    """Tests for PropertyListingGenerator."""

    def test_generate_for_category(self, seed: int) -> None:
        gen = PropertyListingGenerator(seed=seed)

        listing = gen.generate("hotel")

        low, high = PropertyListingGenerator.VALUE_RANGES["hotel"]
        assert listing.category_id == "hotel"
        assert listing.name.endswith("Hotel")
        assert low * 100 <= listing.property_value <= high * 100
        assert listing.property_value % 1000_00 == 0

    def test_random_category_is_known(self, seed: int, yield_model) -> None:
        gen = PropertyListingGenerator(seed=seed, yield_model=yield_model)

        for _ in range(20):
            assert gen.generate().category_id in yield_model

    def test_unknown_category(self, seed: int) -> None:
        with pytest.raises(UnknownCategoryError):
            PropertyListingGenerator(seed=seed).generate("warehouse")

    def test_reproducible(self, seed: int) -> None:
        first = PropertyListingGenerator(seed=seed).generate()
        second = PropertyListingGenerator(seed=seed).generate()

        assert first == second


class TestPositionGenerator:
    """Tests for PositionGenerator."""

    def test_amounts_sum_to_sold_value(self, seed: int, listing: PropertyListing) -> None:
        positions = PositionGenerator(seed=seed).generate_for_property(listing, 25, sold_ratio=0.85)

        assert len(positions) == 25
        assert sum(p.amount_invested for p in positions) == 8_500_000_00
        assert all(p.amount_invested >= 100_00 for p in positions)
        assert all(p.property_id == listing.property_id for p in positions)

    def test_fractions_never_exceed_sold_share(self, seed: int, listing: PropertyListing) -> None:
        positions = PositionGenerator(seed=seed).generate_for_property(listing, 7, sold_ratio=1.0)

        total = sum(p.ownership_fraction for p in positions)
        assert total <= Decimal(1)
        assert Decimal(1) - total < Decimal("1e-18")

    def test_positions_confirmed_in_past(self, seed: int, listing: PropertyListing) -> None:
        positions = PositionGenerator(seed=seed).generate_for_property(listing, 5)

        assert all(p.confirmed_at < datetime.now() for p in positions)
        assert all(p.is_active() for p in positions)

    def test_confirmed_before_as_of(self, seed: int, listing: PropertyListing) -> None:
        as_of = datetime(2022, 6, 30)

        positions = PositionGenerator(seed=seed).generate_for_property(listing, 8, as_of=as_of)

        assert all(as_of - timedelta(days=720) <= p.confirmed_at <= as_of - timedelta(days=30) for p in positions)
        assert all(p.is_active(as_of) for p in positions)

    def test_investor_pool(self, seed: int, listing: PropertyListing) -> None:
        pool = ["inv-1", "inv-2"]

        positions = PositionGenerator(seed=seed).generate_for_property(listing, 10, investor_ids=pool)

        assert {p.investor_id for p in positions} <= set(pool)
        assert len({p.position_id for p in positions}) == 10

    @pytest.mark.parametrize(
        ("num_positions", "sold_ratio"),
        [(0, 0.5), (5, 0.0), (5, 1.5)],
    )
    def test_invalid_arguments(self, seed: int, listing: PropertyListing, num_positions: int, sold_ratio: float) -> None:
        with pytest.raises(InvalidInputError):
            PositionGenerator(seed=seed).generate_for_property(listing, num_positions, sold_ratio=sold_ratio)

    def test_minimum_not_fundable(self, seed: int) -> None:
        small = PropertyListing(property_id="p", name="Small", category_id="residential", property_value=1000_00)

        with pytest.raises(InvalidInputError, match="cannot fund"):
            PositionGenerator(seed=seed).generate_for_property(small, 20, sold_ratio=0.5)
