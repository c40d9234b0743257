"""Investment position generator."""

import random
from datetime import datetime, timedelta
from decimal import ROUND_DOWN, Decimal
from fractions import Fraction

from invest_engine.economics.distribution import apportion
from invest_engine.economics.money import precise_context
from invest_engine.exceptions import InvalidInputError
from invest_engine.generators.base import BaseGenerator
from invest_engine.models.investment import InvestmentPosition
from invest_engine.store.investment import PropertyListing

# Ownership fractions are truncated so they never sum above the sold share
FRACTION_QUANTUM = Decimal("1e-20")


class PositionGenerator(BaseGenerator):
    """Generate confirmed positions that sell part or all of a property."""

    def generate_for_property(
        self,
        listing: PropertyListing,
        num_positions: int,
        sold_ratio: float = 0.85,
        investor_ids: list[str] | None = None,
        min_investment: int = 100_00,
        as_of: datetime | None = None,
    ) -> list[InvestmentPosition]:
        """Generate positions for a listing.

        Parameters
        ----------
        listing : PropertyListing
            Property being invested in.
        num_positions : int
            Number of positions to create.
        sold_ratio : float
            Share of the property value sold to investors (0.0 to 1.0).
        investor_ids : list[str] | None
            Investors to draw from; one new investor per position when
            omitted. Drawing from a small pool gives investors several
            positions.
        min_investment : int
            Minimum amount per position, in minor units.
        as_of : datetime | None
            Positions are confirmed 30 to 720 days before this moment
            (default: now).

        Returns
        -------
        list[InvestmentPosition]
            Positions whose amounts sum to the sold value.
        """
        if num_positions < 1:
            raise InvalidInputError("num_positions must be at least 1")
        if not 0 < sold_ratio <= 1:
            raise InvalidInputError(f"sold_ratio must be within (0, 1], got {sold_ratio}")

        with precise_context():
            sold_value = int(Decimal(listing.property_value) * Decimal(str(sold_ratio)))
        if sold_value < min_investment * num_positions:
            raise InvalidInputError(
                f"Sold value {sold_value} cannot fund {num_positions} positions of {min_investment}"
            )

        # Each position gets the minimum plus a random share of the rest
        weights = [Fraction(random.randint(1, 100)) for _ in range(num_positions)]
        extras = apportion(sold_value - min_investment * num_positions, weights, [(i,) for i in range(num_positions)])

        confirmed_before = as_of or datetime.now()
        positions = []
        for extra in extras:
            amount = min_investment + extra
            with precise_context():
                fraction = (Decimal(amount) / Decimal(listing.property_value)).quantize(
                    FRACTION_QUANTUM, rounding=ROUND_DOWN
                )
            investor_id = random.choice(investor_ids) if investor_ids else self.fake.uuid4()
            positions.append(
                InvestmentPosition(
                    position_id=self.fake.uuid4(),
                    investor_id=investor_id,
                    property_id=listing.property_id,
                    amount_invested=amount,
                    ownership_fraction=fraction,
                    confirmed_at=confirmed_before - timedelta(days=random.randint(30, 720)),
                )
            )
        return positions
