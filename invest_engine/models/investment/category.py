"""Property category yield configuration."""

from dataclasses import dataclass
from decimal import Decimal

from invest_engine.exceptions import InvalidInputError


@dataclass(frozen=True)
class YieldRange:
    """Expected band for a category's rental yield."""

    min: Decimal
    max: Decimal


@dataclass(frozen=True)
class PropertyCategory:
    """Yield profile for a class of property.

    All rates are fractions (``Decimal("0.10")`` for 10%). Fees are a share
    of gross rent; other costs are a share of property value per year.
    """

    category_id: str
    name: str
    base_rental_yield: Decimal
    yield_range: YieldRange
    management_fee_rate: Decimal
    other_cost_rate: Decimal
    annual_yield_growth_rate: Decimal
    annual_appreciation_rate: Decimal
    min_investment: int = 100_00  # Minor units
    description: str = ""

    def validate(self) -> None:
        """Check rate bounds and the yield range.

        Raises
        ------
        InvalidInputError
            If a rate is out of ``[0, 1]`` or the base yield is outside
            its range.
        """
        bounded = {
            "base_rental_yield": self.base_rental_yield,
            "management_fee_rate": self.management_fee_rate,
            "other_cost_rate": self.other_cost_rate,
            "annual_yield_growth_rate": self.annual_yield_growth_rate,
        }
        for name, rate in bounded.items():
            if not Decimal(0) <= rate <= Decimal(1):
                raise InvalidInputError(f"{self.category_id}: {name} must be within [0, 1], got {rate}")

        # Appreciation may exceed 100% in theory
        if self.annual_appreciation_rate < 0:
            raise InvalidInputError(
                f"{self.category_id}: annual_appreciation_rate must be non-negative, "
                f"got {self.annual_appreciation_rate}"
            )

        if self.yield_range.min > self.yield_range.max:
            raise InvalidInputError(f"{self.category_id}: yield range min exceeds max")

        if not self.yield_range.min <= self.base_rental_yield <= self.yield_range.max:
            raise InvalidInputError(
                f"{self.category_id}: base_rental_yield {self.base_rental_yield} outside "
                f"[{self.yield_range.min}, {self.yield_range.max}]"
            )
